"""HTTP server exposing diagnostic runs to the admin UI."""
