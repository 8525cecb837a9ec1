"""External adapters for the Vespers admin diagnostics.

This package contains all external dependencies (Supabase over HTTP,
environment, report files, HTTP serving) and provides implementations
of the core port interfaces.

Adapter Organization:

- supabase/: Database, storage, auth and edge function probes
- sync/: In-process data sync service
- environment/: Configuration values and runtime capabilities
- report/: Rendering finished runs (stdout, markdown)
- cli/: Command-line commands
- server/: HTTP endpoints for the admin UI
"""
