"""Command-line interface adapters.

Provides CLI commands for running the admin diagnostics:
- run: Execute every check and print the results
- summary: Report counts for the latest run
- failures: List failed (and optionally warning) checks
"""
