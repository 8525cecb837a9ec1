"""Composition root for the Vespers admin diagnostics.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Core service initialization
- Entry point selection (one-shot CLI, interactive CLI, HTTP server)
"""

import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from typing import Any

from vespers.adapters.cli.commands import CLICommandHandler
from vespers.adapters.environment.runtime import (
    EnvironmentConfigSource,
    PythonRuntimeCapabilities,
)
from vespers.adapters.report.markdown import MarkdownReportAdapter
from vespers.adapters.report.stdout import StdoutReportAdapter
from vespers.adapters.server.api import DiagnosticsAPI
from vespers.adapters.server.http_server import DiagnosticsHTTPServer
from vespers.adapters.supabase.rest import SupabaseRestAdapter
from vespers.adapters.sync.local import DataSyncService
from vespers.config import Settings, load_settings
from vespers.core.diagnostics_service import AdminDiagnosticsService
from vespers.core.ports import ReportPort
from vespers.core.runner import TestRunner


@dataclass
class Application:
    """Wired components of a running application."""

    diagnostics: AdminDiagnosticsService
    supabase: SupabaseRestAdapter
    reporter: ReportPort
    sync: DataSyncService | None = None

    async def close(self) -> None:
        if self.sync is not None:
            self.sync.stop()
        await self.supabase.close()


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def build_application(settings: Settings) -> Application:
    """Instantiate adapters and core services from settings."""
    logger = logging.getLogger(__name__)

    supabase = SupabaseRestAdapter(
        url=settings.supabase_url,
        anon_key=settings.supabase_anon_key,
        access_token=settings.supabase_access_token,
        probe_table=settings.database_probe_table,
        timeout=settings.supabase_timeout_seconds,
    )
    logger.info(f"Supabase adapter: {settings.supabase_url}")

    async def load_dashboard_stats() -> dict[str, Any]:
        return await supabase.invoke(
            settings.dashboard_stats_function,
            {"operation": "getDashboardStats"},
        )

    sync = DataSyncService(stats_loader=load_dashboard_stats)

    # Values loaded from .env count as present for the environment check
    config_source = EnvironmentConfigSource(
        defaults={
            "SUPABASE_URL": settings.supabase_url,
            "SUPABASE_ANON_KEY": settings.supabase_anon_key,
        }
    )

    reporter: ReportPort
    if settings.report_backend == "markdown":
        reporter = MarkdownReportAdapter(report_dir=settings.report_output_dir)
        logger.info(f"Report adapter: Markdown ({settings.report_output_dir})")
    else:
        reporter = StdoutReportAdapter(verbose=settings.debug)
        logger.info("Report adapter: Stdout")

    diagnostics = AdminDiagnosticsService(
        database=supabase,
        storage=supabase,
        auth=supabase,
        sync=sync,
        functions=supabase,
        config=config_source,
        runtime=PythonRuntimeCapabilities(),
        tables=settings.diagnostic_tables,
        storage_bucket=settings.storage_bucket,
        edge_function=settings.edge_function_name,
        required_env_vars=settings.required_env_vars,
        required_capabilities=settings.required_capabilities,
        runner=TestRunner(check_timeout=settings.check_timeout_seconds),
    )

    return Application(
        diagnostics=diagnostics, supabase=supabase, reporter=reporter, sync=sync
    )


async def run_once(app: Application) -> int:
    """Run diagnostics once, report, and return the process exit code."""
    results = await app.diagnostics.run_admin_tests()
    summary = app.diagnostics.get_test_summary()
    await app.reporter.report(results, summary)
    return 1 if summary.failed > 0 else 0


async def _run_cli_interactive(cli_handler: CLICommandHandler) -> None:
    """Run interactive CLI loop.

    Provides a REPL-like interface for diagnostic commands.
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting interactive CLI. Type 'help' for available commands or 'exit' to quit.")

    loop = asyncio.get_running_loop()

    while True:
        try:
            command_line = await loop.run_in_executor(None, input, "vespers> ")
            command_line = command_line.strip()

            if not command_line:
                continue

            if command_line.lower() == "exit":
                logger.info("Exiting CLI")
                break

            if command_line.lower() == "help":
                _print_cli_help()
                continue

            parts = command_line.split(maxsplit=1)
            command = parts[0].lower()
            args_str = parts[1] if len(parts) > 1 else ""

            try:
                args = json.loads(args_str) if args_str else {}
            except json.JSONDecodeError:
                logger.error("Invalid JSON arguments. Use 'help' for command syntax.")
                continue

            try:
                result = await _execute_cli_command(cli_handler, command, args)
                print(json.dumps(result, indent=2, default=str))
            except Exception as e:
                logger.error(f"Command execution error: {e}", exc_info=True)
                print(json.dumps({"status": "error", "message": str(e)}, indent=2))

        except EOFError:
            logger.info("EOF received, exiting CLI")
            break
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            continue


async def _execute_cli_command(
    cli_handler: CLICommandHandler,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Execute a CLI command.

    Raises:
        ValueError: If command is not recognized.
    """
    if command == "run":
        return await cli_handler.run_diagnostics(
            output_format=args.get("format", "json"),
        )
    elif command == "summary":
        return await cli_handler.get_summary()
    elif command == "failures":
        return await cli_handler.list_failures(
            include_warnings=args.get("include_warnings", False),
        )
    else:
        raise ValueError(f"Unknown command: {command}. Use 'help' for available commands.")


def _print_cli_help() -> None:
    """Print CLI help message."""
    help_text = """
Available Commands (JSON format):

  run
    Run every diagnostic check.
    Optional: format ("json" or "text")

    Example: run {"format": "text"}

  summary
    Show pass/fail/warning counts for the latest run.

  failures
    List failed checks from the latest run.
    Optional: include_warnings

    Example: failures {"include_warnings": true}

  help
    Show this help message.

  exit
    Exit the CLI.
    """
    print(help_text)


async def bootstrap(settings: Settings | None = None) -> int:
    """Load configuration, wire adapters, and run the selected mode.

    Returns:
        Process exit code.
    """
    settings = settings or load_settings()

    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading Vespers admin diagnostics...")

    app = build_application(settings)
    logger.info(f"Starting in {settings.run_mode} mode...")

    try:
        if settings.run_mode == "cli":
            return await run_once(app)

        elif settings.run_mode == "interactive":
            await _run_cli_interactive(CLICommandHandler(app.diagnostics))
            return 0

        elif settings.run_mode == "server":
            http_server = DiagnosticsHTTPServer(
                api=DiagnosticsAPI(app.diagnostics),
                host=settings.server_host,
                port=settings.server_port,
                api_key=settings.server_api_key or None,
                require_auth=settings.server_require_auth,
            )
            await http_server.start()
            try:
                while True:
                    await asyncio.sleep(1)
            finally:
                await http_server.stop()

        else:
            logger.error(f"Unknown run mode: {settings.run_mode}")
            return 1

    finally:
        await app.close()


def main() -> None:
    """Application entry point.

    Exit codes:
        0: All checks passed (warnings allowed) or clean shutdown
        1: At least one check failed, or a fatal error occurred
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        exit_code = asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except asyncio.CancelledError:
        logger.info("Graceful shutdown completed")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
