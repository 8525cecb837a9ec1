"""Admin diagnostic run orchestration.

This module runs the fixed, ordered list of checks against the backend
collaborators. Checks are awaited one at a time; a failing check never
stops the run.
"""

import logging
from collections.abc import Sequence
from typing import Any

from .models import CheckOutcome, TestResult, TestSummary
from .ports import (
    AuthPort,
    ConfigSourcePort,
    DatabasePort,
    DiagnosticsPort,
    EdgeFunctionPort,
    RuntimeCapabilitiesPort,
    StoragePort,
    SyncServicePort,
)
from .runner import TestRunner

logger = logging.getLogger(__name__)

DEFAULT_TABLES: tuple[str, ...] = (
    "profiles",
    "events",
    "members",
    "donations",
    "testimonials",
    "prayer_requests",
    "sermons",
    "gallery",
    "appointments",
    "site_settings",
    "stripe_settings",
    "email_settings",
    "email_subscribers",
    "email_templates",
    "email_campaigns",
)


def function_display_name(function_name: str) -> str:
    """Turn a function slug such as "admin-dashboard" into "Admin Dashboard"."""
    words = function_name.replace("_", "-").split("-")
    return " ".join(word.capitalize() for word in words if word)


class AdminDiagnosticsService(DiagnosticsPort):
    """Implements the admin diagnostic run.

    This service orchestrates, in order:
    - Database reachability and per-table access
    - Storage bucket listing
    - Authentication session presence
    - Data sync service status
    - Edge function invocation
    - Dashboard statistics
    - Required configuration values
    - Runtime capabilities

    Each service instance owns its own TestRunner, so separate admin
    surfaces never share result state.
    """

    def __init__(
        self,
        database: DatabasePort,
        storage: StoragePort,
        auth: AuthPort,
        sync: SyncServicePort,
        functions: EdgeFunctionPort,
        config: ConfigSourcePort,
        runtime: RuntimeCapabilitiesPort,
        tables: Sequence[str] = DEFAULT_TABLES,
        storage_bucket: str = "images",
        edge_function: str = "admin-operations",
        required_env_vars: Sequence[str] = ("SUPABASE_URL", "SUPABASE_ANON_KEY"),
        required_capabilities: Sequence[str] = ("ssl", "sqlite3", "zoneinfo"),
        runner: TestRunner | None = None,
    ):
        self.database = database
        self.storage = storage
        self.auth = auth
        self.sync = sync
        self.functions = functions
        self.config = config
        self.runtime = runtime
        self.tables = tuple(tables)
        self.storage_bucket = storage_bucket
        self.edge_function = edge_function
        self.required_env_vars = tuple(required_env_vars)
        self.required_capabilities = tuple(required_capabilities)
        self.runner = runner if runner is not None else TestRunner()

    async def run_admin_tests(self) -> list[TestResult]:
        """Run every check in order and return the ordered results."""
        self.runner.clear_results()
        logger.info("Starting admin diagnostics run")

        await self.runner.run_test("Database Connection", self._check_database)

        for table in self.tables:
            await self.runner.run_test(
                f"Table Access: {table}", self._table_check(table)
            )

        await self.runner.run_test("Storage Bucket Access", self._check_storage)
        await self.runner.run_test("Authentication Status", self._check_session)
        await self.runner.run_test("Data Sync Service", self._check_sync_status)
        await self.runner.run_test(
            f"Edge Function: {function_display_name(self.edge_function)}",
            self._check_edge_function,
        )
        await self.runner.run_test(
            "Admin Helper: Dashboard Stats", self._check_dashboard_stats
        )
        await self.runner.run_test("Environment Variables", self._check_environment)
        await self.runner.run_test(
            "Runtime Capabilities", self._check_capabilities
        )

        self._log_summary()
        return self.runner.get_results()

    def get_results(self) -> list[TestResult]:
        return self.runner.get_results()

    def get_test_summary(self) -> TestSummary:
        return self.runner.get_test_summary()

    def get_failed_tests(self) -> list[TestResult]:
        return self.runner.get_failed_tests()

    def get_warning_tests(self) -> list[TestResult]:
        return self.runner.get_warning_tests()

    async def _check_database(self) -> None:
        await self.database.ping()

    def _table_check(self, table: str):
        async def check() -> None:
            await self.database.check_table(table)

        return check

    async def _check_storage(self) -> None:
        await self.storage.list_bucket(self.storage_bucket, limit=1)

    async def _check_session(self) -> CheckOutcome | None:
        session = await self.auth.get_session()
        if session is None:
            return CheckOutcome.warning("No active session found")
        return None

    async def _check_sync_status(self) -> CheckOutcome | None:
        status = self.sync.get_status()
        if not status.is_active:
            return CheckOutcome.warning("Data sync service is inactive")
        if status.errors > 0:
            return CheckOutcome.warning(
                f"Data sync service reported {status.errors} errors"
            )
        return None

    async def _check_edge_function(self) -> None:
        await self.functions.invoke(
            self.edge_function, {"operation": "getDashboardStats"}
        )

    async def _check_dashboard_stats(self) -> CheckOutcome | None:
        try:
            stats: dict[str, Any] = await self.sync.get_dashboard_stats()
        except Exception as e:
            return CheckOutcome.warning(
                f"Dashboard statistics unavailable: {e}", error=e
            )
        logger.debug(f"Loaded dashboard stats: {len(stats)} metrics")
        return None

    async def _check_environment(self) -> CheckOutcome | None:
        missing = [
            name for name in self.required_env_vars if not self.config.get(name)
        ]
        if missing:
            return CheckOutcome.failed(
                f"Missing required environment variables: {', '.join(missing)}"
            )
        return None

    async def _check_capabilities(self) -> CheckOutcome | None:
        missing = [
            name
            for name in self.required_capabilities
            if not self.runtime.has_capability(name)
        ]
        if missing:
            return CheckOutcome.warning(
                f"Missing runtime capabilities: {', '.join(missing)}"
            )
        return None

    def _log_summary(self) -> None:
        summary = self.runner.get_test_summary()
        logger.info(
            f"Admin diagnostics complete: {summary.total} total, "
            f"{summary.passed} passed, {summary.failed} failed, "
            f"{summary.warnings} warnings"
        )
        for result in self.runner.get_failed_tests():
            logger.info(f"Failed: {result.name}: {result.message}")
        for result in self.runner.get_warning_tests():
            logger.info(f"Warning: {result.name}: {result.message}")
