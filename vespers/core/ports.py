"""Port interfaces for the Vespers admin diagnostics.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - DatabasePort: Reachability of the database and individual tables
   - StoragePort: Storage bucket listing
   - AuthPort: Current admin session
   - EdgeFunctionPort: Remote function invocation
   - SyncServicePort: Data sync service status and dashboard statistics
   - ConfigSourcePort: Configuration values by name
   - RuntimeCapabilitiesPort: Runtime feature presence
   - ReportPort: Render a finished run for an operator

2. **Driving Ports** (adapters/external systems call into core)
   - DiagnosticsPort: Entry point for a full diagnostic run
"""

from abc import ABC, abstractmethod
from typing import Any

from .models import SyncStatus, TestResult, TestSummary


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class DatabasePort(ABC):
    """Port for probing the hosted database.

    Implementations must raise on any failure to reach the database or
    the requested table; the runner turns the exception into a failed
    result.
    """

    @abstractmethod
    async def ping(self) -> None:
        """Generic reachability probe.

        Raises:
            Exception: If the database cannot be reached.
        """

    @abstractmethod
    async def check_table(self, table: str) -> None:
        """Verify a single table can be read.

        Args:
            table: Table name, e.g. "members".

        Raises:
            Exception: If the table is missing or not readable.
        """


class StoragePort(ABC):
    """Port for the object storage service."""

    @abstractmethod
    async def list_bucket(self, bucket: str, limit: int = 1) -> list[dict[str, Any]]:
        """List objects in a storage bucket.

        Args:
            bucket: Bucket name.
            limit: Maximum number of entries to return.

        Returns:
            Object metadata entries (possibly empty).

        Raises:
            Exception: If the bucket cannot be listed.
        """


class AuthPort(ABC):
    """Port for the authentication provider."""

    @abstractmethod
    async def get_session(self) -> dict[str, Any] | None:
        """Return the active session's user, or None if there is no session.

        Raises:
            Exception: If the auth provider is unreachable.
        """


class EdgeFunctionPort(ABC):
    """Port for invoking remote (edge) functions."""

    @abstractmethod
    async def invoke(
        self, function_name: str, payload: dict[str, Any] | None = None
    ) -> Any:
        """Invoke a remote function and return its decoded response.

        Raises:
            Exception: If the invocation fails.
        """


class SyncServicePort(ABC):
    """Port for the data sync service used by the admin panel."""

    @abstractmethod
    def get_status(self) -> SyncStatus:
        """Return the current service status."""

    @abstractmethod
    async def get_dashboard_stats(self) -> dict[str, Any]:
        """Fetch dashboard statistics.

        Raises:
            Exception: If statistics are unavailable.
        """


class ConfigSourcePort(ABC):
    """Port for reading configuration values by name."""

    @abstractmethod
    def get(self, name: str) -> str | None:
        """Return the configured value, or None when absent or empty."""


class RuntimeCapabilitiesPort(ABC):
    """Port for querying runtime feature presence by name."""

    @abstractmethod
    def has_capability(self, name: str) -> bool:
        """Return True if the named capability is available."""


class ReportPort(ABC):
    """Port for presenting a finished run to an operator."""

    @abstractmethod
    async def report(
        self,
        results: list[TestResult],
        summary: TestSummary,
    ) -> None:
        """Render the results and summary of a run.

        Raises:
            Exception: If the report cannot be written.
        """


# ============================================================================
# DRIVING PORTS (External systems call into core)
# ============================================================================


class DiagnosticsPort(ABC):
    """Port for triggering diagnostic runs.

    Called by the CLI, the HTTP server, or any other admin surface.
    """

    @abstractmethod
    async def run_admin_tests(self) -> list[TestResult]:
        """Run every check in order and return the ordered results.

        Never raises because of a failing check.
        """

    @abstractmethod
    def get_results(self) -> list[TestResult]:
        """Return a copy of the results of the latest run."""

    @abstractmethod
    def get_test_summary(self) -> TestSummary:
        """Return a copy of the summary of the latest run."""
