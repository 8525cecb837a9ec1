"""Unit tests for the admin diagnostics run.

Tests verify the order of checks, how each collaborator condition is
classified, and that failures never abort the run.
"""

import asyncio

import pytest

from vespers.core.categorizer import group_results_by_category
from vespers.core.diagnostics_service import (
    DEFAULT_TABLES,
    AdminDiagnosticsService,
    function_display_name,
)
from vespers.core.models import SyncStatus, TestStatus, TestSummary
from vespers.core.runner import TestRunner
from vespers.tests.fakes import (
    FakeAuthPort,
    FakeConfigSource,
    FakeDatabasePort,
    FakeEdgeFunctionPort,
    FakeRuntimeCapabilities,
    FakeStoragePort,
    FakeSyncServicePort,
)

# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def database() -> FakeDatabasePort:
    return FakeDatabasePort()


@pytest.fixture
def storage() -> FakeStoragePort:
    return FakeStoragePort()


@pytest.fixture
def auth() -> FakeAuthPort:
    return FakeAuthPort(session={"id": "admin-1", "email": "admin@example.org"})


@pytest.fixture
def sync() -> FakeSyncServicePort:
    return FakeSyncServicePort()


@pytest.fixture
def functions() -> FakeEdgeFunctionPort:
    return FakeEdgeFunctionPort()


@pytest.fixture
def config() -> FakeConfigSource:
    return FakeConfigSource(
        {"SUPABASE_URL": "https://example.supabase.co", "SUPABASE_ANON_KEY": "anon"}
    )


@pytest.fixture
def runtime() -> FakeRuntimeCapabilities:
    return FakeRuntimeCapabilities()


@pytest.fixture
def service(
    database, storage, auth, sync, functions, config, runtime
) -> AdminDiagnosticsService:
    """Service with a single table so every check yields one result."""
    return AdminDiagnosticsService(
        database=database,
        storage=storage,
        auth=auth,
        sync=sync,
        functions=functions,
        config=config,
        runtime=runtime,
        tables=["members"],
    )


EXPECTED_NAMES = [
    "Database Connection",
    "Table Access: members",
    "Storage Bucket Access",
    "Authentication Status",
    "Data Sync Service",
    "Edge Function: Admin Operations",
    "Admin Helper: Dashboard Stats",
    "Environment Variables",
    "Runtime Capabilities",
]


def result_named(results, name):
    return next(r for r in results if r.name == name)


# ============================================================================
# Run order and summary
# ============================================================================


class TestRunOrder:
    @pytest.mark.asyncio
    async def test_all_checks_pass(self, service: AdminDiagnosticsService) -> None:
        results = await service.run_admin_tests()

        assert [r.name for r in results] == EXPECTED_NAMES
        assert all(r.status == TestStatus.PASS for r in results)
        assert service.get_test_summary() == TestSummary(
            total=9, passed=9, failed=0, warnings=0
        )

    @pytest.mark.asyncio
    async def test_one_result_per_table_in_order(
        self, database, storage, auth, sync, functions, config, runtime
    ) -> None:
        service = AdminDiagnosticsService(
            database=database,
            storage=storage,
            auth=auth,
            sync=sync,
            functions=functions,
            config=config,
            runtime=runtime,
        )

        results = await service.run_admin_tests()

        table_names = [r.name for r in results if r.name.startswith("Table Access: ")]
        assert table_names == [f"Table Access: {t}" for t in DEFAULT_TABLES]
        assert database.checked_tables == list(DEFAULT_TABLES)
        assert len(results) == 8 + len(DEFAULT_TABLES)

    @pytest.mark.asyncio
    async def test_summary_invariant_holds(
        self, service: AdminDiagnosticsService, storage, sync, runtime
    ) -> None:
        storage.error = RuntimeError("bucket not found")
        sync.status = SyncStatus(is_active=False)
        runtime.missing = {"ssl"}

        results = await service.run_admin_tests()
        summary = service.get_test_summary()

        assert summary.total == summary.passed + summary.failed + summary.warnings
        assert summary.total == len(results)

    @pytest.mark.asyncio
    async def test_each_run_starts_fresh(
        self, service: AdminDiagnosticsService, storage
    ) -> None:
        storage.error = RuntimeError("bucket not found")
        await service.run_admin_tests()

        storage.error = None
        results = await service.run_admin_tests()

        assert len(results) == 9
        assert service.get_test_summary() == TestSummary(total=9, passed=9)

    @pytest.mark.asyncio
    async def test_checks_run_sequentially(
        self, database, storage, auth, sync, functions, config, runtime
    ) -> None:
        in_flight = 0
        max_in_flight = 0

        class SlowDatabase(type(database)):
            async def check_table(self, table: str) -> None:
                nonlocal in_flight, max_in_flight
                in_flight += 1
                max_in_flight = max(max_in_flight, in_flight)
                await asyncio.sleep(0.01)
                in_flight -= 1

        service = AdminDiagnosticsService(
            database=SlowDatabase(),
            storage=storage,
            auth=auth,
            sync=sync,
            functions=functions,
            config=config,
            runtime=runtime,
            tables=["members", "events", "donations"],
        )

        await service.run_admin_tests()

        assert max_in_flight == 1

    def test_owns_its_runner(self, service: AdminDiagnosticsService, database, storage,
                             auth, sync, functions, config, runtime) -> None:
        other = AdminDiagnosticsService(
            database=database,
            storage=storage,
            auth=auth,
            sync=sync,
            functions=functions,
            config=config,
            runtime=runtime,
        )

        assert service.runner is not other.runner

    @pytest.mark.asyncio
    async def test_injected_runner_is_used(
        self, database, storage, auth, sync, functions, config, runtime
    ) -> None:
        runner = TestRunner()
        service = AdminDiagnosticsService(
            database=database,
            storage=storage,
            auth=auth,
            sync=sync,
            functions=functions,
            config=config,
            runtime=runtime,
            tables=["members"],
            runner=runner,
        )

        await service.run_admin_tests()

        assert runner.get_test_summary().total == 9


# ============================================================================
# Individual check classification
# ============================================================================


class TestCheckOutcomes:
    @pytest.mark.asyncio
    async def test_end_to_end_mixed_outcomes(
        self, service: AdminDiagnosticsService, storage, auth
    ) -> None:
        storage.error = RuntimeError("bucket not found")
        auth.session = None

        await service.run_admin_tests()
        results = service.get_results()

        assert service.get_test_summary() == TestSummary(
            total=9, passed=7, failed=1, warnings=1
        )
        assert results[0].name == "Database Connection"
        assert results[0].status == TestStatus.PASS
        assert results[2].status == TestStatus.FAIL
        assert results[2].message == "bucket not found"
        assert results[3].status == TestStatus.WARNING
        assert results[3].message == "No active session found"

    @pytest.mark.asyncio
    async def test_database_unreachable_fails_but_run_continues(
        self, service: AdminDiagnosticsService, database
    ) -> None:
        database.ping_error = ConnectionError("connection refused")

        results = await service.run_admin_tests()

        assert results[0].status == TestStatus.FAIL
        assert results[0].message == "connection refused"
        assert len(results) == 9

    @pytest.mark.asyncio
    async def test_missing_table_fails(
        self, service: AdminDiagnosticsService, database
    ) -> None:
        database.fail_table("members")

        results = await service.run_admin_tests()

        table = result_named(results, "Table Access: members")
        assert table.status == TestStatus.FAIL
        assert "members" in table.message

    @pytest.mark.asyncio
    async def test_storage_uses_configured_bucket(
        self, database, storage, auth, sync, functions, config, runtime
    ) -> None:
        service = AdminDiagnosticsService(
            database=database,
            storage=storage,
            auth=auth,
            sync=sync,
            functions=functions,
            config=config,
            runtime=runtime,
            tables=["members"],
            storage_bucket="sermons",
        )

        results = await service.run_admin_tests()

        assert storage.listed_buckets == ["sermons"]
        assert result_named(results, "Storage Bucket Access").message == "Bucket not found"

    @pytest.mark.asyncio
    async def test_auth_provider_error_fails(
        self, service: AdminDiagnosticsService, auth
    ) -> None:
        auth.error = RuntimeError("auth service unavailable")

        results = await service.run_admin_tests()

        assert result_named(results, "Authentication Status").status == TestStatus.FAIL

    @pytest.mark.asyncio
    async def test_inactive_sync_service_warns(
        self, service: AdminDiagnosticsService, sync
    ) -> None:
        sync.status = SyncStatus(is_active=False)

        results = await service.run_admin_tests()

        result = result_named(results, "Data Sync Service")
        assert result.status == TestStatus.WARNING
        assert result.message == "Data sync service is inactive"

    @pytest.mark.asyncio
    async def test_sync_service_errors_warn(
        self, service: AdminDiagnosticsService, sync
    ) -> None:
        sync.status = SyncStatus(is_active=True, errors=3)

        results = await service.run_admin_tests()

        result = result_named(results, "Data Sync Service")
        assert result.status == TestStatus.WARNING
        assert result.message == "Data sync service reported 3 errors"

    @pytest.mark.asyncio
    async def test_edge_function_failure_fails(
        self, service: AdminDiagnosticsService, functions
    ) -> None:
        functions.errors["admin-operations"] = RuntimeError("Function not found")

        results = await service.run_admin_tests()

        result = result_named(results, "Edge Function: Admin Operations")
        assert result.status == TestStatus.FAIL
        assert result.message == "Function not found"
        assert functions.invocations == [
            ("admin-operations", {"operation": "getDashboardStats"})
        ]

    @pytest.mark.asyncio
    async def test_dashboard_stats_failure_is_warning(
        self, service: AdminDiagnosticsService, sync
    ) -> None:
        error = RuntimeError("timeout")
        sync.stats_error = error

        results = await service.run_admin_tests()

        result = result_named(results, "Admin Helper: Dashboard Stats")
        assert result.status == TestStatus.WARNING
        assert result.message == "Dashboard statistics unavailable: timeout"
        assert result.error is error

    @pytest.mark.asyncio
    async def test_missing_env_vars_fail_and_are_named(
        self, service: AdminDiagnosticsService, config
    ) -> None:
        config.values = {"SUPABASE_URL": "https://example.supabase.co"}

        results = await service.run_admin_tests()

        result = result_named(results, "Environment Variables")
        assert result.status == TestStatus.FAIL
        assert result.message == "Missing required environment variables: SUPABASE_ANON_KEY"

    @pytest.mark.asyncio
    async def test_missing_capabilities_warn_and_are_named(
        self, service: AdminDiagnosticsService, runtime
    ) -> None:
        runtime.missing = {"ssl", "zoneinfo"}

        results = await service.run_admin_tests()

        result = result_named(results, "Runtime Capabilities")
        assert result.status == TestStatus.WARNING
        assert result.message == "Missing runtime capabilities: ssl, zoneinfo"

    @pytest.mark.asyncio
    async def test_failed_and_warning_listings(
        self, service: AdminDiagnosticsService, storage, auth
    ) -> None:
        storage.error = RuntimeError("bucket not found")
        auth.session = None

        await service.run_admin_tests()

        assert [r.name for r in service.get_failed_tests()] == ["Storage Bucket Access"]
        assert [r.name for r in service.get_warning_tests()] == ["Authentication Status"]

    @pytest.mark.asyncio
    async def test_results_group_into_categories(
        self, service: AdminDiagnosticsService
    ) -> None:
        results = await service.run_admin_tests()

        grouped = group_results_by_category(results)

        assert {k: [r.name for r in v] for k, v in grouped.items()} == {
            "Database": ["Database Connection", "Table Access: members"],
            "Authentication": ["Authentication Status"],
            "Edge Functions": ["Edge Function: Admin Operations"],
            "Admin Helpers": ["Admin Helper: Dashboard Stats"],
            "Data Sync": ["Data Sync Service"],
            "Other": [
                "Storage Bucket Access",
                "Environment Variables",
                "Runtime Capabilities",
            ],
        }


class TestFunctionDisplayName:
    @pytest.mark.parametrize(
        ("slug", "expected"),
        [
            ("admin-dashboard", "Admin Dashboard"),
            ("admin_operations", "Admin Operations"),
            ("sermons", "Sermons"),
        ],
    )
    def test_display_name(self, slug: str, expected: str) -> None:
        assert function_display_name(slug) == expected
