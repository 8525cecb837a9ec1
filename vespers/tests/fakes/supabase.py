"""Fake Supabase-facing port implementations for testing."""

from typing import Any

from vespers.core.ports import AuthPort, DatabasePort, EdgeFunctionPort, StoragePort


class FakeDatabasePort(DatabasePort):
    """In-memory database for testing.

    Tables listed in ``missing_tables`` raise on access; ``ping_error``
    makes the reachability probe raise.
    """

    def __init__(self) -> None:
        self.missing_tables: dict[str, Exception] = {}
        self.ping_error: Exception | None = None
        self.ping_call_count = 0
        self.checked_tables: list[str] = []

    def fail_table(self, table: str, error: Exception | None = None) -> None:
        self.missing_tables[table] = error or RuntimeError(
            f'relation "public.{table}" does not exist'
        )

    async def ping(self) -> None:
        self.ping_call_count += 1
        if self.ping_error:
            raise self.ping_error

    async def check_table(self, table: str) -> None:
        self.checked_tables.append(table)
        if table in self.missing_tables:
            raise self.missing_tables[table]


class FakeStoragePort(StoragePort):
    """In-memory storage with configurable bucket contents."""

    def __init__(self) -> None:
        self.buckets: dict[str, list[dict[str, Any]]] = {"images": []}
        self.error: Exception | None = None
        self.listed_buckets: list[str] = []

    async def list_bucket(self, bucket: str, limit: int = 1) -> list[dict[str, Any]]:
        self.listed_buckets.append(bucket)
        if self.error:
            raise self.error
        if bucket not in self.buckets:
            raise RuntimeError("Bucket not found")
        return self.buckets[bucket][:limit]


class FakeAuthPort(AuthPort):
    """Auth provider returning a canned session (or none)."""

    def __init__(self, session: dict[str, Any] | None = None) -> None:
        self.session = session
        self.error: Exception | None = None
        self.get_session_call_count = 0

    async def get_session(self) -> dict[str, Any] | None:
        self.get_session_call_count += 1
        if self.error:
            raise self.error
        return self.session


class FakeEdgeFunctionPort(EdgeFunctionPort):
    """Records invocations and returns canned responses."""

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.errors: dict[str, Exception] = {}
        self.invocations: list[tuple[str, dict[str, Any] | None]] = []

    async def invoke(
        self, function_name: str, payload: dict[str, Any] | None = None
    ) -> Any:
        self.invocations.append((function_name, payload))
        if function_name in self.errors:
            raise self.errors[function_name]
        return self.responses.get(function_name, {"ok": True})
