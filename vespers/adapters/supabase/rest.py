"""Supabase REST adapter.

Implements DatabasePort, StoragePort, AuthPort and EdgeFunctionPort by
calling the Supabase HTTP APIs directly:

- PostgREST (/rest/v1) for database and table probes
- Storage (/storage/v1) for bucket listing
- GoTrue (/auth/v1) for the current session's user
- Functions (/functions/v1) for edge function invocation
"""

import logging
from typing import Any

import httpx

from vespers.core.ports import AuthPort, DatabasePort, EdgeFunctionPort, StoragePort

logger = logging.getLogger(__name__)


class SupabaseRestAdapter(DatabasePort, StoragePort, AuthPort, EdgeFunctionPort):
    """Supabase-backed collaborator adapter via REST API."""

    def __init__(
        self,
        url: str,
        anon_key: str,
        access_token: str = "",
        probe_table: str = "profiles",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize Supabase adapter.

        Args:
            url: Supabase project URL (e.g., https://xyz.supabase.co)
            anon_key: Public anon API key sent with every request
            access_token: Optional user access token; when empty there is
                no session and requests are made with the anon key
            probe_table: Table used by ping() for the reachability probe
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.access_token = access_token
        self.probe_table = probe_table
        self.client = httpx.AsyncClient(
            base_url=self.url,
            headers=self._get_headers(),
            timeout=timeout,
            transport=transport,
        )

    def _get_headers(self) -> dict[str, str]:
        """Build request headers."""
        headers = {"Content-Type": "application/json"}
        if self.anon_key:
            headers["apikey"] = self.anon_key
        bearer = self.access_token or self.anon_key
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.client.aclose()

    async def close(self) -> None:
        """Close the httpx client and clean up resources."""
        await self.client.aclose()

    async def ping(self) -> None:
        """Probe the database with a head-only count on the probe table."""
        await self._head_table(self.probe_table)

    async def check_table(self, table: str) -> None:
        """Verify the table exists and is readable."""
        await self._head_table(table)

    async def _head_table(self, table: str) -> None:
        if not self._is_valid_identifier(table):
            raise ValueError(f"Invalid table name: {table!r}")
        try:
            response = await self.client.head(
                f"/rest/v1/{table}",
                params={"select": "*"},
                headers={"Prefer": "count=exact"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Table {table} not accessible: HTTP {e.response.status_code}"
            )
            raise
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach Supabase database: {e}")
            raise

    async def list_bucket(self, bucket: str, limit: int = 1) -> list[dict[str, Any]]:
        """List up to ``limit`` objects at the root of a bucket."""
        try:
            response = await self.client.post(
                f"/storage/v1/object/list/{bucket}",
                json={"prefix": "", "limit": limit, "offset": 0},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = self._error_message(e.response)
            logger.error(f"Storage bucket {bucket} listing failed: {message}")
            raise RuntimeError(message) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach Supabase storage: {e}")
            raise

        data = response.json()
        if not isinstance(data, list):
            raise RuntimeError(f"Unexpected storage response for bucket {bucket}")
        return data

    async def get_session(self) -> dict[str, Any] | None:
        """Return the session user, or None without a valid access token."""
        if not self.access_token:
            return None
        try:
            response = await self.client.get("/auth/v1/user")
            if response.status_code in (401, 403):
                logger.info("Access token rejected; no active session")
                return None
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach Supabase auth: {e}")
            raise
        return response.json()

    async def invoke(
        self, function_name: str, payload: dict[str, Any] | None = None
    ) -> Any:
        """Invoke an edge function and return its JSON (or text) body."""
        try:
            response = await self.client.post(
                f"/functions/v1/{function_name}",
                json=payload or {},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = self._error_message(e.response)
            logger.error(f"Edge function {function_name} failed: {message}")
            raise RuntimeError(message) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to invoke edge function {function_name}: {e}")
            raise

        if "application/json" in response.headers.get("content-type", ""):
            return response.json()
        return response.text

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract a readable error message from a Supabase error response."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("message", "error", "msg"):
                if body.get(key):
                    return str(body[key])
        return f"HTTP {response.status_code}"

    @staticmethod
    def _is_valid_identifier(name: str) -> bool:
        """Table names are alphanumeric with underscores."""
        return bool(name) and name.replace("_", "").isalnum()
