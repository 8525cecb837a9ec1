"""HTTP server adapter for the diagnostics API.

Provides a simple async HTTP server using Python's built-in http.server
module and asyncio for serving diagnostic runs to the admin UI.

Supports optional API key authentication via the Authorization header
(Bearer token) or X-API-Key.
"""

import asyncio
import concurrent.futures
import hmac
import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Coroutine

from vespers.adapters.server.api import DiagnosticsAPI

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 300


def make_diagnostics_handler(
    api: DiagnosticsAPI,
    event_loop: asyncio.AbstractEventLoop,
    api_key: str | None,
    require_auth: bool,
) -> type[BaseHTTPRequestHandler]:
    """Create a request handler class bound to the given dependencies.

    Args:
        api: Diagnostics API to delegate to
        event_loop: Event loop running the diagnostics service
        api_key: Optional API key for authentication
        require_auth: Whether authentication is required

    Returns:
        A handler class configured with the provided dependencies
    """

    class DiagnosticsHTTPHandler(BaseHTTPRequestHandler):
        """HTTP request handler for diagnostics endpoints."""

        def _check_auth(self) -> bool:
            """Check if request is authenticated.

            Supports two authentication methods:
            1. Authorization: Bearer <api_key>
            2. X-API-Key: <api_key>
            """
            if not require_auth:
                return True
            if not api_key:
                return False

            auth_header = self.headers.get("Authorization", "")
            if auth_header.startswith("Bearer "):
                return hmac.compare_digest(auth_header[7:], api_key)

            api_key_header = self.headers.get("X-API-Key", "")
            if api_key_header:
                return hmac.compare_digest(api_key_header, api_key)

            return False

        def do_POST(self) -> None:
            if self.path == "/health":
                self._send_response({"status": "healthy"})
                return

            if not self._check_auth():
                self.send_error(401, "Unauthorized: invalid or missing API key")
                return

            if self.path == "/api/diagnostics/run":
                self._respond_async(api.handle_run_request())
            else:
                self.send_error(404, "Not found")

        def do_GET(self) -> None:
            # Health check is always public
            if self.path == "/health":
                self._send_response({"status": "healthy"})
                return

            if not self._check_auth():
                self.send_error(401, "Unauthorized: invalid or missing API key")
                return

            if self.path == "/api/diagnostics/summary":
                self._respond_async(api.handle_summary_request())
            else:
                self.send_error(404, "Not found")

        def _respond_async(self, coro: Coroutine[Any, Any, dict[str, Any]]) -> None:
            """Run a coroutine on the service loop and send its result."""
            future = asyncio.run_coroutine_threadsafe(coro, event_loop)
            try:
                data = future.result(timeout=REQUEST_TIMEOUT_SECONDS)
            except concurrent.futures.TimeoutError:
                # Cancelling releases the API's run lock for later requests
                future.cancel()
                logger.error(
                    f"Diagnostics request timed out after {REQUEST_TIMEOUT_SECONDS}s"
                )
                self.send_error(500, "Internal server error")
                return
            except Exception as e:
                logger.error(f"Error handling diagnostics request: {e}", exc_info=True)
                self.send_error(500, "Internal server error")
                return
            self._send_response(data)

        def _send_response(self, data: dict[str, Any]) -> None:
            """Send JSON response."""
            body = json.dumps(data).encode()
            self.send_response(200)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format: str, *args: Any) -> None:
            logger.debug(f"HTTP {self.client_address[0]}: {format % args}")

    return DiagnosticsHTTPHandler


class DiagnosticsHTTPServer:
    """Diagnostics HTTP server adapter."""

    def __init__(
        self,
        api: DiagnosticsAPI,
        host: str = "127.0.0.1",
        port: int = 8080,
        api_key: str | None = None,
        require_auth: bool = False,
    ):
        """Initialize the HTTP server.

        Args:
            api: DiagnosticsAPI instance to handle requests.
            host: Host to listen on (default 127.0.0.1).
            port: Port to listen on (default 8080).
            api_key: Optional API key for authentication.
            require_auth: Whether to require authentication.

        Raises:
            ValueError: If require_auth is set without an API key.
        """
        if require_auth and not api_key:
            raise ValueError(
                "Server configured with require_auth=True but no API key provided"
            )
        self.api = api
        self.host = host
        self.port = port
        self.api_key = api_key
        self.require_auth = require_auth
        self.server: ThreadingHTTPServer | None = None
        self._server_task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Start the HTTP server."""
        logger.info(
            f"Starting diagnostics HTTP server on {self.host}:{self.port}"
            + (" (with API key authentication)" if self.require_auth else "")
        )

        handler_class = make_diagnostics_handler(
            api=self.api,
            event_loop=asyncio.get_running_loop(),
            api_key=self.api_key,
            require_auth=self.require_auth,
        )
        self.server = ThreadingHTTPServer((self.host, self.port), handler_class)
        self._server_task = asyncio.create_task(self._run_server())
        logger.info("Diagnostics HTTP server started")

    async def _run_server(self) -> None:
        """Run the blocking server loop in a worker thread."""
        if not self.server:
            return
        try:
            await asyncio.to_thread(self.server.serve_forever)
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error(f"Diagnostics HTTP server error: {e}", exc_info=True)

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self.server:
            self.server.shutdown()
            self.server.server_close()
        if self._server_task:
            self._server_task.cancel()
            try:
                await self._server_task
            except asyncio.CancelledError:
                pass
        logger.info("Diagnostics HTTP server stopped")
