"""Request handling for the diagnostics HTTP endpoints.

Translates HTTP-level requests into DiagnosticsPort calls and returns
JSON-serializable payloads. Transport concerns live in http_server.
"""

import asyncio
import logging
from typing import Any

from vespers.core.categorizer import group_results_by_category
from vespers.core.ports import DiagnosticsPort

logger = logging.getLogger(__name__)


class DiagnosticsAPI:
    """Serves diagnostic runs to the admin UI.

    Runs are serialized with a lock so overlapping requests never
    interleave checks on the same runner.
    """

    def __init__(self, diagnostics: DiagnosticsPort):
        self.diagnostics = diagnostics
        self._run_lock = asyncio.Lock()

    async def handle_run_request(self) -> dict[str, Any]:
        """Run all checks and return results, categories and summary."""
        async with self._run_lock:
            results = await self.diagnostics.run_admin_tests()
            summary = self.diagnostics.get_test_summary()

        logger.info(
            "Diagnostics run triggered via HTTP",
            extra={"total": summary.total, "failed": summary.failed},
        )
        categories = group_results_by_category(results)
        return {
            "status": "success",
            "operation": "run_diagnostics",
            "summary": summary.to_dict(),
            "results": [r.to_dict() for r in results],
            "categories": {
                category: [r.to_dict() for r in items]
                for category, items in categories.items()
            },
        }

    async def handle_summary_request(self) -> dict[str, Any]:
        """Return the summary of the latest run."""
        return {
            "status": "success",
            "operation": "summary",
            "summary": self.diagnostics.get_test_summary().to_dict(),
        }
