"""CLI command implementations for Vespers.

Maps CLI commands (run, summary, failures) to DiagnosticsPort
operations. It handles CLI-specific formatting and error reporting.
"""

import logging
from typing import Any

from vespers.core.categorizer import group_results_by_category
from vespers.core.models import TestResult, TestStatus
from vespers.core.ports import DiagnosticsPort

logger = logging.getLogger(__name__)


class CLICommandHandler:
    """Handles CLI commands by delegating to DiagnosticsPort."""

    def __init__(self, diagnostics: DiagnosticsPort):
        """Initialize the CLI command handler.

        Args:
            diagnostics: DiagnosticsPort implementation to execute commands.
        """
        self.diagnostics = diagnostics

    async def run_diagnostics(self, output_format: str = "json") -> dict[str, Any]:
        """Run a full diagnostic pass.

        Args:
            output_format: Output format ('json', 'text'). Default 'json'.

        Returns:
            Dictionary with status, summary and results (grouped by
            category), or status/message on error.
        """
        if output_format not in ("json", "text"):
            return {
                "status": "error",
                "operation": "run_diagnostics",
                "message": f"Unsupported format: {output_format}",
            }

        results = await self.diagnostics.run_admin_tests()
        summary = self.diagnostics.get_test_summary()

        if output_format == "text":
            data: Any = self._format_results_as_text(results)
        else:
            data = {
                "results": [r.to_dict() for r in results],
                "categories": {
                    category: [r.name for r in items]
                    for category, items in group_results_by_category(results).items()
                },
            }

        return {
            "status": "success",
            "operation": "run_diagnostics",
            "summary": summary.to_dict(),
            "data": data,
        }

    async def get_summary(self) -> dict[str, Any]:
        """Return the summary of the latest run."""
        return {
            "status": "success",
            "operation": "summary",
            "summary": self.diagnostics.get_test_summary().to_dict(),
        }

    async def list_failures(self, include_warnings: bool = False) -> dict[str, Any]:
        """List failed (and optionally warning) results of the latest run."""
        wanted = {TestStatus.FAIL}
        if include_warnings:
            wanted.add(TestStatus.WARNING)
        results = [r for r in self.diagnostics.get_results() if r.status in wanted]
        return {
            "status": "success",
            "operation": "failures",
            "count": len(results),
            "results": [r.to_dict() for r in results],
        }

    @staticmethod
    def _format_results_as_text(results: list[TestResult]) -> str:
        lines = []
        for category, items in group_results_by_category(results).items():
            lines.append(f"{category}:")
            for result in items:
                lines.append(
                    f"  {result.status.value.upper():7} {result.name}: {result.message}"
                )
        return "\n".join(lines)
