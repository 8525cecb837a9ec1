"""Stdout report adapter.

Implements ReportPort by printing a diagnostic run to the terminal with
human-readable formatting, grouped by category.
"""

import asyncio
import logging

from vespers.core.categorizer import group_results_by_category
from vespers.core.models import TestResult, TestStatus, TestSummary
from vespers.core.ports import ReportPort

logger = logging.getLogger(__name__)

STATUS_MARKERS = {
    TestStatus.PASS: "[PASS]",
    TestStatus.WARNING: "[WARN]",
    TestStatus.FAIL: "[FAIL]",
}


class StdoutReportAdapter(ReportPort):
    """Prints diagnostic runs to stdout."""

    def __init__(self, verbose: bool = False):
        """Initialize stdout report adapter.

        Args:
            verbose: If True, include raw error details under each result.
        """
        self.verbose = verbose

    async def report(self, results: list[TestResult], summary: TestSummary) -> None:
        """Print the full report for a run."""
        await asyncio.to_thread(print, self.render(results, summary))

    def render(self, results: list[TestResult], summary: TestSummary) -> str:
        sections = [
            self._format_header(summary),
            self._format_categories(results),
            self._format_attention(results),
            self._format_footer(),
        ]
        return "\n".join(section for section in sections if section)

    @staticmethod
    def _format_header(summary: TestSummary) -> str:
        """Format the report header."""
        lines = [
            "=" * 80,
            "ADMIN DIAGNOSTICS",
            "=" * 80,
            f"Total: {summary.total}",
            f"Passed: {summary.passed}",
            f"Failed: {summary.failed}",
            f"Warnings: {summary.warnings}",
        ]
        return "\n".join(lines)

    def _format_categories(self, results: list[TestResult]) -> str:
        lines: list[str] = []
        for category, items in group_results_by_category(results).items():
            lines.extend(["", "-" * 80, category.upper(), "-" * 80])
            for result in items:
                lines.append(
                    f"{STATUS_MARKERS[result.status]} {result.name}: {result.message}"
                )
                if self.verbose and result.error is not None:
                    lines.append(f"       {result.error!r}")
        return "\n".join(lines)

    @staticmethod
    def _format_attention(results: list[TestResult]) -> str:
        """List failed checks, then warnings."""
        failed = [r for r in results if r.status == TestStatus.FAIL]
        warnings = [r for r in results if r.status == TestStatus.WARNING]

        lines: list[str] = []
        if failed:
            lines.extend(["", "FAILED CHECKS:"])
            lines.extend(f"  - {r.name}: {r.message}" for r in failed)
        if warnings:
            lines.extend(["", "WARNINGS:"])
            lines.extend(f"  - {r.name}: {r.message}" for r in warnings)
        return "\n".join(lines)

    @staticmethod
    def _format_footer() -> str:
        return "\n" + "=" * 80
