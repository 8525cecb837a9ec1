"""Markdown file report adapter.

Implements ReportPort by writing each diagnostic run to a timestamped
markdown file. Useful for keeping a history of backend health checks.
"""

import asyncio
import logging
from datetime import UTC, datetime
from pathlib import Path

from vespers.core.categorizer import group_results_by_category
from vespers.core.models import TestResult, TestStatus, TestSummary
from vespers.core.ports import ReportPort

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    TestStatus.PASS: "pass",
    TestStatus.WARNING: "warning",
    TestStatus.FAIL: "**fail**",
}


class MarkdownReportAdapter(ReportPort):
    """Writes one markdown file per diagnostic run."""

    def __init__(self, report_dir: str):
        """Initialize markdown report adapter.

        Args:
            report_dir: Directory where report files are written.

        Raises:
            ValueError: If report_dir is a filesystem root.
            OSError: If the directory cannot be created.
        """
        self.base_dir = Path(report_dir).resolve()

        if self.base_dir.parent == self.base_dir:
            raise ValueError(f"report_dir cannot be a filesystem root: {report_dir}")

        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OSError(f"Failed to create report directory {report_dir}: {e}") from e
        self._lock = asyncio.Lock()
        self.last_report_path: Path | None = None

    def _report_path(self, now: datetime) -> Path:
        """Return the report file path for a run started at ``now``."""
        return self.base_dir / f"diagnostics_{now.strftime('%Y%m%d_%H%M%S_%f')}.md"

    async def report(self, results: list[TestResult], summary: TestSummary) -> None:
        """Write the run to a new markdown file."""
        now = datetime.now(UTC)
        path = self._report_path(now)
        content = self.render(results, summary, now)

        async with self._lock:
            try:
                await asyncio.to_thread(path.write_text, content, encoding="utf-8")
            except OSError as e:
                logger.error(f"Failed to write diagnostics report {path}: {e}")
                raise
        self.last_report_path = path
        logger.info(f"Diagnostics report written to {path}")

    @staticmethod
    def render(
        results: list[TestResult], summary: TestSummary, generated_at: datetime
    ) -> str:
        lines = [
            "# Admin Diagnostics Report",
            "",
            f"Generated: {generated_at.isoformat()}",
            "",
            "| Total | Passed | Failed | Warnings |",
            "|-------|--------|--------|----------|",
            f"| {summary.total} | {summary.passed} | {summary.failed} | {summary.warnings} |",
        ]

        for category, items in group_results_by_category(results).items():
            lines.extend(["", f"## {category}", ""])
            lines.extend(
                f"- {STATUS_LABELS[r.status]} `{r.name}`: {_escape(r.message)}"
                for r in items
            )

        failed = [r for r in results if r.status == TestStatus.FAIL]
        if failed:
            lines.extend(["", "## Failed Checks", ""])
            lines.extend(f"- `{r.name}`: {_escape(r.message)}" for r in failed)

        warnings = [r for r in results if r.status == TestStatus.WARNING]
        if warnings:
            lines.extend(["", "## Warnings", ""])
            lines.extend(f"- `{r.name}`: {_escape(r.message)}" for r in warnings)

        return "\n".join(lines) + "\n"


def _escape(text: str) -> str:
    """Keep messages on one line in list items."""
    return " ".join(text.split())
