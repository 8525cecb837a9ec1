"""Sequential runner for named diagnostic checks.

Executes one async check at a time, classifies how it finished and
records the result together with a running summary.
"""

import asyncio
import dataclasses
import logging
from collections.abc import Awaitable, Callable

from .models import (
    DEFAULT_PASS_MESSAGE,
    CheckOutcome,
    TestResult,
    TestStatus,
    TestSummary,
)

logger = logging.getLogger(__name__)

Check = Callable[[], Awaitable[CheckOutcome | None]]


class CheckTimeoutError(Exception):
    """A check did not finish within the runner's check_timeout."""


def describe_error(error: BaseException) -> str:
    """Return an error's message, falling back to its type name."""
    return str(error) or type(error).__name__


class TestRunner:
    """Accumulates results for one diagnostic run.

    The runner does not reset itself between run_test calls; the caller
    must call clear_results() before starting a new run.
    """

    __test__ = False

    def __init__(self, check_timeout: float | None = None):
        """Initialize an empty runner.

        Args:
            check_timeout: Optional per-check limit in seconds. None means
                checks run unbounded.
        """
        if check_timeout is not None and check_timeout <= 0:
            raise ValueError(
                f"check_timeout must be positive, got {check_timeout}"
            )
        self.check_timeout = check_timeout
        self._results: list[TestResult] = []
        self._summary = TestSummary()

    async def run_test(self, name: str, check: Check) -> TestResult:
        """Run a single check and record its outcome.

        A check passes by completing (returning None or a passing
        CheckOutcome). Raising a Warning, or returning a warning outcome,
        records a warning. Any other exception records a failure.

        Args:
            name: Display name of the check.
            check: Async zero-argument callable performing the probe.

        Returns:
            The newly recorded result.

        Raises:
            ValueError: If name is empty.
        """
        if not name or not name.strip():
            raise ValueError("name must be a non-empty string")

        try:
            outcome = await self._execute(check)
        except Warning as warning:
            result = TestResult(
                name=name,
                status=TestStatus.WARNING,
                message=describe_error(warning),
                error=warning,
            )
        except Exception as e:
            result = TestResult(
                name=name,
                status=TestStatus.FAIL,
                message=describe_error(e),
                error=e,
            )
        else:
            result = self._result_from_outcome(name, outcome)

        self._record(result)
        return result

    async def _execute(self, check: Check) -> CheckOutcome | None:
        if self.check_timeout is None:
            return await check()
        try:
            async with asyncio.timeout(self.check_timeout) as scope:
                return await check()
        except TimeoutError as e:
            # Only the runner's own deadline is relabelled
            if not scope.expired():
                raise
            raise CheckTimeoutError(
                f"Check timed out after {self.check_timeout}s"
            ) from e

    @staticmethod
    def _result_from_outcome(
        name: str, outcome: CheckOutcome | None
    ) -> TestResult:
        if outcome is None or outcome.status == TestStatus.PASS:
            message = outcome.message if outcome is not None else ""
            return TestResult(
                name=name,
                status=TestStatus.PASS,
                message=message or DEFAULT_PASS_MESSAGE,
            )
        return TestResult(
            name=name,
            status=outcome.status,
            message=outcome.message,
            error=outcome.error,
        )

    def _record(self, result: TestResult) -> None:
        self._results.append(result)
        self._summary.record(result.status)

        if result.status == TestStatus.PASS:
            logger.info(f"PASS {result.name}: {result.message}")
        elif result.status == TestStatus.WARNING:
            logger.warning(f"WARN {result.name}: {result.message}")
        else:
            logger.error(f"FAIL {result.name}: {result.message}")
            if result.error is not None:
                logger.debug(f"Error details for {result.name}: {result.error!r}")

    def get_results(self) -> list[TestResult]:
        """Return a copy of the recorded results in run order."""
        return list(self._results)

    def get_test_summary(self) -> TestSummary:
        """Return a copy of the summary counters."""
        return dataclasses.replace(self._summary)

    def get_failed_tests(self) -> list[TestResult]:
        return [r for r in self._results if r.status == TestStatus.FAIL]

    def get_warning_tests(self) -> list[TestResult]:
        return [r for r in self._results if r.status == TestStatus.WARNING]

    def clear_results(self) -> None:
        """Reset the result list and all counters."""
        self._results = []
        self._summary = TestSummary()
