"""Domain models for the Vespers admin diagnostics.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

DEFAULT_PASS_MESSAGE = "Test passed successfully"


class TestStatus(Enum):
    """Outcome of a single diagnostic check."""

    __test__ = False

    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"


class CheckWarning(UserWarning):
    """Raised by a check to report a degraded but non-fatal condition.

    The runner classifies any ``Warning`` instance as a warning outcome;
    this subclass exists so checks can raise something more specific
    than the builtin.
    """


@dataclass(frozen=True)
class TestResult:
    """Recorded outcome of one diagnostic check.

    The name is used both for display and for category matching, e.g.
    "Table Access: members" or "Edge Function: Admin Dashboard".
    """

    __test__ = False

    name: str
    status: TestStatus
    message: str
    error: Any = None  # raw failure detail, only for fail/warning

    def __post_init__(self) -> None:
        """Validate result invariants on creation."""
        if not self.name:
            raise ValueError("name must be a non-empty string")
        if self.status == TestStatus.PASS and self.error is not None:
            raise ValueError("passing results cannot carry an error")

    def to_dict(self) -> dict[str, Any]:
        """Render as a JSON-safe mapping."""
        data: dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
        }
        if self.error is not None:
            data["error"] = str(self.error) or type(self.error).__name__
        return data


@dataclass
class TestSummary:
    """Running counters for one diagnostic run.

    Note: mutable so the runner can update it in place; the runner only
    ever hands out copies.
    """

    __test__ = False

    total: int = 0
    passed: int = 0
    failed: int = 0
    warnings: int = 0

    def record(self, status: TestStatus) -> None:
        """Count one result of the given status."""
        if status == TestStatus.PASS:
            self.passed += 1
        elif status == TestStatus.FAIL:
            self.failed += 1
        else:
            self.warnings += 1
        self.total += 1

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "warnings": self.warnings,
        }


@dataclass(frozen=True)
class CheckOutcome:
    """Explicit outcome a check can return instead of raising.

    Checks that complete without returning anything pass. Returning one
    of these lets a check report a warning (or a failure with a custom
    message) without using the exception channel.
    """

    status: TestStatus
    message: str = ""
    error: Any = None

    @classmethod
    def passed(cls, message: str = DEFAULT_PASS_MESSAGE) -> "CheckOutcome":
        return cls(TestStatus.PASS, message)

    @classmethod
    def warning(cls, message: str, error: Any = None) -> "CheckOutcome":
        return cls(TestStatus.WARNING, message, error)

    @classmethod
    def failed(cls, message: str, error: Any = None) -> "CheckOutcome":
        return cls(TestStatus.FAIL, message, error)


@dataclass(frozen=True)
class SyncStatus:
    """Status snapshot reported by the data sync service."""

    is_active: bool
    errors: int = 0

    def __post_init__(self) -> None:
        if self.errors < 0:
            raise ValueError(f"errors must be non-negative, got {self.errors}")
