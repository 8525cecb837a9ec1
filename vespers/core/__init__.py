"""Core domain logic for the Vespers admin diagnostics.

This package contains zero external dependencies and represents
the pure business logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .categorizer import CATEGORY_ORDER, categorize, group_results_by_category
from .models import (
    CheckOutcome,
    CheckWarning,
    SyncStatus,
    TestResult,
    TestStatus,
    TestSummary,
)
from .runner import TestRunner

__all__ = [
    "CATEGORY_ORDER",
    "CheckOutcome",
    "CheckWarning",
    "SyncStatus",
    "TestResult",
    "TestRunner",
    "TestStatus",
    "TestSummary",
    "categorize",
    "group_results_by_category",
]
