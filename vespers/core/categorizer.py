"""Display grouping of diagnostic results.

Maps each result to a category by case-sensitive substring matching on
its name. Rules are evaluated in order and the first match wins, so a
name such as "Admin Helper: Email Campaign Stats" lands in
"Admin Helpers" rather than "Email Marketing".
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from .models import TestResult

logger = logging.getLogger(__name__)

OTHER_CATEGORY = "Other"

# (category, tokens) in priority order
CATEGORY_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Database", ("Database", "Table Access")),
    ("API", ("API:",)),
    ("Authentication", ("Authentication",)),
    ("Edge Functions", ("Edge Function",)),
    ("Admin Helpers", ("Admin Helper",)),
    ("Data Sync", ("Data Sync",)),
    ("Email Marketing", ("Email", "Newsletter", "Campaign")),
)

CATEGORY_ORDER: tuple[str, ...] = tuple(
    category for category, _ in CATEGORY_RULES
) + (OTHER_CATEGORY,)


def categorize(name: str) -> str:
    """Return the category for a single result name."""
    for category, tokens in CATEGORY_RULES:
        if any(token in name for token in tokens):
            return category
    return OTHER_CATEGORY


def _result_name(entry: Any) -> str | None:
    if isinstance(entry, TestResult):
        return entry.name
    if isinstance(entry, Mapping):
        name = entry.get("name")
        return name if isinstance(name, str) else None
    return None


def group_results_by_category(results: Any) -> dict[str, list[Any]]:
    """Group results into display categories.

    Accepts TestResult instances or result-shaped mappings. Malformed
    input never raises: a non-sequence or empty input yields an empty
    mapping and malformed entries are skipped, with each case logged.

    Args:
        results: Ordered results from a diagnostic run.

    Returns:
        Mapping of category name to results in input order. Categories
        without results are omitted.
    """
    if (
        not isinstance(results, Sequence)
        or isinstance(results, (str, bytes))
        or len(results) == 0
    ):
        logger.debug(
            f"No results to group (got {type(results).__name__}); "
            "returning empty mapping"
        )
        return {}

    buckets: dict[str, list[Any]] = {category: [] for category in CATEGORY_ORDER}

    for index, entry in enumerate(results):
        name = _result_name(entry)
        if name is None:
            logger.warning(f"Skipping malformed result at index {index}: {entry!r}")
            continue
        buckets[categorize(name)].append(entry)

    return {category: items for category, items in buckets.items() if items}
