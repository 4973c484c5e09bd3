"""
Top-N selection over scored, filtered candidates.
"""

from collections import Counter
from datetime import datetime
from typing import Dict, List, Optional

from casper.priority import clock
from casper.priority.rules import is_always_include
from casper.priority.types import DEFAULT_PRIORITY_CONFIG, DIMENSIONS, PriorityConfig, PriorityItem


def _score_key(item: PriorityItem) -> float:
    return -(item.priority_score or 0.0)


def select_top_priority_items(
    items: List[PriorityItem],
    now: Optional[datetime] = None,
    config: PriorityConfig = DEFAULT_PRIORITY_CONFIG,
) -> List[PriorityItem]:
    """
    Pick the final priority list.

    Always-include items go first, the rest follow by descending score; the
    combined list is truncated to ``config.max_items`` and then re-sorted by
    score so forced items interleave with scored ones. Sorting is stable, so
    equal scores keep input order.

    Args:
        items: Scored candidates that survived exclusion
        now: Evaluation time for the always-include rules
        config: Item cap and rule thresholds

    Returns:
        New list, at most ``config.max_items`` long
    """
    if not items:
        return []

    now = clock.resolve_now(now)

    always_included = []
    remaining = []
    for item in items:
        if is_always_include(item, now, config):
            always_included.append(item)
        else:
            remaining.append(item)

    remaining = sorted(remaining, key=_score_key)
    selected = (always_included + remaining)[:config.max_items]

    return sorted(selected, key=_score_key)


def get_source_type_distribution(items: List[PriorityItem]) -> Dict[str, int]:
    """Count items per source type."""
    counts = Counter(item.source_type.value for item in items)
    return dict(counts)


def _scores(items: List[PriorityItem]) -> List[float]:
    return [item.priority_score for item in items if item.priority_score is not None]


def get_avg_score(items: List[PriorityItem]) -> float:
    scores = _scores(items)
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def get_min_score(items: List[PriorityItem]) -> float:
    scores = _scores(items)
    return min(scores) if scores else 0.0


def get_max_score(items: List[PriorityItem]) -> float:
    scores = _scores(items)
    return max(scores) if scores else 0.0


def validate_priority_item(item: PriorityItem) -> bool:
    """True when the item is fully scored, in range and displayable."""
    if not item.source_id or not item.title:
        return False
    if item.priority_score is None or not 0.0 <= item.priority_score <= 1.0:
        return False
    for name in DIMENSIONS:
        value = getattr(item, f"{name}_score")
        if value is None or not 0.0 <= value <= 1.0:
            return False
    return True
