"""
Exclusion and always-include rules.

Exclusion runs first over every candidate; always-include is only evaluated
on the survivors and can never bring an excluded item back.
"""

from datetime import datetime
from typing import Optional

from casper.priority import clock
from casper.priority.types import DEFAULT_PRIORITY_CONFIG, PriorityConfig, PriorityItem, SourceType

CLOSED_PORTFOLIO_STATUSES = ("archived", "exited")
OPEN_COMMITMENT_STATUS = "open"


def is_stale(item: PriorityItem, now: datetime, stale_days: int = 14) -> bool:
    """True when a company has had no interaction for more than ``stale_days`` (or ever)."""
    if item.last_touched_at is None:
        return True
    return clock.days_since(item.last_touched_at, now) > stale_days


def exclusion_reason(
    item: PriorityItem,
    now: Optional[datetime] = None,
    config: PriorityConfig = DEFAULT_PRIORITY_CONFIG,
) -> Optional[str]:
    """
    Return why an item should be dropped, or None if it stays.

    Args:
        item: Adapted item (scores not required)
        now: Evaluation time (defaults to current UTC time)
        config: Thresholds

    Returns:
        Short reason string such as 'completed' or 'snoozed', or None
    """
    now = clock.resolve_now(now)
    source = item.source_type

    if clock.is_future(item.snoozed_until, now):
        return "snoozed"

    if source == SourceType.TASK:
        if item.is_completed:
            return "completed"

    elif source == SourceType.INBOX:
        if item.is_resolved:
            return "resolved"
        if item.is_deleted:
            return "deleted"

    elif source == SourceType.CALENDAR_EVENT:
        if item.event_start_at is None:
            return "no start time"
        hours = clock.hours_until(item.event_start_at, now)
        if hours < -config.past_event_cutoff_hours:
            return "event already started"
        if hours > config.calendar_upcoming_window_hours:
            return "event too far out"

    elif source == SourceType.PORTFOLIO_COMPANY:
        if item.status in CLOSED_PORTFOLIO_STATUSES:
            return "company closed"
        if not is_stale(item, now, config.company_stale_days) and item.open_task_count <= 0:
            return "nothing pending"

    elif source == SourceType.PIPELINE_COMPANY:
        if item.status == "passed":
            return "passed"

    elif source == SourceType.READING_ITEM:
        if item.is_read:
            return "already read"

    elif source == SourceType.NONNEGOTIABLE:
        if not item.is_active:
            return "inactive"

    elif source == SourceType.COMMITMENT:
        if (item.status or OPEN_COMMITMENT_STATUS) != OPEN_COMMITMENT_STATUS:
            return item.status

    return None


def should_exclude(
    item: PriorityItem,
    now: Optional[datetime] = None,
    config: PriorityConfig = DEFAULT_PRIORITY_CONFIG,
) -> bool:
    """Check whether an item must be removed from the candidate set."""
    return exclusion_reason(item, now, config) is not None


def is_always_include(
    item: PriorityItem,
    now: Optional[datetime] = None,
    config: PriorityConfig = DEFAULT_PRIORITY_CONFIG,
) -> bool:
    """
    Check whether an item is forced ahead of score-based ranking.

    Either a calendar event starting within the imminent window
    (0 <= hours < 2) or an overdue task whose importance is at least the
    high-importance floor (0.9). Overdue means the due calendar day is
    strictly before today.
    """
    now = clock.resolve_now(now)

    if item.source_type == SourceType.CALENDAR_EVENT:
        if item.event_start_at is None:
            return False
        hours = clock.hours_until(item.event_start_at, now)
        return 0 <= hours < config.imminent_event_window_hours

    if item.source_type == SourceType.TASK:
        if item.due_at is None or item.importance_score is None:
            return False
        overdue = clock.calendar_days_until(item.due_at, now) < 0
        return overdue and item.importance_score >= config.high_importance_floor

    return False
