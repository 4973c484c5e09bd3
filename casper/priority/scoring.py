"""
Priority scoring for the unified priority model.

Five independent dimensions are scored per item, each normalized to 0.0-1.0:

    urgency     time pressure (deadlines, event proximity, staleness)
    importance  explicit priority, status, VIP / top-of-mind flags
    commitment  promises: calendar events, habits, commitments to people
    recency     how recently the item became relevant (neutral 0.5)
    effort      quick-win bias, higher = less effort (neutral 0.5)

Score formula:
    priority_score = sum(weight_d / sum(weights) * score_d)

When the caller supplies a time budget (``available_minutes``) the effort
weight is doubled before normalization. No scorer raises on missing input;
absent signals fall back to the neutral defaults documented per function.
"""

import math
from datetime import datetime
from typing import Optional

from casper.priority import clock
from casper.priority.types import (
    DEFAULT_PRIORITY_CONFIG,
    DimensionScores,
    PriorityConfig,
    PriorityItem,
    PriorityWeights,
    SourceType,
)

NO_DUE_DATE_URGENCY = 0.2
NEUTRAL_RECENCY = 0.5
NEUTRAL_EFFORT = 0.5
READING_DEFAULT_EFFORT = 0.7

IMPLIED_URGENCY = {
    "asap": 0.95,
    "today": 0.9,
    "this_week": 0.7,
    "next_week": 0.5,
    "this_month": 0.3,
    "when_possible": 0.2,
}


def clamp(value: float) -> float:
    """Clamp to [0, 1]; NaN becomes 0."""
    if value is None or math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


# ============================================================================
# Urgency
# ============================================================================

def calculate_task_urgency_score(due_at: Optional[datetime], now: datetime) -> float:
    """
    Calculate urgency (0.0-1.0) from a task's due date.

    Scoring (calendar days in the caller's timezone):
        - Overdue: 0.9 + 0.02 per day overdue, capped at 1.0
        - Due today: 0.9
        - Due tomorrow: 0.7
        - Due within 3 days: 0.5
        - Due within a week: 0.3
        - Later: 0.1
        - No due date: 0.2 (unknown, not zero)
    """
    if due_at is None:
        return NO_DUE_DATE_URGENCY

    days_until_due = clock.calendar_days_until(due_at, now)

    if days_until_due < 0:
        return clamp(0.9 + abs(days_until_due) * 0.02)
    elif days_until_due == 0:
        return 0.9
    elif days_until_due == 1:
        return 0.7
    elif days_until_due <= 3:
        return 0.5
    elif days_until_due <= 7:
        return 0.3
    return 0.1


def calculate_commitment_urgency_score(
    due_at: Optional[datetime],
    implied_urgency: Optional[str],
    snooze_count: int,
    now: datetime,
) -> float:
    """
    Calculate urgency for a commitment.

    An explicit deadline wins; otherwise the implied urgency phrase is used,
    otherwise 0.5. Each snooze adds 0.05 so dodged promises escalate.
    """
    urgency = 0.5

    if due_at is not None:
        days_until_due = clock.calendar_days_until(due_at, now)
        if days_until_due < 0:
            urgency = 0.95 + abs(days_until_due) * 0.01
        elif days_until_due == 0:
            urgency = 0.95
        elif days_until_due == 1:
            urgency = 0.85
        elif days_until_due <= 3:
            urgency = 0.7
        elif days_until_due <= 7:
            urgency = 0.5
        else:
            urgency = 0.3
    elif isinstance(implied_urgency, str):
        urgency = IMPLIED_URGENCY.get(implied_urgency, urgency)

    if snooze_count > 0:
        urgency += snooze_count * 0.05

    return clamp(urgency)


def calculate_calendar_urgency_score(event_start_at: Optional[datetime], now: datetime) -> float:
    """
    Calculate urgency from time until an event starts.

    Rises monotonically as the start approaches; events already in progress
    (still inside the exclusion cutoff) score as starting now.
    """
    if event_start_at is None:
        return 0.2

    hours = clock.hours_until(event_start_at, now)

    if hours < 0.5:
        return 1.0
    elif hours < 1:
        return 0.98
    elif hours < 2:
        return 0.9
    elif hours < 4:
        return 0.75
    elif hours < 12:
        return 0.5
    elif hours < 24:
        return 0.4
    return 0.2


def calculate_inbox_urgency_score(
    received_at: Optional[datetime],
    now: datetime,
    urgent_window_hours: float = 4,
) -> float:
    """Calculate urgency from message age: fresh mail is urgent."""
    if received_at is None:
        return 0.2

    hours_old = clock.hours_since(received_at, now)

    if hours_old < urgent_window_hours:
        return 1.0
    elif hours_old < 24:
        return 0.8
    elif hours_old < 48:
        return 0.6
    elif hours_old < 72:
        return 0.4
    return 0.2


def calculate_portfolio_urgency_score(
    last_interaction_at: Optional[datetime],
    now: datetime,
    stale_days: int = 14,
) -> float:
    """
    Calculate urgency from staleness of a portfolio relationship.

    Never contacted counts as the most stale case.
    """
    if last_interaction_at is None:
        return 0.95

    days = clock.days_since(last_interaction_at, now)

    if days > stale_days:
        if days >= 30:
            return 0.95
        elif days >= 21:
            return 0.8
        return 0.6
    elif days >= 7:
        return 0.3
    return 0.1


def calculate_pipeline_urgency_score(
    last_interaction_at: Optional[datetime],
    close_date: Optional[datetime],
    has_next_steps: bool,
    now: datetime,
    stale_days: int = 14,
) -> float:
    """Calculate urgency for a deal from close-date proximity and staleness."""
    urgency = 0.3

    if close_date is not None:
        days_until_close = clock.calendar_days_until(close_date, now)
        if days_until_close < 0:
            urgency = max(urgency, 0.95)
        elif days_until_close <= 7:
            urgency = max(urgency, 0.85)
        elif days_until_close <= 14:
            urgency = max(urgency, 0.7)

    if last_interaction_at is not None:
        days = clock.days_since(last_interaction_at, now)
        if days > stale_days:
            urgency = max(urgency, 0.8)
        elif days >= 7:
            urgency = max(urgency, 0.5)
        if has_next_steps and days >= 7:
            urgency = max(urgency, 0.75)
    else:
        urgency = max(urgency, 0.7)

    return clamp(urgency)


def calculate_reading_urgency_score(created_at: Optional[datetime], now: datetime) -> float:
    """Freshly saved articles are more urgent than ones gathering dust."""
    if created_at is None:
        return 0.2

    days_old = clock.days_since(created_at, now)

    if days_old < 1:
        return 0.9
    elif days_old < 7:
        return 0.7
    elif days_old < 14:
        return 0.5
    elif days_old < 30:
        return 0.3
    return 0.1


def parse_reminder_time(reminder_time: Optional[str]):
    """Parse 'HH:MM' or 'HH:MM:SS' into (hour, minute), None if invalid."""
    if not reminder_time:
        return None
    parts = str(reminder_time).strip().split(":")
    if len(parts) < 2:
        return None
    try:
        hour, minute = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= hour < 24 and 0 <= minute < 60):
        return None
    return hour, minute


def calculate_nonnegotiable_urgency_score(
    reminder_time: Optional[str],
    frequency: Optional[str],
    now: datetime,
) -> float:
    """
    Calculate urgency for a habit from today's reminder time.

    Scoring:
        - Reminder passed within the last 4 hours: 0.9
        - Reminder within the next 2 hours: 0.8
        - Reminder within the next 6 hours: 0.5
        - Otherwise daily habits 0.6, others 0.4
    """
    parsed = parse_reminder_time(reminder_time)
    if parsed is not None:
        hour, minute = parsed
        reminder_today = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
        hours = clock.hours_until(reminder_today, now)
        if -4 < hours < 0:
            return 0.9
        elif 0 <= hours < 2:
            return 0.8
        elif 0 <= hours < 6:
            return 0.5

    if frequency == "daily":
        return 0.6
    return 0.4


# ============================================================================
# Importance
# ============================================================================

def calculate_task_importance_score(
    priority: Optional[str],
    has_company_link: bool = False,
    is_top_priority: bool = False,
) -> float:
    """
    Calculate importance (0.0-1.0) from explicit priority.

    Priority mapping:
        - Top priority flag: 1.0
        - high: 1.0
        - medium: 0.6
        - low: 0.3
        - unset: 0.5
    Linked companies add 0.15. High priority must stay >= 0.9 so the
    overdue-and-important always-include rule can fire.
    """
    if is_top_priority:
        return 1.0

    priority_map = {
        "high": 1.0,
        "medium": 0.6,
        "low": 0.3,
    }
    score = priority_map.get(priority, 0.5) if isinstance(priority, str) else 0.5

    if has_company_link:
        score += 0.15

    return clamp(score)


def calculate_inbox_importance_score(is_read: bool, has_company_link: bool = False) -> float:
    score = 0.7 if is_read else 0.9
    if has_company_link:
        score += 0.1
    return clamp(score)


def calculate_calendar_importance_score() -> float:
    return 0.8


def calculate_portfolio_importance_score(status: Optional[str], open_task_count: int = 0) -> float:
    status_map = {
        "active": 0.8,
        "watching": 0.5,
        "exited": 0.2,
        "archived": 0.2,
    }
    score = status_map.get(status, 0.5) if isinstance(status, str) else 0.5
    if open_task_count > 0:
        score += 0.1
    return clamp(score)


def calculate_pipeline_importance_score(status: Optional[str], is_top_of_mind: bool = False) -> float:
    if status == "passed":
        return 0.1

    if status in ("active", "interesting"):
        score = 0.8
    elif status in ("new", "to_share"):
        score = 0.6
    else:
        score = 0.5

    if is_top_of_mind:
        score += 0.2
    return clamp(score)


def calculate_reading_importance_score(is_read: bool, has_project: bool = False) -> float:
    score = 0.4 if is_read else 0.6
    if has_project:
        score += 0.15
    return clamp(score)


def calculate_nonnegotiable_importance_score(is_active: bool) -> float:
    return 0.75 if is_active else 0.3


def calculate_commitment_importance_score(is_vip: bool = False, company_type: Optional[str] = None) -> float:
    """Commitments start important; VIPs and portfolio ties raise the stakes."""
    score = 0.7
    if is_vip:
        score += 0.2
    if company_type == "portfolio":
        score += 0.15
    elif company_type == "pipeline":
        score += 0.1
    return clamp(score)


# ============================================================================
# Commitment
# ============================================================================

def calculate_calendar_commitment_score(attendee_count: int = 0) -> float:
    """Calendar events are commitments; more attendees, more commitment."""
    if attendee_count >= 5:
        return 1.0
    elif attendee_count >= 2:
        return 0.9
    return 0.8


def calculate_commitment_commitment_score(has_person: bool, company_type: Optional[str] = None) -> float:
    score = 0.95 if has_person else 0.85
    if company_type == "portfolio":
        score += 0.05
    return clamp(score)


# ============================================================================
# Recency / Effort (shared)
# ============================================================================

def calculate_recency_score(timestamp: Optional[datetime], now: datetime) -> float:
    """
    Calculate recency from the last touch / creation time.

    Decays from 1.0 (today) toward the neutral 0.5 and never below it, so
    recency alone cannot bury an otherwise urgent item.
    """
    if timestamp is None:
        return NEUTRAL_RECENCY

    days = clock.days_since(timestamp, now)

    if days == 0:
        return 1.0
    elif days <= 1:
        return 0.8
    elif days <= 3:
        return 0.65
    elif days <= 7:
        return 0.55
    return NEUTRAL_RECENCY


def calculate_effort_score(
    effort_minutes: Optional[int],
    effort_category: Optional[str] = None,
    quick_minutes: int = 15,
    medium_minutes: int = 60,
    default: float = NEUTRAL_EFFORT,
) -> float:
    """
    Calculate effort score; higher means quicker.

    Scoring:
        - <= quick_minutes (or 'quick'): 1.0
        - <= medium_minutes (or 'medium'): 0.6
        - larger (or 'deep'): 0.2
        - unknown, zero or negative estimate: ``default`` (0.5)
    """
    if effort_minutes is not None and effort_minutes > 0:
        if effort_minutes <= quick_minutes:
            return 1.0
        elif effort_minutes <= medium_minutes:
            return 0.6
        return 0.2

    category_map = {
        "quick": 1.0,
        "medium": 0.6,
        "deep": 0.2,
    }
    if effort_category:
        return category_map.get(str(effort_category).lower(), default)
    return default


# ============================================================================
# Per-item dispatch
# ============================================================================

def score_dimensions(
    item: PriorityItem,
    now: datetime,
    config: PriorityConfig = DEFAULT_PRIORITY_CONFIG,
) -> DimensionScores:
    """Compute all five dimension scores for an adapted item."""
    stale_days = config.company_stale_days
    recency = calculate_recency_score(item.last_touched_at or item.created_at, now)
    effort = calculate_effort_score(
        item.effort_minutes,
        item.effort_category,
        config.quick_effort_minutes,
        config.medium_effort_minutes,
    )
    commitment = 0.0
    source = item.source_type

    if source == SourceType.TASK:
        urgency = calculate_task_urgency_score(item.due_at, now)
        importance = calculate_task_importance_score(
            item.priority, item.has_company_link, item.is_top_priority
        )
        if item.linked_commitment:
            commitment = 0.6
    elif source == SourceType.INBOX:
        urgency = calculate_inbox_urgency_score(
            item.created_at, now, config.inbox_urgent_window_hours
        )
        importance = calculate_inbox_importance_score(item.is_read, item.has_company_link)
    elif source == SourceType.CALENDAR_EVENT:
        urgency = calculate_calendar_urgency_score(item.event_start_at, now)
        importance = calculate_calendar_importance_score()
        commitment = calculate_calendar_commitment_score(item.attendee_count)
        recency = NEUTRAL_RECENCY
    elif source == SourceType.PORTFOLIO_COMPANY:
        urgency = calculate_portfolio_urgency_score(item.last_touched_at, now, stale_days)
        importance = calculate_portfolio_importance_score(item.status, item.open_task_count)
    elif source == SourceType.PIPELINE_COMPANY:
        urgency = calculate_pipeline_urgency_score(
            item.last_touched_at, item.close_date, item.has_next_steps, now, stale_days
        )
        importance = calculate_pipeline_importance_score(item.status, item.is_top_of_mind)
    elif source == SourceType.READING_ITEM:
        urgency = calculate_reading_urgency_score(item.created_at, now)
        importance = calculate_reading_importance_score(item.is_read, item.has_project)
        effort = calculate_effort_score(
            item.effort_minutes,
            item.effort_category,
            config.quick_effort_minutes,
            config.medium_effort_minutes,
            default=READING_DEFAULT_EFFORT,
        )
    elif source == SourceType.NONNEGOTIABLE:
        urgency = calculate_nonnegotiable_urgency_score(item.reminder_time, item.frequency, now)
        importance = calculate_nonnegotiable_importance_score(item.is_active)
        commitment = 0.9
    elif source == SourceType.COMMITMENT:
        urgency = calculate_commitment_urgency_score(
            item.due_at, item.implied_urgency, item.snooze_count, now
        )
        importance = calculate_commitment_importance_score(item.is_vip, item.company_type)
        commitment = calculate_commitment_commitment_score(bool(item.person_name), item.company_type)
    else:
        urgency = calculate_task_urgency_score(item.due_at, now)
        importance = 0.5

    return DimensionScores(
        urgency=clamp(urgency),
        importance=clamp(importance),
        commitment=clamp(commitment),
        recency=clamp(recency),
        effort=clamp(effort),
    )


def compute_priority_score(
    scores: DimensionScores,
    weights: Optional[PriorityWeights] = None,
    available_minutes: Optional[int] = None,
) -> float:
    """
    Combine the five dimension scores into one priority score.

    Args:
        scores: Dimension scores for one item
        weights: Weight configuration (defaults to the standard weights)
        available_minutes: Caller's time budget; when present the effort
            weight is doubled before normalization

    Returns:
        Weighted score between 0.0 and 1.0
    """
    if weights is None:
        weights = DEFAULT_PRIORITY_CONFIG.weights

    effort_weight = weights.effort * 2 if available_minutes is not None else weights.effort
    total_weight = (
        weights.urgency + weights.importance + weights.commitment + weights.recency + effort_weight
    )
    if total_weight <= 0:
        return 0.0

    score = (
        weights.urgency / total_weight * scores.urgency +
        weights.importance / total_weight * scores.importance +
        weights.commitment / total_weight * scores.commitment +
        weights.recency / total_weight * scores.recency +
        effort_weight / total_weight * scores.effort
    )
    return clamp(score)


def effective_weights(weights: PriorityWeights, available_minutes: Optional[int] = None) -> dict:
    """Normalized weights actually applied, for score breakdowns."""
    raw = weights.as_dict()
    if available_minutes is not None:
        raw["effort"] = raw["effort"] * 2
    total = sum(raw.values())
    return {name: (value / total if total > 0 else 0.0) for name, value in raw.items()}
