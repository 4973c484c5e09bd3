"""
Human-readable signals explaining why an item ranks where it does.

Signals are derived only from fields the scorers already use. Each rule
yields a (severity, text) pair; the final list is ordered most severe first
and is empty when nothing applies.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from casper.priority import clock
from casper.priority.scoring import parse_reminder_time
from casper.priority.types import DEFAULT_PRIORITY_CONFIG, PriorityConfig, PriorityItem, SourceType

Signal = Tuple[int, str]


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def _due_signals(due_at: Optional[datetime], now: datetime) -> List[Signal]:
    if due_at is None:
        return []
    days = clock.calendar_days_until(due_at, now)
    if days < 0:
        return [(100, f"{_plural(abs(days), 'day')} overdue")]
    if days == 0:
        return [(90, "due today")]
    if days == 1:
        return [(70, "due tomorrow")]
    if days <= 7:
        return [(40, f"due in {days} days")]
    return []


def _effort_signal(item: PriorityItem, config: PriorityConfig) -> List[Signal]:
    minutes = item.effort_minutes
    if minutes is not None and 0 < minutes <= config.quick_effort_minutes:
        return [(20, f"quick win ({minutes} min)")]
    if minutes is None and item.effort_category == "quick":
        return [(20, "quick win")]
    return []


def _task_signals(item: PriorityItem, now: datetime, config: PriorityConfig) -> List[Signal]:
    signals = _due_signals(item.due_at, now)
    if item.is_top_priority:
        signals.append((60, "top priority"))
    elif item.priority == "high":
        signals.append((50, "high priority"))
    if item.linked_commitment:
        signals.append((30, "linked to a commitment"))
    signals.extend(_effort_signal(item, config))
    return signals


def _inbox_signals(item: PriorityItem, now: datetime) -> List[Signal]:
    signals = []
    if not item.is_read:
        signals.append((60, "unread"))
    if item.created_at is not None:
        hours = clock.hours_since(item.created_at, now)
        if hours < 1:
            signals.append((40, "received just now"))
        elif hours < 24:
            signals.append((40, f"received {_plural(int(hours), 'hour')} ago"))
        else:
            signals.append((40, f"received {_plural(int(hours // 24), 'day')} ago"))
    return signals


def _calendar_signals(item: PriorityItem, now: datetime) -> List[Signal]:
    signals = []
    if item.event_start_at is not None:
        hours = clock.hours_until(item.event_start_at, now)
        if hours < 0:
            signals.append((100, "in progress"))
        elif hours < 1:
            minutes = int(hours * 60)
            if minutes == 0:
                signals.append((95, "starting now"))
            else:
                signals.append((95, f"starts in {_plural(minutes, 'minute')}"))
        elif hours < 24:
            signals.append((70, f"starts in {_plural(int(hours), 'hour')}"))
        else:
            signals.append((40, f"starts in {_plural(int(hours // 24), 'day')}"))
    if item.attendee_count >= 2:
        signals.append((30, f"{item.attendee_count} attendees"))
    return signals


def _staleness_signals(item: PriorityItem, now: datetime, config: PriorityConfig) -> List[Signal]:
    if item.last_touched_at is None:
        return [(80, "never contacted")]
    days = clock.days_since(item.last_touched_at, now)
    if days > config.company_stale_days:
        return [(80, f"no contact in {days} days")]
    return []


def _portfolio_signals(item: PriorityItem, now: datetime, config: PriorityConfig) -> List[Signal]:
    signals = _staleness_signals(item, now, config)
    if item.open_task_count > 0:
        signals.append((50, f"{_plural(item.open_task_count, 'open task')}"))
    return signals


def _pipeline_signals(item: PriorityItem, now: datetime, config: PriorityConfig) -> List[Signal]:
    signals = []
    if item.close_date is not None:
        days = clock.calendar_days_until(item.close_date, now)
        if days < 0:
            signals.append((95, f"past close date by {_plural(abs(days), 'day')}"))
        elif days == 0:
            signals.append((85, "closing today"))
        elif days <= 14:
            signals.append((85, f"closing in {_plural(days, 'day')}"))
    signals.extend(_staleness_signals(item, now, config))
    if item.is_top_of_mind:
        signals.append((60, "top of mind"))
    if item.has_next_steps:
        signals.append((30, "next steps pending"))
    return signals


def _reading_signals(item: PriorityItem, now: datetime) -> List[Signal]:
    signals = []
    if item.created_at is not None:
        days = clock.days_since(item.created_at, now)
        if days == 0:
            signals.append((30, "saved today"))
        else:
            signals.append((30, f"saved {_plural(days, 'day')} ago"))
    if item.effort_minutes is not None and item.effort_minutes > 0:
        signals.append((20, f"{item.effort_minutes} min read"))
    return signals


def _nonnegotiable_signals(item: PriorityItem) -> List[Signal]:
    signals = []
    parsed = parse_reminder_time(item.reminder_time)
    if parsed is not None:
        hour, minute = parsed
        signals.append((70, f"reminder at {hour:02d}:{minute:02d}"))
    if item.frequency:
        signals.append((40, f"{item.frequency} habit"))
    return signals


def _commitment_signals(item: PriorityItem, now: datetime) -> List[Signal]:
    signals = _due_signals(item.due_at, now)
    if item.snooze_count > 0:
        signals.append((75, f"snoozed {_plural(item.snooze_count, 'time')}"))
    if item.is_vip:
        signals.append((65, "VIP"))
    if item.person_name:
        if item.direction == "owed_to_me":
            signals.append((60, f"waiting on {item.person_name}"))
        else:
            signals.append((60, f"promised to {item.person_name}"))
    return signals


def generate_signals(
    item: PriorityItem,
    now: Optional[datetime] = None,
    config: PriorityConfig = DEFAULT_PRIORITY_CONFIG,
) -> List[str]:
    """
    Build the ordered signal list for one item.

    Args:
        item: Adapted item
        now: Evaluation time (defaults to current UTC time)
        config: Thresholds shared with scoring

    Returns:
        Signal strings, most severe first
    """
    now = clock.resolve_now(now)
    source = item.source_type

    if source == SourceType.TASK:
        signals = _task_signals(item, now, config)
    elif source == SourceType.INBOX:
        signals = _inbox_signals(item, now)
    elif source == SourceType.CALENDAR_EVENT:
        signals = _calendar_signals(item, now)
    elif source == SourceType.PORTFOLIO_COMPANY:
        signals = _portfolio_signals(item, now, config)
    elif source == SourceType.PIPELINE_COMPANY:
        signals = _pipeline_signals(item, now, config)
    elif source == SourceType.READING_ITEM:
        signals = _reading_signals(item, now)
    elif source == SourceType.NONNEGOTIABLE:
        signals = _nonnegotiable_signals(item)
    elif source == SourceType.COMMITMENT:
        signals = _commitment_signals(item, now)
    else:
        signals = _due_signals(item.due_at, now)

    signals.sort(key=lambda signal: -signal[0])
    return [text for _, text in signals]


def format_reasoning(item: PriorityItem) -> str:
    """Join an item's signals into one display sentence."""
    return item.reasoning
