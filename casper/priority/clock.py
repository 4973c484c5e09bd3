"""
Time helpers shared by scorers, rules and signal generation.

Naive timestamps are interpreted in the timezone of ``now`` so that a
date-only due date ("2026-03-14") means that calendar day for the caller.
"""

from datetime import datetime, timezone
from typing import Optional


def resolve_now(now: Optional[datetime] = None) -> datetime:
    """Return an aware 'now', defaulting to the current UTC time."""
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def align(dt: datetime, now: datetime) -> datetime:
    """Express ``dt`` in the timezone of ``now``."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=now.tzinfo)
    try:
        return dt.astimezone(now.tzinfo)
    except OverflowError:
        # Year 1 / 9999 edge: keep the original offset, still comparable
        return dt


def hours_until(dt: datetime, now: datetime) -> float:
    """Fractional hours from now until dt (negative when dt is past)."""
    return (align(dt, now) - now).total_seconds() / 3600.0


def hours_since(dt: datetime, now: datetime) -> float:
    return -hours_until(dt, now)


def calendar_days_until(dt: datetime, now: datetime) -> int:
    """Whole calendar days from today to dt's date (0 = today, -1 = yesterday)."""
    return (align(dt, now).date() - now.date()).days


def days_since(dt: datetime, now: datetime) -> int:
    """Whole elapsed days since dt, never negative."""
    elapsed = now - align(dt, now)
    return max(0, elapsed.days)


def is_future(dt: Optional[datetime], now: datetime) -> bool:
    return dt is not None and align(dt, now) > now
