"""
Unit tests for signal generation.
"""

from datetime import timedelta

from casper.priority.signals import format_reasoning, generate_signals
from casper.priority.types import PriorityItem, SourceType


def item(source_type, **kwargs):
    return PriorityItem(source_type=source_type, source_id="x1", **kwargs)


class TestTaskSignals:
    """Tests for task signals."""

    def test_overdue_comes_first(self, now):
        task = item(SourceType.TASK, due_at=now - timedelta(days=3), priority="high")
        assert generate_signals(task, now) == ["3 days overdue", "high priority"]

    def test_single_day_overdue(self, now):
        task = item(SourceType.TASK, due_at=now - timedelta(days=1))
        assert generate_signals(task, now) == ["1 day overdue"]

    def test_due_ladder(self, now):
        assert generate_signals(item(SourceType.TASK, due_at=now), now) == ["due today"]
        assert generate_signals(item(SourceType.TASK, due_at=now + timedelta(days=1)), now) == ["due tomorrow"]
        assert generate_signals(item(SourceType.TASK, due_at=now + timedelta(days=4)), now) == ["due in 4 days"]

    def test_top_priority_and_quick_win(self, now):
        task = item(SourceType.TASK, is_top_priority=True, priority="high", effort_minutes=10)
        assert generate_signals(task, now) == ["top priority", "quick win (10 min)"]


class TestOtherSignals:
    """Tests for non-task sources."""

    def test_calendar_minutes(self, now):
        event = item(SourceType.CALENDAR_EVENT, event_start_at=now + timedelta(minutes=25, seconds=30),
                     attendee_count=4)
        assert generate_signals(event, now) == ["starts in 25 minutes", "4 attendees"]

    def test_calendar_hours_and_in_progress(self, now):
        later = item(SourceType.CALENDAR_EVENT, event_start_at=now + timedelta(hours=3, minutes=10))
        running = item(SourceType.CALENDAR_EVENT, event_start_at=now - timedelta(minutes=20))
        assert generate_signals(later, now) == ["starts in 3 hours"]
        assert generate_signals(running, now) == ["in progress"]

    def test_inbox(self, now):
        mail = item(SourceType.INBOX, created_at=now - timedelta(hours=2, minutes=5))
        assert generate_signals(mail, now) == ["unread", "received 2 hours ago"]

    def test_portfolio_staleness(self, now):
        company = item(SourceType.PORTFOLIO_COMPANY, last_touched_at=now - timedelta(days=18),
                       open_task_count=2)
        assert generate_signals(company, now) == ["no contact in 18 days", "2 open tasks"]

    def test_never_contacted(self, now):
        company = item(SourceType.PORTFOLIO_COMPANY)
        assert generate_signals(company, now) == ["never contacted"]

    def test_pipeline(self, now):
        deal = item(SourceType.PIPELINE_COMPANY, close_date=now + timedelta(days=5),
                    last_touched_at=now - timedelta(days=1), is_top_of_mind=True)
        assert generate_signals(deal, now) == ["closing in 5 days", "top of mind"]

    def test_pipeline_past_close(self, now):
        deal = item(SourceType.PIPELINE_COMPANY, close_date=now - timedelta(days=2),
                    last_touched_at=now - timedelta(days=1))
        assert generate_signals(deal, now) == ["past close date by 2 days"]

    def test_reading(self, now):
        article = item(SourceType.READING_ITEM, created_at=now - timedelta(days=3), effort_minutes=8)
        assert generate_signals(article, now) == ["saved 3 days ago", "8 min read"]

    def test_nonnegotiable(self, now):
        habit = item(SourceType.NONNEGOTIABLE, reminder_time="07:30", frequency="daily")
        assert generate_signals(habit, now) == ["reminder at 07:30", "daily habit"]

    def test_commitment(self, now):
        promise = item(SourceType.COMMITMENT, person_name="Dana", direction="owed_by_me",
                       snooze_count=1, due_at=now)
        assert generate_signals(promise, now) == ["due today", "snoozed 1 time", "promised to Dana"]

    def test_commitment_owed_to_me(self, now):
        promise = item(SourceType.COMMITMENT, person_name="Sam", direction="owed_to_me")
        assert generate_signals(promise, now) == ["waiting on Sam"]

    def test_no_signals(self, now):
        mail = item(SourceType.INBOX, is_read=True)
        assert generate_signals(mail, now) == []


class TestReasoning:
    """Tests for format_reasoning."""

    def test_joins_signals(self, now):
        task = item(SourceType.TASK, due_at=now - timedelta(days=3), priority="high")
        task.signals = generate_signals(task, now)
        assert format_reasoning(task) == "3 days overdue. High priority."

    def test_fallback_per_source(self):
        assert format_reasoning(item(SourceType.INBOX)) == "Message waiting in the inbox."
        assert format_reasoning(item(SourceType.PROJECT)) == "Needs attention."
