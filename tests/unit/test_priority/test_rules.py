"""
Unit tests for exclusion and always-include rules.
"""

from datetime import timedelta

from casper.priority.rules import exclusion_reason, is_always_include, should_exclude
from casper.priority.types import PriorityConfig, PriorityItem, SourceType


def item(source_type, **kwargs):
    return PriorityItem(source_type=source_type, source_id="x1", **kwargs)


class TestExclusion:
    """Tests for should_exclude."""

    def test_completed_task(self, now):
        assert should_exclude(item(SourceType.TASK, is_completed=True), now)
        assert not should_exclude(item(SourceType.TASK), now)

    def test_resolved_inbox(self, now):
        assert should_exclude(item(SourceType.INBOX, is_resolved=True), now)
        assert not should_exclude(item(SourceType.INBOX), now)

    def test_deleted_inbox(self, now):
        assert exclusion_reason(item(SourceType.INBOX, is_deleted=True), now) == "deleted"

    def test_past_calendar_event(self, now):
        """Events that started more than 1 hour ago are dropped."""
        started = item(SourceType.CALENDAR_EVENT, event_start_at=now - timedelta(hours=2))
        assert should_exclude(started, now)

    def test_event_in_progress_within_cutoff_stays(self, now):
        in_progress = item(SourceType.CALENDAR_EVENT, event_start_at=now - timedelta(minutes=30))
        assert not should_exclude(in_progress, now)

    def test_event_beyond_upcoming_window(self, now):
        far = item(SourceType.CALENDAR_EVENT, event_start_at=now + timedelta(hours=72))
        assert exclusion_reason(far, now) == "event too far out"

    def test_event_without_start_is_excluded(self, now):
        """An event with no start time cannot fall inside the upcoming window."""
        assert exclusion_reason(item(SourceType.CALENDAR_EVENT), now) == "no start time"

    def test_snoozed_until_future(self, now):
        """Any source snoozed into the future is dropped."""
        for source_type in SourceType:
            snoozed = item(source_type, snoozed_until=now + timedelta(hours=1))
            assert should_exclude(snoozed, now), source_type

    def test_expired_snooze_is_ignored(self, now):
        assert not should_exclude(item(SourceType.TASK, snoozed_until=now - timedelta(hours=1)), now)

    def test_portfolio_company(self, now):
        stale = item(SourceType.PORTFOLIO_COMPANY, status="active", last_touched_at=now - timedelta(days=20))
        fresh = item(SourceType.PORTFOLIO_COMPANY, status="active", last_touched_at=now - timedelta(days=2))
        fresh_with_tasks = item(
            SourceType.PORTFOLIO_COMPANY, status="active",
            last_touched_at=now - timedelta(days=2), open_task_count=1,
        )
        never = item(SourceType.PORTFOLIO_COMPANY, status="active")
        exited = item(SourceType.PORTFOLIO_COMPANY, status="exited")

        assert not should_exclude(stale, now)
        assert should_exclude(fresh, now)
        assert not should_exclude(fresh_with_tasks, now)
        assert not should_exclude(never, now)
        assert should_exclude(exited, now)

    def test_passed_pipeline_company(self, now):
        assert should_exclude(item(SourceType.PIPELINE_COMPANY, status="passed"), now)
        assert not should_exclude(item(SourceType.PIPELINE_COMPANY, status="active"), now)

    def test_read_reading_item(self, now):
        assert should_exclude(item(SourceType.READING_ITEM, is_read=True), now)

    def test_inactive_nonnegotiable(self, now):
        assert should_exclude(item(SourceType.NONNEGOTIABLE, is_active=False), now)
        assert not should_exclude(item(SourceType.NONNEGOTIABLE), now)

    def test_closed_commitment(self, now):
        assert exclusion_reason(item(SourceType.COMMITMENT, status="completed"), now) == "completed"
        assert not should_exclude(item(SourceType.COMMITMENT, status="open"), now)
        assert not should_exclude(item(SourceType.COMMITMENT), now)

    def test_custom_cutoff(self, now):
        config = PriorityConfig(past_event_cutoff_hours=3.0)
        started = item(SourceType.CALENDAR_EVENT, event_start_at=now - timedelta(hours=2))
        assert not should_exclude(started, now, config)


class TestAlwaysInclude:
    """Tests for is_always_include."""

    def test_imminent_event(self, now):
        assert is_always_include(item(SourceType.CALENDAR_EVENT, event_start_at=now + timedelta(minutes=30)), now)
        assert is_always_include(item(SourceType.CALENDAR_EVENT, event_start_at=now), now)

    def test_event_window_edges(self, now):
        """0 <= hours < 2."""
        at_two = item(SourceType.CALENDAR_EVENT, event_start_at=now + timedelta(hours=2))
        started = item(SourceType.CALENDAR_EVENT, event_start_at=now - timedelta(minutes=1))
        assert not is_always_include(at_two, now)
        assert not is_always_include(started, now)

    def test_event_without_start(self, now):
        assert not is_always_include(item(SourceType.CALENDAR_EVENT), now)

    def test_overdue_important_task(self, now):
        overdue = item(SourceType.TASK, due_at=now - timedelta(days=1), importance_score=0.95)
        assert is_always_include(overdue, now)

    def test_overdue_task_below_floor(self, now):
        overdue = item(SourceType.TASK, due_at=now - timedelta(days=1), importance_score=0.85)
        assert not is_always_include(overdue, now)

    def test_due_today_is_not_overdue(self, now):
        earlier_today = item(SourceType.TASK, due_at=now - timedelta(hours=2), importance_score=1.0)
        assert not is_always_include(earlier_today, now)

    def test_importance_floor_is_inclusive(self, now):
        overdue = item(SourceType.TASK, due_at=now - timedelta(days=2), importance_score=0.9)
        assert is_always_include(overdue, now)

    def test_other_sources_never_forced(self, now):
        inbox = item(SourceType.INBOX, importance_score=1.0, created_at=now)
        assert not is_always_include(inbox, now)
