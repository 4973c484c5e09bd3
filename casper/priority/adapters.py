"""
Domain adapters: source records -> unscored PriorityItem.

This module is the single translation boundary between the persistence
layer's row shapes and the priority engine. Each ``map_*`` function accepts
either a model instance or a raw row dictionary, copies the fields the
scorers need, and leaves every score unset. Inputs are never mutated.
"""

from typing import Any, Callable, Dict, Union

from casper.core.models import (
    CalendarEvent,
    Commitment,
    InboxItem,
    Nonnegotiable,
    PipelineCompany,
    PortfolioCompany,
    ReadingItem,
    Task,
)
from casper.priority.types import PriorityItem, SourceType


def _coerce(record: Any, model: type) -> Any:
    if isinstance(record, model):
        return record
    if isinstance(record, dict):
        return model.from_dict(record)
    raise TypeError(
        f"Expected {model.__name__} or dict, got {type(record).__name__}"
    )


def _require_id(source_id: str, source_type: SourceType) -> str:
    if not source_id:
        raise ValueError(f"{source_type.value} record has no id")
    return source_id


def map_task(record: Union[Task, Dict[str, Any]]) -> PriorityItem:
    """Map a task record."""
    task: Task = _coerce(record, Task)
    labels = []
    if task.priority:
        labels.append(f"{task.priority.capitalize()} priority")
    if task.category:
        labels.append(task.category)

    return PriorityItem(
        source_type=SourceType.TASK,
        source_id=_require_id(task.id, SourceType.TASK),
        title=task.content,
        context_labels=labels,
        due_at=task.scheduled_for,
        snoozed_until=task.snoozed_until,
        created_at=task.created_at,
        last_touched_at=task.updated_at or task.created_at,
        is_completed=task.completed,
        priority=task.priority,
        is_top_priority=task.is_top_priority,
        has_company_link=bool(task.company_id or task.pipeline_company_id),
        has_project=bool(task.project_id),
        effort_minutes=task.effort_minutes,
        effort_category=task.effort_category,
        linked_commitment=bool(task.commitment_id),
    )


def map_inbox_item(record: Union[InboxItem, Dict[str, Any]]) -> PriorityItem:
    """Map an inbox (email) record."""
    item: InboxItem = _coerce(record, InboxItem)
    return PriorityItem(
        source_type=SourceType.INBOX,
        source_id=_require_id(item.id, SourceType.INBOX),
        title=item.subject or "No subject",
        subtitle=item.sender_name or item.sender_email,
        company_name=item.related_company_name,
        context_labels=["Inbox"] if item.is_read else ["Inbox", "Unread"],
        snoozed_until=item.snoozed_until,
        created_at=item.received_at,
        last_touched_at=item.received_at,
        is_read=item.is_read,
        is_resolved=item.is_resolved,
        is_deleted=item.is_deleted,
        has_company_link=bool(item.related_company_id),
    )


def map_calendar_event(record: Union[CalendarEvent, Dict[str, Any]]) -> PriorityItem:
    """Map a calendar event. External (Outlook) ids win over local ids."""
    event: CalendarEvent = _coerce(record, CalendarEvent)
    source_id = str(event.external_id) if event.external_id else event.id
    subtitle = event.location
    return PriorityItem(
        source_type=SourceType.CALENDAR_EVENT,
        source_id=_require_id(source_id, SourceType.CALENDAR_EVENT),
        title=event.title,
        subtitle=subtitle,
        context_labels=["Calendar"],
        event_start_at=event.start_time,
        snoozed_until=event.snoozed_until,
        attendee_count=len(event.attendees),
    )


def map_portfolio_company(record: Union[PortfolioCompany, Dict[str, Any]]) -> PriorityItem:
    """Map a portfolio company."""
    company: PortfolioCompany = _coerce(record, PortfolioCompany)
    return PriorityItem(
        source_type=SourceType.PORTFOLIO_COMPANY,
        source_id=_require_id(company.id, SourceType.PORTFOLIO_COMPANY),
        title=company.name,
        subtitle=company.next_task,
        company_name=company.name,
        context_labels=["Portfolio", company.status],
        snoozed_until=company.snoozed_until,
        last_touched_at=company.last_interaction_at,
        status=company.status,
        open_task_count=max(0, company.open_task_count),
        has_company_link=True,
    )


def map_pipeline_company(record: Union[PipelineCompany, Dict[str, Any]]) -> PriorityItem:
    """Map a pipeline (deal flow) company."""
    company: PipelineCompany = _coerce(record, PipelineCompany)
    labels = ["Pipeline"]
    if company.current_round:
        labels.append(company.current_round)
    labels.append(company.status)
    return PriorityItem(
        source_type=SourceType.PIPELINE_COMPANY,
        source_id=_require_id(company.id, SourceType.PIPELINE_COMPANY),
        title=company.company_name,
        subtitle=company.next_steps or company.sector,
        company_name=company.company_name,
        context_labels=labels,
        snoozed_until=company.snoozed_until,
        last_touched_at=company.last_interaction_at,
        close_date=company.close_date,
        status=company.status,
        has_next_steps=bool(company.next_steps),
        is_top_of_mind=company.is_top_of_mind,
        has_company_link=True,
    )


def map_reading_item(record: Union[ReadingItem, Dict[str, Any]]) -> PriorityItem:
    """Map a reading list entry."""
    item: ReadingItem = _coerce(record, ReadingItem)
    return PriorityItem(
        source_type=SourceType.READING_ITEM,
        source_id=_require_id(item.id, SourceType.READING_ITEM),
        title=item.title or item.url or "Untitled",
        subtitle=item.hostname or item.url,
        context_labels=["Reading List", "Read" if item.is_read else "Unread"],
        snoozed_until=item.snoozed_until,
        created_at=item.created_at,
        last_touched_at=item.created_at,
        is_read=item.is_read,
        has_project=bool(item.project_id),
        effort_minutes=item.read_time_minutes,
    )


def map_nonnegotiable(record: Union[Nonnegotiable, Dict[str, Any]]) -> PriorityItem:
    """Map a recurring habit."""
    item: Nonnegotiable = _coerce(record, Nonnegotiable)
    if item.frequency:
        subtitle = item.frequency
        if item.reminder_time:
            subtitle += f" at {item.reminder_time}"
    else:
        subtitle = "Recurring habit"
    return PriorityItem(
        source_type=SourceType.NONNEGOTIABLE,
        source_id=_require_id(item.id, SourceType.NONNEGOTIABLE),
        title=item.title,
        subtitle=subtitle,
        context_labels=["Nonnegotiable", item.frequency or "habit"],
        snoozed_until=item.snoozed_until,
        is_active=item.is_active,
        has_project=bool(item.project_id),
        reminder_time=item.reminder_time,
        frequency=item.frequency,
    )


def map_commitment(record: Union[Commitment, Dict[str, Any]]) -> PriorityItem:
    """
    Map a commitment (a promise made to, or expected from, someone).

    For commitments owed to the user the expected-by date is the deadline.
    """
    item: Commitment = _coerce(record, Commitment)
    due = item.expected_by if item.direction == "owed_to_me" else item.due_at
    return PriorityItem(
        source_type=SourceType.COMMITMENT,
        source_id=_require_id(item.id, SourceType.COMMITMENT),
        title=item.content,
        subtitle=item.person_name,
        context_labels=["Commitment"],
        due_at=due,
        snoozed_until=item.snoozed_until,
        created_at=item.created_at,
        last_touched_at=item.created_at,
        status=item.status,
        direction=item.direction,
        implied_urgency=item.implied_urgency,
        snooze_count=max(0, item.snooze_count),
        is_vip=item.is_vip,
        company_type=item.company_type,
        person_name=item.person_name,
        has_company_link=item.company_type in ("portfolio", "pipeline"),
    )


ADAPTERS: Dict[SourceType, Callable[[Any], PriorityItem]] = {
    SourceType.TASK: map_task,
    SourceType.INBOX: map_inbox_item,
    SourceType.CALENDAR_EVENT: map_calendar_event,
    SourceType.PORTFOLIO_COMPANY: map_portfolio_company,
    SourceType.PIPELINE_COMPANY: map_pipeline_company,
    SourceType.READING_ITEM: map_reading_item,
    SourceType.NONNEGOTIABLE: map_nonnegotiable,
    SourceType.COMMITMENT: map_commitment,
}


def map_record(source_type: Union[SourceType, str], record: Any) -> PriorityItem:
    """Dispatch a record to the adapter for its source type."""
    source_type = SourceType(source_type)
    try:
        adapter = ADAPTERS[source_type]
    except KeyError:
        raise ValueError(f"No adapter for source type '{source_type.value}'") from None
    return adapter(record)
