"""
Data models for CASPER source records.

Defines the record shapes returned by the persistence layer (tasks, inbox
items, calendar events, companies, reading items, habits and commitments).
Rows arrive as plain dictionaries that mix snake_case storage columns with
camelCase frontend fields; ``from_dict`` on each model is the only place that
knows about either spelling.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp from a database row.

    Accepts datetime/date instances as-is, date-only strings and a trailing
    ``Z`` for UTC. Anything unparseable is treated as absent rather than raised.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    try:
        return date_parser.isoparse(value.strip())
    except (ValueError, OverflowError):
        return None


def parse_bool(value: Any, default: bool = False) -> bool:
    """Parse a boolean column that may be stored as int or text."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "t")
    return bool(value)


def parse_int(value: Any) -> Optional[int]:
    """Parse an integer column, returning None for junk."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (ValueError, TypeError, OverflowError):
        return None


def parse_str(value: Any) -> Optional[str]:
    """Parse a text column. Numbers are stringified; containers count as absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    """Return the first non-None value among several spellings of a column."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _str_id(value: Any) -> str:
    return "" if value is None else str(value)


def _normalize_priority(value: Any) -> Optional[str]:
    """Map stored task priority to 'high' | 'medium' | 'low'."""
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("high", "medium", "low"):
            return text
        value = parse_int(text)
        if value is None:
            return None
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    # Legacy 1-5 scale
    if value >= 4:
        return "high"
    if value == 3:
        return "medium"
    return "low"


@dataclass
class Task:
    """Task record"""
    id: str = ""
    content: str = ""
    completed: bool = False
    priority: Optional[str] = None  # 'high', 'medium', 'low'
    scheduled_for: Optional[datetime] = None
    is_top_priority: bool = False
    company_id: Optional[str] = None
    pipeline_company_id: Optional[str] = None
    project_id: Optional[str] = None
    commitment_id: Optional[str] = None
    effort_minutes: Optional[int] = None
    effort_category: Optional[str] = None
    category: Optional[str] = None
    snoozed_until: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Task':
        """Create Task from database row dictionary"""
        return cls(
            id=_str_id(data.get('id')),
            content=parse_str(_pick(data, 'content', 'title')) or '',
            completed=parse_bool(data.get('completed')),
            priority=_normalize_priority(data.get('priority')),
            scheduled_for=parse_datetime(
                _pick(data, 'scheduled_for', 'scheduledFor', 'due_date', 'dueDate', 'due_at')
            ),
            is_top_priority=parse_bool(_pick(data, 'is_top_priority', 'isTopPriority')),
            company_id=_pick(data, 'company_id', 'companyId'),
            pipeline_company_id=_pick(data, 'pipeline_company_id', 'pipelineCompanyId'),
            project_id=_pick(data, 'project_id', 'projectId'),
            commitment_id=_pick(data, 'commitment_id', 'commitmentId'),
            effort_minutes=parse_int(
                _pick(data, 'effort_minutes', 'effortMinutes', 'estimated_minutes')
            ),
            effort_category=parse_str(_pick(data, 'effort_category', 'effortCategory')),
            category=parse_str(data.get('category')),
            snoozed_until=parse_datetime(_pick(data, 'snoozed_until', 'snoozedUntil')),
            created_at=parse_datetime(_pick(data, 'created_at', 'createdAt')),
            updated_at=parse_datetime(_pick(data, 'updated_at', 'updatedAt')),
        )


@dataclass
class InboxItem:
    """Inbox (email) record"""
    id: str = ""
    subject: str = ""
    sender_name: Optional[str] = None
    sender_email: Optional[str] = None
    preview: Optional[str] = None
    received_at: Optional[datetime] = None
    is_read: bool = False
    is_resolved: bool = False
    is_deleted: bool = False
    snoozed_until: Optional[datetime] = None
    related_company_id: Optional[str] = None
    related_company_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InboxItem':
        """Create InboxItem from database row dictionary"""
        return cls(
            id=_str_id(data.get('id')),
            subject=parse_str(_pick(data, 'subject')) or '',
            sender_name=parse_str(_pick(data, 'sender_name', 'senderName')),
            sender_email=parse_str(_pick(data, 'sender_email', 'senderEmail')),
            preview=parse_str(data.get('preview')),
            received_at=parse_datetime(_pick(data, 'received_at', 'receivedAt')),
            is_read=parse_bool(_pick(data, 'is_read', 'isRead')),
            is_resolved=parse_bool(_pick(data, 'is_resolved', 'isResolved')),
            is_deleted=parse_bool(_pick(data, 'is_deleted', 'isDeleted')),
            snoozed_until=parse_datetime(_pick(data, 'snoozed_until', 'snoozedUntil')),
            related_company_id=_pick(data, 'related_company_id', 'relatedCompanyId'),
            related_company_name=parse_str(_pick(data, 'related_company_name', 'relatedCompanyName')),
        )


@dataclass
class CalendarEvent:
    """Calendar event record"""
    id: str = ""
    external_id: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    attendees: List[Any] = field(default_factory=list)
    snoozed_until: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CalendarEvent':
        """Create CalendarEvent from database row dictionary"""
        attendees = data.get('attendees')
        return cls(
            id=_str_id(data.get('id')),
            external_id=parse_str(_pick(data, 'microsoft_event_id', 'microsoftEventId', 'external_id')),
            title=parse_str(data.get('title')) or '',
            description=parse_str(data.get('description')),
            location=parse_str(data.get('location')),
            start_time=parse_datetime(_pick(data, 'start_time', 'startTime')),
            end_time=parse_datetime(_pick(data, 'end_time', 'endTime')),
            attendees=list(attendees) if isinstance(attendees, (list, tuple)) else [],
            snoozed_until=parse_datetime(_pick(data, 'snoozed_until', 'snoozedUntil')),
        )


@dataclass
class PortfolioCompany:
    """Portfolio company record as shown on the dashboard"""
    id: str = ""
    name: str = ""
    status: str = "active"  # 'active', 'watching', 'exited', 'archived'
    last_interaction_at: Optional[datetime] = None
    open_task_count: int = 0
    next_task: Optional[str] = None
    snoozed_until: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PortfolioCompany':
        """Create PortfolioCompany from database row dictionary"""
        return cls(
            id=_str_id(data.get('id')),
            name=parse_str(data.get('name')) or '',
            status=parse_str(data.get('status')) or 'active',
            last_interaction_at=parse_datetime(
                _pick(data, 'last_interaction_at', 'lastInteractionAt')
            ),
            open_task_count=parse_int(_pick(data, 'open_task_count', 'openTaskCount')) or 0,
            next_task=parse_str(_pick(data, 'next_task', 'nextTask')),
            snoozed_until=parse_datetime(_pick(data, 'snoozed_until', 'snoozedUntil')),
        )


@dataclass
class PipelineCompany:
    """Pipeline (deal flow) company record"""
    id: str = ""
    company_name: str = ""
    status: str = "new"  # 'new', 'active', 'interesting', 'to_share', 'passed'
    last_interaction_at: Optional[datetime] = None
    close_date: Optional[datetime] = None
    next_steps: Optional[str] = None
    is_top_of_mind: bool = False
    sector: Optional[str] = None
    current_round: Optional[str] = None
    snoozed_until: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PipelineCompany':
        """Create PipelineCompany from database row dictionary"""
        return cls(
            id=_str_id(data.get('id')),
            company_name=parse_str(_pick(data, 'company_name', 'companyName', 'name')) or '',
            status=parse_str(data.get('status')) or 'new',
            last_interaction_at=parse_datetime(
                _pick(data, 'last_interaction_at', 'lastInteractionAt')
            ),
            close_date=parse_datetime(_pick(data, 'close_date', 'closeDate')),
            next_steps=parse_str(_pick(data, 'next_steps', 'nextSteps')),
            is_top_of_mind=parse_bool(_pick(data, 'is_top_of_mind', 'isTopOfMind')),
            sector=parse_str(data.get('sector')),
            current_round=parse_str(_pick(data, 'current_round', 'currentRound')),
            snoozed_until=parse_datetime(_pick(data, 'snoozed_until', 'snoozedUntil')),
        )


@dataclass
class ReadingItem:
    """Reading list record"""
    id: str = ""
    title: Optional[str] = None
    url: Optional[str] = None
    hostname: Optional[str] = None
    is_read: bool = False
    project_id: Optional[str] = None
    read_time_minutes: Optional[int] = None
    created_at: Optional[datetime] = None
    snoozed_until: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReadingItem':
        """Create ReadingItem from database row dictionary"""
        return cls(
            id=_str_id(data.get('id')),
            title=parse_str(data.get('title')),
            url=parse_str(data.get('url')),
            hostname=parse_str(data.get('hostname')),
            is_read=parse_bool(_pick(data, 'is_read', 'isRead')),
            project_id=_pick(data, 'project_id', 'projectId'),
            read_time_minutes=parse_int(_pick(data, 'read_time_minutes', 'readTimeMinutes')),
            created_at=parse_datetime(_pick(data, 'created_at', 'createdAt')),
            snoozed_until=parse_datetime(_pick(data, 'snoozed_until', 'snoozedUntil')),
        )


@dataclass
class Nonnegotiable:
    """Recurring habit ("nonnegotiable") record"""
    id: str = ""
    title: str = ""
    description: Optional[str] = None
    reminder_time: Optional[str] = None  # 'HH:MM'
    frequency: Optional[str] = None  # 'daily', 'weekly', ...
    is_active: bool = True
    project_id: Optional[str] = None
    snoozed_until: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Nonnegotiable':
        """Create Nonnegotiable from database row dictionary"""
        return cls(
            id=_str_id(data.get('id')),
            title=parse_str(data.get('title')) or '',
            description=parse_str(data.get('description')),
            reminder_time=parse_str(_pick(data, 'reminder_time', 'reminderTime')),
            frequency=parse_str(data.get('frequency')),
            is_active=parse_bool(_pick(data, 'is_active', 'isActive'), default=True),
            project_id=_pick(data, 'project_id', 'projectId'),
            snoozed_until=parse_datetime(_pick(data, 'snoozed_until', 'snoozedUntil')),
        )


@dataclass
class Commitment:
    """Promise made to (or expected from) another person"""
    id: str = ""
    content: str = ""
    person_name: Optional[str] = None
    direction: Optional[str] = None  # 'owed_by_me', 'owed_to_me', 'waiting_on'
    status: str = "open"  # 'open', 'completed', 'broken', 'cancelled', 'delegated'
    due_at: Optional[datetime] = None
    expected_by: Optional[datetime] = None
    implied_urgency: Optional[str] = None
    snooze_count: int = 0
    is_vip: bool = False
    company_type: Optional[str] = None  # 'portfolio', 'pipeline'
    created_at: Optional[datetime] = None
    snoozed_until: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Commitment':
        """Create Commitment from database row dictionary"""
        return cls(
            id=_str_id(data.get('id')),
            content=parse_str(_pick(data, 'content', 'title')) or '',
            person_name=parse_str(_pick(data, 'person_name', 'personName')),
            direction=parse_str(data.get('direction')),
            status=parse_str(data.get('status')) or 'open',
            due_at=parse_datetime(_pick(data, 'due_at', 'dueAt')),
            expected_by=parse_datetime(_pick(data, 'expected_by', 'expectedBy')),
            implied_urgency=parse_str(_pick(data, 'implied_urgency', 'impliedUrgency')),
            snooze_count=parse_int(_pick(data, 'snooze_count', 'snoozeCount')) or 0,
            is_vip=parse_bool(_pick(data, 'is_vip', 'isVip')),
            company_type=parse_str(_pick(data, 'company_type', 'companyType')),
            created_at=parse_datetime(_pick(data, 'created_at', 'createdAt')),
            snoozed_until=parse_datetime(_pick(data, 'snoozed_until', 'snoozedUntil')),
        )
