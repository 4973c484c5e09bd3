"""
Types for the unified priority model.

Every data source (tasks, inbox, calendar, companies, reading list, habits,
commitments) is mapped to a single ``PriorityItem`` shape, scored on five
normalized dimensions and ranked by one weighted ``priority_score``.
"""

import math
from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from casper.core.config import Config


class SourceType(str, Enum):
    """Where a priority item came from."""
    TASK = "task"
    INBOX = "inbox"
    CALENDAR_EVENT = "calendar_event"
    PORTFOLIO_COMPANY = "portfolio_company"
    PIPELINE_COMPANY = "pipeline_company"
    READING_ITEM = "reading_item"
    NONNEGOTIABLE = "nonnegotiable"
    COMMITMENT = "commitment"
    PROJECT = "project"  # reserved: no adapter yet


DIMENSIONS = ("urgency", "importance", "commitment", "recency", "effort")

_IMMUTABLE_FIELDS = ("source_type", "source_id")

# PriorityConfig fields used as counts or slice bounds
_INT_SETTINGS = ("max_items", "company_stale_days", "max_reading_items",
                 "quick_effort_minutes", "medium_effort_minutes")

FALLBACK_REASONING = {
    SourceType.TASK: "Open task.",
    SourceType.INBOX: "Message waiting in the inbox.",
    SourceType.CALENDAR_EVENT: "Upcoming event.",
    SourceType.PORTFOLIO_COMPANY: "Portfolio company check-in.",
    SourceType.PIPELINE_COMPANY: "Pipeline deal to review.",
    SourceType.READING_ITEM: "Saved for later reading.",
    SourceType.NONNEGOTIABLE: "Recurring habit.",
    SourceType.COMMITMENT: "Open commitment.",
}


@dataclass(frozen=True)
class DimensionScores:
    """The five per-item sub-scores, each in [0, 1]."""
    urgency: float
    importance: float
    commitment: float
    recency: float
    effort: float

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in DIMENSIONS}


@dataclass
class PriorityItem:
    """
    Normalized representation of one source record.

    Adapters fill identity, display and raw signal fields; the engine fills
    the dimension scores, ``priority_score``, ``breakdown`` and ``signals``.
    ``source_type`` and ``source_id`` cannot be reassigned once set.
    """
    source_type: SourceType
    source_id: str
    title: str = "Untitled"
    subtitle: Optional[str] = None
    company_name: Optional[str] = None
    context_labels: List[str] = field(default_factory=list)

    # Timestamps
    due_at: Optional[datetime] = None
    event_start_at: Optional[datetime] = None
    snoozed_until: Optional[datetime] = None
    created_at: Optional[datetime] = None
    last_touched_at: Optional[datetime] = None
    close_date: Optional[datetime] = None

    # State flags and raw signals
    is_completed: bool = False
    is_resolved: bool = False
    is_read: bool = False
    is_deleted: bool = False
    is_active: bool = True
    status: Optional[str] = None
    priority: Optional[str] = None
    is_top_priority: bool = False
    has_company_link: bool = False
    has_project: bool = False
    open_task_count: int = 0
    attendee_count: int = 0
    has_next_steps: bool = False
    is_top_of_mind: bool = False
    effort_minutes: Optional[int] = None
    effort_category: Optional[str] = None
    reminder_time: Optional[str] = None
    frequency: Optional[str] = None
    direction: Optional[str] = None
    implied_urgency: Optional[str] = None
    snooze_count: int = 0
    is_vip: bool = False
    company_type: Optional[str] = None
    person_name: Optional[str] = None
    linked_commitment: bool = False

    # Scores (None until scored)
    urgency_score: Optional[float] = None
    importance_score: Optional[float] = None
    commitment_score: Optional[float] = None
    recency_score: Optional[float] = None
    effort_score: Optional[float] = None
    priority_score: Optional[float] = None

    is_overdue: bool = False
    is_due_today: bool = False

    signals: List[str] = field(default_factory=list)
    breakdown: Dict[str, Any] = field(default_factory=dict)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _IMMUTABLE_FIELDS and name in self.__dict__:
            raise AttributeError(f"PriorityItem.{name} is immutable")
        super().__setattr__(name, value)

    def __post_init__(self) -> None:
        if not isinstance(self.source_type, SourceType):
            self.__dict__['source_type'] = SourceType(self.source_type)
        if self.title is not None and not isinstance(self.title, str):
            self.title = str(self.title)
        if not self.title or not self.title.strip():
            self.title = "Untitled"
        if self.subtitle is not None and not isinstance(self.subtitle, str):
            self.subtitle = str(self.subtitle)
        self.context_labels = [str(label) for label in self.context_labels if label is not None]

    @property
    def id(self) -> str:
        """Deterministic item id, e.g. ``task-<uuid>``."""
        return f"{self.source_type.value}-{self.source_id}"

    @property
    def is_scored(self) -> bool:
        return self.priority_score is not None

    @property
    def scores(self) -> Optional[DimensionScores]:
        if any(getattr(self, f"{name}_score") is None for name in DIMENSIONS):
            return None
        return DimensionScores(
            urgency=self.urgency_score,
            importance=self.importance_score,
            commitment=self.commitment_score,
            recency=self.recency_score,
            effort=self.effort_score,
        )

    @property
    def reasoning(self) -> str:
        """Signals joined into one display sentence."""
        if not self.signals:
            return FALLBACK_REASONING.get(self.source_type, "Needs attention.")
        return ". ".join(signal[:1].upper() + signal[1:] for signal in self.signals) + "."

    def to_dict(self) -> Dict[str, Any]:
        """Convert item to a JSON-friendly dictionary."""
        data: Dict[str, Any] = {"id": self.id}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, Enum):
                value = value.value
            elif isinstance(value, list):
                value = list(value)
            elif isinstance(value, dict):
                value = dict(value)
            data[f.name] = value
        data["reasoning"] = self.reasoning
        return data


@dataclass(frozen=True)
class PriorityWeights:
    """
    Relative weights of the five dimensions.

    Weights need not sum to 1; the composite scorer normalizes by their sum.
    """
    urgency: float = 0.30
    importance: float = 0.25
    commitment: float = 0.25
    recency: float = 0.10
    effort: float = 0.10

    def __post_init__(self) -> None:
        for name in DIMENSIONS:
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise ValueError(f"Weight '{name}' must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"Weight '{name}' must be finite")
            if value < 0:
                raise ValueError(f"Weight '{name}' cannot be negative")
        if self.total() <= 0:
            raise ValueError("At least one priority weight must be positive")

    def total(self) -> float:
        return self.urgency + self.importance + self.commitment + self.recency + self.effort

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in DIMENSIONS}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PriorityWeights':
        if not isinstance(data, dict):
            raise ValueError(f"Priority weights must be a mapping, got {type(data).__name__}")
        unknown = set(data) - set(DIMENSIONS)
        if unknown:
            raise ValueError(f"Unknown priority weights: {sorted(unknown)}")
        return cls(**{name: data[name] for name in DIMENSIONS if name in data})


@dataclass(frozen=True)
class PriorityConfig:
    """
    Immutable tuning for one engine instance.

    The event windows, staleness threshold, importance floor and item cap are
    observable contracts; changing them changes which items surface.
    """
    weights: PriorityWeights = field(default_factory=PriorityWeights)
    max_items: int = 8
    past_event_cutoff_hours: float = 1.0
    imminent_event_window_hours: float = 2.0
    company_stale_days: int = 14
    high_importance_floor: float = 0.9
    calendar_upcoming_window_hours: float = 48
    inbox_urgent_window_hours: float = 4
    max_reading_items: int = 5
    quick_effort_minutes: int = 15
    medium_effort_minutes: int = 60

    def __post_init__(self) -> None:
        if not isinstance(self.weights, PriorityWeights):
            raise ValueError("weights must be a PriorityWeights instance")
        for f in fields(self):
            if f.name == "weights":
                continue
            value = getattr(self, f.name)
            expected = int if f.name in _INT_SETTINGS else (int, float)
            if isinstance(value, bool) or not isinstance(value, expected):
                kind = "an integer" if expected is int else "a number"
                raise ValueError(f"{f.name} must be {kind}, got {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"{f.name} must be finite")
        if self.max_items < 0:
            raise ValueError("max_items cannot be negative")
        if not 0 <= self.high_importance_floor <= 1:
            raise ValueError("high_importance_floor must be within [0, 1]")
        if self.company_stale_days < 0:
            raise ValueError("company_stale_days cannot be negative")
        if self.quick_effort_minutes > self.medium_effort_minutes:
            raise ValueError("quick_effort_minutes must not exceed medium_effort_minutes")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PriorityConfig':
        """Build a config from the ``priority`` section of settings."""
        known = {f.name for f in fields(cls)}
        kwargs = {key: value for key, value in data.items() if key in known and key != "weights"}
        if "weights" in data:
            kwargs["weights"] = PriorityWeights.from_dict(data["weights"])
        return cls(**kwargs)

    @classmethod
    def from_config(cls, config: 'Config') -> 'PriorityConfig':
        return cls.from_dict(config.priority)

    def to_dict(self) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "weights"}
        data["weights"] = self.weights.as_dict()
        return data


DEFAULT_PRIORITY_CONFIG = PriorityConfig()


@dataclass
class PriorityResult:
    """Output of one engine run."""
    items: List[PriorityItem]
    total_count: int
    generated_at: datetime
    filter_stats: Dict[str, int] = field(default_factory=dict)
    candidates: List[PriorityItem] = field(default_factory=list)
