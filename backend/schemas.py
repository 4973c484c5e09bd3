"""
Pydantic schemas for API request/response validation.

These schemas provide:
- Type safety for API inputs and outputs
- Automatic validation and error messages
- OpenAPI documentation generation

Source records inside a snapshot stay plain dictionaries; the domain
adapters are the only layer that knows their column names.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from casper.priority.types import SourceType


# =============================================================================
# Priority Request Schemas
# =============================================================================

class SnapshotSchema(BaseModel):
    """Already-fetched source collections (snake_case or camelCase keys)."""
    tasks: List[Dict[str, Any]] = Field(default_factory=list)
    inbox_items: List[Dict[str, Any]] = Field(default_factory=list, alias="inboxItems")
    calendar_events: List[Dict[str, Any]] = Field(default_factory=list, alias="calendarEvents")
    portfolio_companies: List[Dict[str, Any]] = Field(default_factory=list, alias="portfolioCompanies")
    pipeline_companies: List[Dict[str, Any]] = Field(default_factory=list, alias="pipelineCompanies")
    reading_items: List[Dict[str, Any]] = Field(default_factory=list, alias="readingItems")
    nonnegotiables: List[Dict[str, Any]] = Field(default_factory=list)
    commitments: List[Dict[str, Any]] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class PriorityRequest(BaseModel):
    """Request body for building a priority list."""
    snapshot: SnapshotSchema = Field(default_factory=SnapshotSchema)
    available_minutes: Optional[int] = Field(default=None, ge=0)
    now: Optional[datetime] = None
    dismissed_ids: List[str] = Field(default_factory=list)
    include_sources: Optional[List[SourceType]] = None
    exclude_sources: Optional[List[SourceType]] = None


# =============================================================================
# Priority Response Schemas
# =============================================================================

class PriorityItemResponse(BaseModel):
    """One ranked item returned from the API."""
    id: str
    source_type: SourceType
    source_id: str
    title: str
    subtitle: Optional[str] = None
    company_name: Optional[str] = None
    context_labels: List[str] = []
    due_at: Optional[datetime] = None
    event_start_at: Optional[datetime] = None
    close_date: Optional[datetime] = None
    urgency_score: float
    importance_score: float
    commitment_score: float
    recency_score: float
    effort_score: float
    priority_score: float
    is_overdue: bool = False
    is_due_today: bool = False
    signals: List[str] = []
    reasoning: str
    breakdown: Dict[str, Any] = {}

    class Config:
        from_attributes = True


class PriorityListResponse(BaseModel):
    """Ranked priority list with run statistics."""
    items: List[PriorityItemResponse]
    total_count: int
    filter_stats: Dict[str, int]
    source_distribution: Dict[str, int] = {}
    generated_at: datetime


class PriorityWeightsSchema(BaseModel):
    """Relative dimension weights."""
    urgency: float
    importance: float
    commitment: float
    recency: float
    effort: float


class PriorityConfigResponse(BaseModel):
    """Active priority weights and thresholds."""
    weights: PriorityWeightsSchema
    max_items: int
    past_event_cutoff_hours: float
    imminent_event_window_hours: float
    company_stale_days: int
    high_importance_floor: float
    calendar_upcoming_window_hours: float
    inbox_urgent_window_hours: float
    max_reading_items: int
    quick_effort_minutes: int
    medium_effort_minutes: int
