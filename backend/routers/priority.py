"""
Priority list API endpoints.

Ranks an already-fetched snapshot of dashboard collections with the
PriorityEngine. The endpoints hold no state; every request gets a fresh list.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.dependencies import get_priority_config, get_priority_engine
from backend.schemas import (
    PriorityConfigResponse,
    PriorityItemResponse,
    PriorityListResponse,
    PriorityRequest,
)
from casper.priority import (
    PriorityConfig,
    PriorityEngine,
    PrioritySnapshot,
    get_source_type_distribution,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/priority", tags=["priority"])


@router.post("/items", response_model=PriorityListResponse)
async def build_priority_items(
    request: PriorityRequest,
    engine: PriorityEngine = Depends(get_priority_engine),
):
    """
    Build the ranked priority list for a snapshot.

    - **snapshot**: source collections (tasks, inbox items, events, ...)
    - **available_minutes**: optional time budget, favours quick items
    - **now**: optional evaluation time (defaults to server time, UTC)
    - **dismissed_ids**: item ids to leave out
    - **include_sources** / **exclude_sources**: restrict source types
    """
    try:
        snapshot = PrioritySnapshot.from_dict(request.snapshot.model_dump())
        result = engine.build_priority_list(
            snapshot,
            now=request.now,
            available_minutes=request.available_minutes,
            dismissed_ids=request.dismissed_ids,
            include_sources=request.include_sources,
            exclude_sources=request.exclude_sources,
        )

        items = [PriorityItemResponse.model_validate(item.to_dict()) for item in result.items]

        return PriorityListResponse(
            items=items,
            total_count=result.total_count,
            filter_stats=result.filter_stats,
            source_distribution=get_source_type_distribution(result.items),
            generated_at=result.generated_at,
        )

    except Exception as e:
        logger.exception("Priority list request failed")
        raise HTTPException(status_code=500, detail=f"Failed to build priority list: {str(e)}")


@router.get("/config", response_model=PriorityConfigResponse)
async def get_active_config(
    priority_config: PriorityConfig = Depends(get_priority_config),
):
    """Get the active priority weights and thresholds."""
    return PriorityConfigResponse(**priority_config.to_dict())
