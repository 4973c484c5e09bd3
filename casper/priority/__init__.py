"""
Priority module for CASPER.

Maps every dashboard source onto one PriorityItem shape, scores items on
five dimensions and selects the ranked "what to look at next" list.
"""

from .types import (
    SourceType,
    PriorityItem,
    PriorityWeights,
    PriorityConfig,
    PriorityResult,
    DimensionScores,
    DEFAULT_PRIORITY_CONFIG,
)
from .adapters import (
    map_task,
    map_inbox_item,
    map_calendar_event,
    map_portfolio_company,
    map_pipeline_company,
    map_reading_item,
    map_nonnegotiable,
    map_commitment,
    map_record,
)
from .scoring import (
    compute_priority_score,
    score_dimensions,
)
from .rules import should_exclude, is_always_include
from .selector import (
    select_top_priority_items,
    get_source_type_distribution,
    get_avg_score,
    get_min_score,
    get_max_score,
    validate_priority_item,
)
from .signals import generate_signals, format_reasoning
from .engine import PriorityEngine, PrioritySnapshot

__all__ = [
    # Types
    'SourceType',
    'PriorityItem',
    'PriorityWeights',
    'PriorityConfig',
    'PriorityResult',
    'DimensionScores',
    'DEFAULT_PRIORITY_CONFIG',
    # Adapters
    'map_task',
    'map_inbox_item',
    'map_calendar_event',
    'map_portfolio_company',
    'map_pipeline_company',
    'map_reading_item',
    'map_nonnegotiable',
    'map_commitment',
    'map_record',
    # Scoring
    'compute_priority_score',
    'score_dimensions',
    # Rules
    'should_exclude',
    'is_always_include',
    # Selector
    'select_top_priority_items',
    'get_source_type_distribution',
    'get_avg_score',
    'get_min_score',
    'get_max_score',
    'validate_priority_item',
    # Signals
    'generate_signals',
    'format_reasoning',
    # Engine
    'PriorityEngine',
    'PrioritySnapshot',
]
