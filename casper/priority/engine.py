"""
Priority engine: the pull-based pipeline from source records to a ranked list.

    adapt -> dedupe/dismiss -> score -> exclude -> cap reading -> select -> annotate

Given the current collections and a clock, ``PriorityEngine`` computes a new
list on every call. The engine holds only an immutable ``PriorityConfig``;
concurrent calls share nothing mutable.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set

from casper.priority import clock
from casper.priority.adapters import map_record
from casper.priority.rules import exclusion_reason
from casper.priority.scoring import compute_priority_score, effective_weights, score_dimensions
from casper.priority.selector import select_top_priority_items
from casper.priority.signals import generate_signals
from casper.priority.types import (
    DEFAULT_PRIORITY_CONFIG,
    PriorityConfig,
    PriorityItem,
    PriorityResult,
    SourceType,
)

logger = logging.getLogger(__name__)

# Errors a malformed record can raise while being adapted or scored
RECORD_ERRORS = (TypeError, ValueError, AttributeError, OverflowError)

# Snapshot attribute, accepted dict keys, source type
SNAPSHOT_SOURCES = (
    ("tasks", ("tasks",), SourceType.TASK),
    ("inbox_items", ("inbox_items", "inboxItems", "inbox"), SourceType.INBOX),
    ("calendar_events", ("calendar_events", "calendarEvents", "events"), SourceType.CALENDAR_EVENT),
    ("portfolio_companies", ("portfolio_companies", "portfolioCompanies"), SourceType.PORTFOLIO_COMPANY),
    ("pipeline_companies", ("pipeline_companies", "pipelineCompanies"), SourceType.PIPELINE_COMPANY),
    ("reading_items", ("reading_items", "readingItems"), SourceType.READING_ITEM),
    ("nonnegotiables", ("nonnegotiables",), SourceType.NONNEGOTIABLE),
    ("commitments", ("commitments",), SourceType.COMMITMENT),
)


@dataclass
class PrioritySnapshot:
    """Already-fetched source collections for one engine run."""
    tasks: List[Any] = field(default_factory=list)
    inbox_items: List[Any] = field(default_factory=list)
    calendar_events: List[Any] = field(default_factory=list)
    portfolio_companies: List[Any] = field(default_factory=list)
    pipeline_companies: List[Any] = field(default_factory=list)
    reading_items: List[Any] = field(default_factory=list)
    nonnegotiables: List[Any] = field(default_factory=list)
    commitments: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PrioritySnapshot':
        """Create a snapshot from a dictionary of collections (snake_case or camelCase keys)."""
        kwargs = {}
        for attr, keys, _ in SNAPSHOT_SOURCES:
            for key in keys:
                if data.get(key) is not None:
                    kwargs[attr] = list(data[key])
                    break
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, List[Any]]:
        return {attr: list(getattr(self, attr)) for attr, _, _ in SNAPSHOT_SOURCES}

    def __len__(self) -> int:
        return sum(len(getattr(self, attr)) for attr, _, _ in SNAPSHOT_SOURCES)


def _resolve_sources(sources: Optional[Iterable[Any]]) -> Optional[Set[SourceType]]:
    if sources is None:
        return None
    return {SourceType(source) for source in sources}


class PriorityEngine:
    """
    Unified prioritization engine.

    Maps every source collection onto ``PriorityItem``, scores each item on
    five dimensions, drops excluded items and selects the top list with the
    always-include rules applied.
    """

    def __init__(self, config: Optional[PriorityConfig] = None):
        """
        Initialize the engine.

        Args:
            config: Weights and thresholds (defaults to DEFAULT_PRIORITY_CONFIG)
        """
        self.config = config or DEFAULT_PRIORITY_CONFIG

    def score_item(
        self,
        item: PriorityItem,
        now: Optional[datetime] = None,
        available_minutes: Optional[int] = None
    ) -> PriorityItem:
        """
        Score a single adapted item in place.

        Args:
            item: Item produced by an adapter
            now: Current datetime for time-based dimensions
            available_minutes: Caller's time budget (doubles the effort weight)

        Returns:
            The same item with scores, breakdown and due flags set
        """
        now = clock.resolve_now(now)
        scores = score_dimensions(item, now, self.config)

        item.urgency_score = scores.urgency
        item.importance_score = scores.importance
        item.commitment_score = scores.commitment
        item.recency_score = scores.recency
        item.effort_score = scores.effort
        item.priority_score = compute_priority_score(scores, self.config.weights, available_minutes)

        if item.due_at is not None and item.source_type in (SourceType.TASK, SourceType.COMMITMENT):
            days = clock.calendar_days_until(item.due_at, now)
            item.is_overdue = days < 0
            item.is_due_today = days == 0

        # Build breakdown for debugging/transparency
        weights = effective_weights(self.config.weights, available_minutes)
        breakdown: Dict[str, Any] = {}
        for name, score in scores.as_dict().items():
            breakdown[name] = {
                "score": score,
                "weight": weights[name],
                "weighted": score * weights[name],
            }
        breakdown["available_minutes"] = available_minutes
        item.breakdown = breakdown

        return item

    def collect_items(
        self,
        snapshot: PrioritySnapshot,
        sources: Optional[Set[SourceType]] = None,
        stats: Optional[Dict[str, int]] = None
    ) -> List[PriorityItem]:
        """
        Adapt every record in the snapshot, dropping duplicate ids.

        Records an adapter cannot map are logged and counted under
        ``unmappable``; the rest of the batch is unaffected.
        """
        if stats is None:
            stats = {"duplicates": 0, "unmappable": 0}

        items = []
        seen: Set[str] = set()
        for attr, _, source_type in SNAPSHOT_SOURCES:
            if sources is not None and source_type not in sources:
                continue
            for record in getattr(snapshot, attr):
                try:
                    item = map_record(source_type, record)
                except RECORD_ERRORS as e:
                    logger.warning(f"Skipping unmappable {source_type.value} record: {e}", exc_info=True)
                    stats["unmappable"] += 1
                    continue

                if item.id in seen:
                    logger.debug(f"Dropping duplicate item {item.id}")
                    stats["duplicates"] += 1
                    continue
                seen.add(item.id)
                items.append(item)

        return items

    def build_priority_list(
        self,
        snapshot: PrioritySnapshot,
        now: Optional[datetime] = None,
        available_minutes: Optional[int] = None,
        dismissed_ids: Optional[Iterable[str]] = None,
        include_sources: Optional[Iterable[Any]] = None,
        exclude_sources: Optional[Iterable[Any]] = None
    ) -> PriorityResult:
        """
        Build the ranked priority list for a snapshot.

        Args:
            snapshot: Current source collections
            now: Evaluation time (defaults to current UTC time)
            available_minutes: Caller's time budget, if any
            dismissed_ids: Item ids the user dismissed
            include_sources: Restrict the run to these source types
            exclude_sources: Skip these source types

        Returns:
            PriorityResult with at most ``config.max_items`` items

        Raises:
            ValueError: If a source filter names an unknown source type
        """
        now = clock.resolve_now(now)
        dismissed = set(dismissed_ids or ())

        sources = _resolve_sources(include_sources)
        excluded_sources = _resolve_sources(exclude_sources) or set()
        if sources is None:
            sources = set(SourceType)
        sources -= excluded_sources

        stats = {"excluded": 0, "dismissed": 0, "duplicates": 0, "unmappable": 0, "reading_capped": 0}
        items = self.collect_items(snapshot, sources, stats)

        candidates = []
        reading_count = 0
        for item in items:
            if item.id in dismissed:
                stats["dismissed"] += 1
                continue

            try:
                self.score_item(item, now, available_minutes)
                reason = exclusion_reason(item, now, self.config)
            except RECORD_ERRORS as e:
                logger.warning(f"Skipping unscorable item {item.id}: {e}", exc_info=True)
                stats["unmappable"] += 1
                continue

            if reason is not None:
                logger.debug(f"Excluding {item.id}: {reason}")
                stats["excluded"] += 1
                continue

            if item.source_type == SourceType.READING_ITEM:
                if reading_count >= self.config.max_reading_items:
                    stats["reading_capped"] += 1
                    continue
                reading_count += 1

            candidates.append(item)

        for item in candidates:
            item.signals = generate_signals(item, now, self.config)

        selected = select_top_priority_items(candidates, now, self.config)

        logger.debug(
            f"Built priority list: {len(selected)} of {len(candidates)} candidates "
            f"(excluded={stats['excluded']}, dismissed={stats['dismissed']}, "
            f"duplicates={stats['duplicates']}, unmappable={stats['unmappable']})"
        )

        return PriorityResult(
            items=selected,
            total_count=len(candidates),
            generated_at=now,
            filter_stats=stats,
            candidates=candidates,
        )

    def get_top_priorities(
        self,
        snapshot: PrioritySnapshot,
        n: Optional[int] = None,
        now: Optional[datetime] = None,
        available_minutes: Optional[int] = None,
        **kwargs
    ) -> List[PriorityItem]:
        """
        Get the top priority items.

        Convenience wrapper around ``build_priority_list`` returning only the
        selected items, optionally cut to the first ``n``.
        """
        result = self.build_priority_list(snapshot, now=now, available_minutes=available_minutes, **kwargs)
        if n is not None and n >= 0:
            return result.items[:n]
        return result.items
