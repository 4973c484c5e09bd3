"""
Shared fixtures for CASPER tests.
"""

import pytest
from datetime import datetime, timezone

from casper.priority.types import PriorityItem, SourceType

# Saturday noon, UTC
NOW = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed evaluation time."""
    return NOW


@pytest.fixture
def make_item():
    """Factory for scored PriorityItems used by rule and selector tests."""
    counter = {"n": 0}

    def _make(score=0.5, source_type=SourceType.TASK, source_id=None, **kwargs):
        counter["n"] += 1
        item = PriorityItem(
            source_type=source_type,
            source_id=source_id or f"item{counter['n']}",
            title=kwargs.pop("title", f"Item {counter['n']}"),
            **kwargs
        )
        defaults = {
            "urgency_score": 0.5,
            "importance_score": 0.5,
            "commitment_score": 0.0,
            "recency_score": 0.5,
            "effort_score": 0.5,
        }
        for name, value in defaults.items():
            if getattr(item, name) is None:
                setattr(item, name, value)
        item.priority_score = score
        return item

    return _make
