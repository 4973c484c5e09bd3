"""
Dependency injection for FastAPI endpoints.

Provides singleton instances of Config, PriorityConfig and PriorityEngine
to be used across all API routes.

Pattern: **Dependency Injection** - FastAPI's Depends() mechanism
allows us to inject shared resources into route handlers without
global state, making the code testable (tests swap them through
``app.dependency_overrides``).
"""

from functools import lru_cache
from typing import List

from casper.core.config import Config
from casper.priority import PriorityConfig, PriorityEngine


@lru_cache()
def get_config() -> Config:
    """
    Get cached Config instance.

    lru_cache ensures we only create one Config instance
    for the lifetime of the application (singleton pattern).
    The directory comes from $CASPER_CONFIG_DIR when set.
    """
    return Config()


@lru_cache()
def get_priority_config() -> PriorityConfig:
    """
    Get the immutable priority tuning, built once from the config files.

    Invalid weights fail here, at first use, with a ValueError.
    """
    return PriorityConfig.from_config(get_config())


def get_cors_origins() -> List[str]:
    """Allowed frontend origins, from the ``settings`` section."""
    origins = get_config().get("cors_origins", default=[])
    if not isinstance(origins, list):
        raise ValueError("cors_origins must be a list of origins")
    return [str(origin) for origin in origins]


def get_priority_engine() -> PriorityEngine:
    """
    Get PriorityEngine for ranking requests.

    The engine is stateless apart from its config, so a new one per
    request is cheap and shares nothing.
    """
    return PriorityEngine(get_priority_config())
