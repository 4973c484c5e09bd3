"""
Dashboard module for CASPER.

Provides Rich CLI formatting for priority lists.
"""

from .formatter import PriorityFormatter, SOURCE_STYLES

__all__ = [
    'PriorityFormatter',
    'SOURCE_STYLES',
]
