"""
Core module for CASPER
Contains configuration and source record definitions
"""

from .config import Config
from .models import (
    Task,
    InboxItem,
    CalendarEvent,
    PortfolioCompany,
    PipelineCompany,
    ReadingItem,
    Nonnegotiable,
    Commitment,
    parse_datetime,
)

__all__ = [
    'Config',
    'Task',
    'InboxItem',
    'CalendarEvent',
    'PortfolioCompany',
    'PipelineCompany',
    'ReadingItem',
    'Nonnegotiable',
    'Commitment',
    'parse_datetime',
]
