"""
API routers for the CASPER backend.

Each router handles a specific domain:
- priority: Ranked priority list and active tuning
"""

from .priority import router as priority_router

__all__ = [
    'priority_router',
]
