# src/ponder_cycle/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import cycle_router, system_router

__all__ = [
    "cycle_router",
    "system_router",
]
