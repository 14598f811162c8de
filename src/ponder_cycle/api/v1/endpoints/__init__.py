# src/ponder_cycle/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .cycle import router as cycle_router
from .system import router as system_router

__all__ = [
    "cycle_router",
    "system_router",
]
