# src/ponder_cycle/services/__init__.py
"""Hosts that run the shared cycle logic for the client and the scheduler."""

from .cycle_ticker import CycleSnapshot, CycleTicker
from .notification_trigger import (
    InvalidTriggerTickError,
    NotificationTriggerService,
    TriggerOutcome,
)

__all__ = [
    "CycleSnapshot",
    "CycleTicker",
    "InvalidTriggerTickError",
    "NotificationTriggerService",
    "TriggerOutcome",
]
