# src/ponder_cycle/core/__init__.py
"""Pure cycle computations shared by the client ticker and the scheduled trigger."""

from .civil_time import (
    CivilDateTime,
    DstPolicy,
    InvalidPromptDateError,
    absolute_to_civil,
    civil_to_absolute,
    parse_prompt_date,
)
from .deadline import PromptOverride, ResponseDeadlineTracker, compute_response_deadline
from .notifications import NotificationDecision, NotificationType, TriggerTick, decide_notification
from .phase import CyclePhaseInfo, Phase, get_current_phase, get_phase_info
from .prompt_window import PromptWindow, get_prompt_window

__all__ = [
    "CivilDateTime",
    "DstPolicy",
    "InvalidPromptDateError",
    "absolute_to_civil",
    "civil_to_absolute",
    "parse_prompt_date",
    "Phase",
    "CyclePhaseInfo",
    "get_current_phase",
    "get_phase_info",
    "PromptWindow",
    "get_prompt_window",
    "PromptOverride",
    "ResponseDeadlineTracker",
    "compute_response_deadline",
    "NotificationDecision",
    "NotificationType",
    "TriggerTick",
    "decide_notification",
]
