"""Schemas for cycle phase, prompt window and trigger responses.

Instants travel as integer milliseconds since the Unix epoch.
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from ponder_cycle.core.notifications import NotificationType
from ponder_cycle.core.phase import Phase


class PhaseOut(BaseModel):
    """Current posting/viewing phase with its boundaries."""

    phase: Phase
    phase_started_at_ms: int
    phase_ends_at_ms: int
    time_remaining_ms: int
    is_overridden: bool = False
    cycle_date: str = Field(..., description="Civil date (YYYY-MM-DD) of the active cycle.")


class PromptWindowOut(BaseModel):
    """Absolute instants bounding one day's prompt."""

    prompt_date: str
    available_at_ms: int
    response_window_close_at_ms: int
    release_at_ms: int


class DeadlineOut(BaseModel):
    """Per-user response deadline for a prompt."""

    prompt_date: str
    deadline_ms: int | None = None
    countdown_ms: int | None = None
    is_prompt_available: bool
    is_response_window_open: bool
    is_in_response_window: bool


class TriggerDecisionOut(BaseModel):
    """Notification decision for a scheduled trigger tick."""

    trigger_time: str
    phase: Phase
    cycle_date: str
    notification_type: NotificationType | None = None
    title: str | None = None
    body: str | None = None
    recipients: Literal["all", "not_responded"] | None = None
