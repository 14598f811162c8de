# src/ponder_cycle/api/v1/endpoints/cycle.py
"""Cycle phase, prompt window and trigger decision endpoints."""

from collections.abc import Callable
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ponder_cycle.core.civil_time import (
    InvalidPromptDateError,
    instant_from_ms,
    instant_to_ms,
    utcnow,
)
from ponder_cycle.core.deadline import evaluate_response_window
from ponder_cycle.core.notifications import NotificationType, parse_trigger_tick
from ponder_cycle.core.phase import Phase, cycle_date_for, get_phase_info
from ponder_cycle.core.prompt_window import PromptWindow, get_prompt_window
from ponder_cycle.schemas.cycle import (
    DeadlineOut,
    PhaseOut,
    PromptWindowOut,
    TriggerDecisionOut,
)
from ponder_cycle.services.notification_trigger import evaluate_trigger

router = APIRouter(prefix="/cycle", tags=["cycle"])


def get_clock() -> Callable[[], datetime]:
    """Return the clock used to read the current instant."""
    return utcnow


ClockDep = Annotated[Callable[[], datetime], Depends(get_clock)]


def _resolve_now(clock: Callable[[], datetime], at_ms: int | None) -> datetime:
    if at_ms is not None:
        return instant_from_ms(at_ms)
    return clock()


def _window_or_422(prompt_date: str) -> PromptWindow:
    try:
        return get_prompt_window(prompt_date)
    except InvalidPromptDateError as exc:
        raise HTTPException(
            status_code=422,
            detail=str(exc),
        ) from exc


@router.get("/phase", response_model=PhaseOut)
async def get_phase(
    clock: ClockDep,
    at_ms: Annotated[int | None, Query(description="Evaluate at this epoch ms instead of now.")] = None,
    override: Phase | None = None,
) -> PhaseOut:
    """Return the posting/viewing phase and its countdown."""
    now = _resolve_now(clock, at_ms)
    info = get_phase_info(now, override=override)
    return PhaseOut(
        phase=info.phase,
        phase_started_at_ms=instant_to_ms(info.phase_started_at),
        phase_ends_at_ms=instant_to_ms(info.phase_ends_at),
        time_remaining_ms=int(info.time_remaining.total_seconds() * 1000),
        is_overridden=info.is_overridden,
        cycle_date=cycle_date_for(now).isoformat(),
    )


@router.get("/prompts/{prompt_date}/window", response_model=PromptWindowOut)
async def get_window(prompt_date: str) -> PromptWindowOut:
    """Return the availability, close and release instants for a prompt date."""
    window = _window_or_422(prompt_date)
    return PromptWindowOut(
        prompt_date=prompt_date,
        available_at_ms=instant_to_ms(window.available_at),
        response_window_close_at_ms=instant_to_ms(window.response_window_close_at),
        release_at_ms=instant_to_ms(window.release_at),
    )


@router.get("/deadline", response_model=DeadlineOut)
async def get_deadline(
    clock: ClockDep,
    prompt_date: str,
    opened_at_ms: int | None = None,
    at_ms: int | None = None,
) -> DeadlineOut:
    """Return the response deadline for a user who opened the prompt at ``opened_at_ms``."""
    window = _window_or_422(prompt_date)
    now = _resolve_now(clock, at_ms)
    opened_at = instant_from_ms(opened_at_ms) if opened_at_ms is not None else None
    result = evaluate_response_window(window, opened_at, now)
    return DeadlineOut(
        prompt_date=prompt_date,
        deadline_ms=instant_to_ms(result.deadline) if result.deadline else None,
        countdown_ms=(
            int(result.countdown.total_seconds() * 1000) if result.countdown is not None else None
        ),
        is_prompt_available=result.is_prompt_available,
        is_response_window_open=result.is_response_window_open,
        is_in_response_window=result.is_in_response_window,
    )


@router.post("/triggers/{trigger_time}", response_model=TriggerDecisionOut)
async def decide_trigger(
    trigger_time: str,
    clock: ClockDep,
    at_ms: int | None = None,
) -> TriggerDecisionOut:
    """Decide which notification a scheduled tick should send.

    Only the decision is returned; recipient resolution and delivery run in
    the scheduled host with access to storage.
    """
    if parse_trigger_tick(trigger_time) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing or invalid trigger_time parameter (must be '6am' or '6pm')",
        )

    now = _resolve_now(clock, at_ms)
    decision = evaluate_trigger(trigger_time, now)
    info = get_phase_info(now)
    message = decision.message

    recipients = None
    if decision.notification_type is NotificationType.POSTING_REMINDER:
        recipients = "not_responded"
    elif decision.should_fire:
        recipients = "all"

    return TriggerDecisionOut(
        trigger_time=trigger_time,
        phase=info.phase,
        cycle_date=cycle_date_for(now).isoformat(),
        notification_type=decision.notification_type,
        title=message.title if message else None,
        body=message.body if message else None,
        recipients=recipients,
    )
