# src/ponder_cycle/core/deadline.py
"""Per-user response deadlines.

Opening the prompt starts a personal grace period (30 minutes by default).
The user's deadline is the earlier of the end of that grace period and the
global response cut-off. Recording the opened-at mark is done by the caller's
storage collaborator; this module only reads it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ponder_cycle.core.civil_time import to_instant
from ponder_cycle.core.prompt_window import PromptWindow
from ponder_cycle.core.settings import settings


@dataclass(frozen=True)
class UserPromptOpenMark:
    """When a user first opened a prompt. Written once by that user's client."""

    user_id: str
    prompt_id: str
    opened_at: datetime


@dataclass(frozen=True)
class PromptOverride:
    """Manual window override used for testing a prompt outside its hours."""

    force_open: bool = False
    force_closed: bool = False
    expires_at: datetime | None = None

    def is_active(self, now: datetime) -> bool:
        if not (self.force_open or self.force_closed):
            return False
        return self.expires_at is None or self.expires_at > to_instant(now)


@dataclass(frozen=True)
class ResponseWindowStatus:
    """What the client shows for the active prompt at one instant."""

    deadline: datetime | None
    countdown: timedelta | None
    is_prompt_available: bool
    is_response_window_open: bool
    is_in_response_window: bool
    opened_at_known: bool = True


def compute_response_deadline(
    opened_at: datetime | None,
    close_at: datetime,
    grace: timedelta | None = None,
) -> datetime | None:
    """Return ``min(opened_at + grace, close_at)``, or None if never opened."""
    if opened_at is None:
        return None
    grace = grace if grace is not None else timedelta(minutes=settings.response_grace_minutes)
    return min(to_instant(opened_at) + grace, to_instant(close_at))


def time_until_deadline(deadline: datetime | None, now: datetime) -> timedelta | None:
    """Return the countdown to ``deadline`` clamped at zero, or None without one."""
    if deadline is None:
        return None
    return max(timedelta(0), deadline - to_instant(now))


class ResponseDeadlineTracker:
    """Derives deadline and countdown state for the active prompt."""

    def __init__(self, grace: timedelta | None = None) -> None:
        self._grace = grace

    @property
    def grace(self) -> timedelta:
        if self._grace is not None:
            return self._grace
        return timedelta(minutes=settings.response_grace_minutes)

    def deadline_for(self, opened_at: datetime | None, close_at: datetime) -> datetime | None:
        return compute_response_deadline(opened_at, close_at, self.grace)

    def evaluate(
        self,
        window: PromptWindow,
        opened_at: datetime | None,
        now: datetime,
        *,
        signed_in: bool = True,
        override: PromptOverride | None = None,
        opened_at_known: bool = True,
    ) -> ResponseWindowStatus:
        """Evaluate the response window for one user at ``now``.

        Args:
            window: Window of the active prompt
            opened_at: The user's opened-at mark, None if not opened yet
            now: Instant to evaluate
            signed_in: Whether a user is signed in at all
            override: Optional manual override of the window
            opened_at_known: False when the mark could not be read this time;
                the deadline is then reported as unknown rather than absent

        Returns:
            ResponseWindowStatus for ``now``
        """
        now = to_instant(now)
        available = window.is_available(now)

        if override is not None and override.is_active(now):
            if override.force_closed:
                return ResponseWindowStatus(
                    deadline=None,
                    countdown=None,
                    is_prompt_available=available,
                    is_response_window_open=False,
                    is_in_response_window=False,
                    opened_at_known=opened_at_known,
                )
            return ResponseWindowStatus(
                deadline=now + self.grace,
                countdown=self.grace,
                is_prompt_available=True,
                is_response_window_open=True,
                is_in_response_window=signed_in,
                opened_at_known=opened_at_known,
            )

        globally_open = window.is_response_window_open(now)
        if not signed_in or not opened_at_known:
            deadline = None
        else:
            deadline = self.deadline_for(opened_at, window.response_window_close_at)
        countdown = time_until_deadline(deadline, now)

        return ResponseWindowStatus(
            deadline=deadline,
            countdown=countdown,
            is_prompt_available=available,
            is_response_window_open=globally_open,
            is_in_response_window=(
                signed_in
                and available
                and globally_open
                and countdown is not None
                and countdown > timedelta(0)
            ),
            opened_at_known=opened_at_known,
        )


def evaluate_response_window(
    window: PromptWindow,
    opened_at: datetime | None,
    now: datetime,
    *,
    signed_in: bool = True,
    override: PromptOverride | None = None,
) -> ResponseWindowStatus:
    """Evaluate the response window with the configured grace period."""
    return ResponseDeadlineTracker().evaluate(
        window, opened_at, now, signed_in=signed_in, override=override
    )
