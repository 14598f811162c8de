# src/ponder_cycle/core/prompt_window.py
"""Daily prompt windows derived from a prompt's civil date."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from ponder_cycle.core.civil_time import (
    civil_time_for_prompt_date,
    parse_prompt_date,
    to_instant,
)
from ponder_cycle.core.settings import settings


def _time_until(target: datetime, now: datetime) -> timedelta | None:
    remaining = target - to_instant(now)
    if remaining <= timedelta(0):
        return None
    return remaining


@dataclass(frozen=True)
class PromptWindow:
    """The three instants that bound one day's prompt.

    Attributes:
        available_at: When the prompt becomes visible
        response_window_close_at: Global cut-off for responses
        release_at: When submitted responses become visible to friends
    """

    available_at: datetime
    response_window_close_at: datetime
    release_at: datetime

    def __post_init__(self) -> None:
        if not self.available_at < self.response_window_close_at < self.release_at:
            raise ValueError(
                "PromptWindow requires available_at < response_window_close_at < release_at"
            )

    def is_available(self, now: datetime) -> bool:
        return to_instant(now) >= self.available_at

    def is_response_window_open(self, now: datetime) -> bool:
        return to_instant(now) < self.response_window_close_at

    def is_released(self, now: datetime) -> bool:
        return to_instant(now) >= self.release_at

    def time_until_close(self, now: datetime) -> timedelta | None:
        """Return time left before the global cut-off, or None once passed."""
        return _time_until(self.response_window_close_at, now)

    def time_until_release(self, now: datetime) -> timedelta | None:
        """Return time left before release, or None once released."""
        return _time_until(self.release_at, now)


def _at(prompt_date: date, wall: time) -> datetime:
    return civil_time_for_prompt_date(prompt_date, wall.hour, wall.minute, wall.second)


def get_prompt_window(prompt_date: str | date) -> PromptWindow:
    """Derive the prompt window for a ``YYYY-MM-DD`` prompt date.

    Raises:
        InvalidPromptDateError: If ``prompt_date`` is malformed
    """
    day = parse_prompt_date(prompt_date)
    return PromptWindow(
        available_at=_at(day, settings.prompt_available_time),
        response_window_close_at=_at(day, settings.response_close_time),
        release_at=_at(day, settings.post_release_time),
    )
