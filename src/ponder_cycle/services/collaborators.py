# src/ponder_cycle/services/collaborators.py
"""Interfaces of the storage services the cycle hosts read from.

Storage itself lives outside this package; hosts receive implementations of
these protocols and never reach for a database on their own.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol


@dataclass(frozen=True)
class DailyPrompt:
    """The parts of a stored prompt the cycle logic needs."""

    id: str
    prompt_date: str


@dataclass(frozen=True)
class PushToken:
    user_id: str
    token: str


class PromptStore(Protocol):
    async def get_prompt_for_date(self, prompt_date: date) -> DailyPrompt | None:
        """Return the prompt scheduled for ``prompt_date``, if any."""


class ResponseStore(Protocol):
    async def responded_user_ids(self, prompt_id: str) -> Iterable[str]:
        """Return ids of users who already responded to ``prompt_id``."""


class PushTokenStore(Protocol):
    async def list_tokens(self) -> Iterable[PushToken]:
        """Return every registered push token."""


# Reads a user's opened-at mark for the active prompt; None if not opened yet.
OpenedAtProvider = Callable[[], Awaitable[datetime | None]]
Clock = Callable[[], datetime]
