# src/ponder_cycle/core/notifications.py
"""Decide which push notification a scheduled trigger tick should fire.

The scheduler calls in at two fixed ticks per day:

- ``6am`` (the phase flip): announce whichever phase just opened
- ``6pm`` (mid-phase reminder): on posting days, nudge users who have not
  responded to the active prompt; nothing on viewing days

Any other tick is a no-op. Decisions are pure, so calling twice for the same
tick gives the same answer.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Final

from ponder_cycle.core.phase import Phase


class TriggerTick(str, Enum):
    """Named daily ticks the scheduler invokes the trigger with.

    The values are fixed identifiers, not clock readings. The scheduler fires
    ``PHASE_FLIP`` at the configured flip hour and ``REMINDER`` mid-phase; the
    decision depends only on which tick it is and the phase at that moment.
    """

    PHASE_FLIP = "6am"
    REMINDER = "6pm"


class NotificationType(str, Enum):
    POSTING_OPEN = "posting_open"
    POSTING_REMINDER = "posting_reminder"
    VIEWING_OPEN = "viewing_open"


@dataclass(frozen=True)
class NotificationMessage:
    title: str
    body: str


NOTIFICATION_MESSAGES: Final[dict[NotificationType, NotificationMessage]] = {
    NotificationType.POSTING_OPEN: NotificationMessage(
        title="New PONDER",
        body="Today's reflection question is ready. Take a moment to share your thoughts.",
    ),
    NotificationType.POSTING_REMINDER: NotificationMessage(
        title="Don't forget to PONDER",
        body="The posting window closes soon. Share your reflection before time runs out.",
    ),
    NotificationType.VIEWING_OPEN: NotificationMessage(
        title="Reflections are ready",
        body="See what your friends shared. The viewing period is now open.",
    ),
}


def parse_trigger_tick(value: str | TriggerTick | None) -> TriggerTick | None:
    """Return the tick named by ``value``, or None for anything unrecognized."""
    if isinstance(value, TriggerTick):
        return value
    try:
        return TriggerTick(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class RecipientFilter:
    """Predicate over user ids selecting who receives a notification."""

    excluded_user_ids: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def everyone(cls) -> RecipientFilter:
        return cls()

    @classmethod
    def excluding(cls, user_ids: Iterable[str]) -> RecipientFilter:
        return cls(frozenset(user_ids))

    def __call__(self, user_id: str) -> bool:
        return user_id not in self.excluded_user_ids

    def apply(self, user_ids: Iterable[str]) -> Iterator[str]:
        """Yield the ids that pass the filter, in input order."""
        return (user_id for user_id in user_ids if self(user_id))


@dataclass(frozen=True)
class NotificationDecision:
    """Outcome of one trigger tick.

    Attributes:
        notification_type: What to send, or None to send nothing
        recipient_filter: Which users to send it to
        requires_response_set: True when the filter depends on who has
            already responded to the active prompt
    """

    notification_type: NotificationType | None
    recipient_filter: RecipientFilter = field(default_factory=RecipientFilter.everyone)
    requires_response_set: bool = False

    @property
    def should_fire(self) -> bool:
        return self.notification_type is not None

    @property
    def message(self) -> NotificationMessage | None:
        if self.notification_type is None:
            return None
        return NOTIFICATION_MESSAGES[self.notification_type]


NO_NOTIFICATION: Final = NotificationDecision(notification_type=None)


def decide_notification(
    tick: str | TriggerTick | None,
    phase: Phase,
    responded_user_ids: Iterable[str] | None = None,
) -> NotificationDecision:
    """Decide what the trigger should send for ``tick`` during ``phase``.

    Args:
        tick: Trigger tick identifier; unknown values decide nothing
        phase: Phase active at the tick
        responded_user_ids: Users who already responded to the active prompt;
            only consulted for the posting reminder

    Returns:
        The notification decision
    """
    parsed = parse_trigger_tick(tick)

    if parsed is TriggerTick.PHASE_FLIP:
        if phase == Phase.POSTING:
            return NotificationDecision(NotificationType.POSTING_OPEN)
        return NotificationDecision(NotificationType.VIEWING_OPEN)

    if parsed is TriggerTick.REMINDER and phase == Phase.POSTING:
        return NotificationDecision(
            NotificationType.POSTING_REMINDER,
            recipient_filter=RecipientFilter.excluding(responded_user_ids or ()),
            requires_response_set=True,
        )

    return NO_NOTIFICATION
