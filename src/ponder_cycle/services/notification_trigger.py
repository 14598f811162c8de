# src/ponder_cycle/services/notification_trigger.py
"""Scheduled trigger host: turn a tick into a notification dispatch plan.

The scheduler invokes the trigger at 6AM and 6PM civil time. The service
computes the phase for the current instant, decides which notification to
send and resolves the recipient tokens through the storage collaborators.
Delivery is left to the caller's push transport. Collaborator failures are
not caught here; a trigger that cannot read its inputs fails outright.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from ponder_cycle.core.civil_time import to_instant, utcnow
from ponder_cycle.core.notifications import (
    NotificationDecision,
    NotificationMessage,
    NotificationType,
    TriggerTick,
    decide_notification,
    parse_trigger_tick,
)
from ponder_cycle.core.phase import Phase, cycle_date_for, get_current_phase
from ponder_cycle.core.settings import settings
from ponder_cycle.services.collaborators import (
    Clock,
    PromptStore,
    PushTokenStore,
    ResponseStore,
)

logger = logging.getLogger(__name__)


class InvalidTriggerTickError(ValueError):
    """Raised when the scheduler passes a tick identifier we do not know."""


@dataclass(frozen=True)
class TriggerOutcome:
    """What a trigger invocation decided.

    Attributes:
        tick: Tick the trigger ran for
        phase: Phase active at the invocation instant
        cycle_date: Civil date of the active cycle
        notification_type: Notification to send, None when nothing is due
        message: Title and body for the notification
        batches: Push tokens grouped for the transport
        reason: Why nothing is sent, when nothing is
    """

    tick: TriggerTick
    phase: Phase
    cycle_date: date
    notification_type: NotificationType | None = None
    message: NotificationMessage | None = None
    batches: list[list[str]] = field(default_factory=list)
    reason: str | None = None

    @property
    def tokens_selected(self) -> int:
        return sum(len(batch) for batch in self.batches)


def chunk_tokens(tokens: list[str], size: int) -> list[list[str]]:
    """Split ``tokens`` into consecutive batches of at most ``size``."""
    if size <= 0:
        raise ValueError("batch size must be positive")
    return [tokens[i : i + size] for i in range(0, len(tokens), size)]


def evaluate_trigger(tick: str | TriggerTick, now: datetime) -> NotificationDecision:
    """Return the decision for ``tick`` at ``now`` without any storage reads.

    The posting reminder's recipient filter is left open; the caller narrows it
    with the set of users who already responded.
    """
    return decide_notification(tick, get_current_phase(now))


class NotificationTriggerService:
    """Runs one scheduled trigger tick end to end, short of delivery."""

    def __init__(
        self,
        prompts: PromptStore,
        responses: ResponseStore,
        push_tokens: PushTokenStore,
        clock: Clock | None = None,
        batch_size: int | None = None,
    ) -> None:
        self._prompts = prompts
        self._responses = responses
        self._push_tokens = push_tokens
        self._clock = clock or utcnow
        self._batch_size = batch_size or settings.push_batch_size

    async def run(self, tick_identifier: str | TriggerTick) -> TriggerOutcome:
        """Decide and resolve recipients for one tick.

        Args:
            tick_identifier: ``"6am"`` or ``"6pm"``

        Returns:
            TriggerOutcome describing what to send and to whom

        Raises:
            InvalidTriggerTickError: If the identifier is not a known tick
        """
        tick = parse_trigger_tick(tick_identifier)
        if tick is None:
            raise InvalidTriggerTickError(
                f"Invalid trigger_time {tick_identifier!r} (must be '6am' or '6pm')"
            )

        now = to_instant(self._clock())
        phase = get_current_phase(now)
        cycle_date = cycle_date_for(now)
        decision = decide_notification(tick, phase)

        if not decision.should_fire:
            logger.info("No notification needed for %s (current phase: %s)", tick.value, phase.value)
            return TriggerOutcome(
                tick=tick, phase=phase, cycle_date=cycle_date, reason="not_due"
            )

        if decision.requires_response_set:
            prompt = await self._prompts.get_prompt_for_date(cycle_date)
            if prompt is None:
                logger.info("No prompt found for date %s, skipping reminder", cycle_date)
                return TriggerOutcome(
                    tick=tick, phase=phase, cycle_date=cycle_date, reason="no_prompt"
                )
            responded = await self._responses.responded_user_ids(prompt.id)
            decision = decide_notification(tick, phase, responded)

        tokens = [
            push_token.token
            for push_token in await self._push_tokens.list_tokens()
            if push_token.token and decision.recipient_filter(push_token.user_id)
        ]
        if not tokens:
            logger.info("No push tokens selected for %s", decision.notification_type.value)
            return TriggerOutcome(
                tick=tick,
                phase=phase,
                cycle_date=cycle_date,
                notification_type=decision.notification_type,
                message=decision.message,
                reason="no_recipients",
            )

        batches = chunk_tokens(tokens, self._batch_size)
        logger.info(
            "Trigger %s selected %d tokens in %d batches for %s",
            tick.value,
            len(tokens),
            len(batches),
            decision.notification_type.value,
        )
        return TriggerOutcome(
            tick=tick,
            phase=phase,
            cycle_date=cycle_date,
            notification_type=decision.notification_type,
            message=decision.message,
            batches=batches,
        )
