# src/ponder_cycle/services/cycle_ticker.py
"""Interactive client host: recompute the cycle state on a fixed interval.

This module provides the CycleTicker class that drives a countdown display.
Every tick is independent: it reads the clock, recomputes phase, prompt window
and response deadline, and hands a CycleSnapshot to the caller's callback.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime

from ponder_cycle.core.civil_time import to_instant, utcnow
from ponder_cycle.core.deadline import (
    PromptOverride,
    ResponseDeadlineTracker,
    ResponseWindowStatus,
)
from ponder_cycle.core.phase import CyclePhaseInfo, Phase, get_phase_info
from ponder_cycle.core.prompt_window import PromptWindow, get_prompt_window
from ponder_cycle.core.settings import settings
from ponder_cycle.services.collaborators import Clock, DailyPrompt, OpenedAtProvider

# Configure logger for this module
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleSnapshot:
    """Everything the client renders for one tick."""

    now: datetime
    phase: CyclePhaseInfo
    prompt: DailyPrompt | None = None
    window: PromptWindow | None = None
    response: ResponseWindowStatus | None = None

    @property
    def prompt_available(self) -> bool:
        return self.window is not None


SnapshotCallback = Callable[[CycleSnapshot], Awaitable[None] | None]


class CycleTicker:
    """Periodically recomputes the cycle state and publishes a snapshot.

    The ticker owns exactly one asyncio task between ``start()`` and
    ``stop()``. The opened-at read runs as its own task: while it is pending,
    or after it failed, a tick reports the deadline as unknown. A slow read is
    never cancelled by the tick cadence, and ``stop()`` cancels it.
    """

    def __init__(
        self,
        on_snapshot: SnapshotCallback,
        prompt: DailyPrompt | None = None,
        opened_at_provider: OpenedAtProvider | None = None,
        *,
        clock: Clock | None = None,
        interval: float | None = None,
        phase_override: Phase | None = None,
        prompt_override: PromptOverride | None = None,
        tracker: ResponseDeadlineTracker | None = None,
    ) -> None:
        """Initialize the ticker.

        Args:
            on_snapshot: Called (or awaited) with every snapshot
            prompt: Active prompt, None when there is none for this cycle
            opened_at_provider: Reads the signed-in user's opened-at mark;
                None when no user is signed in
            clock: Source of the current instant; defaults to the system clock
            interval: Seconds between ticks; defaults to settings
            phase_override: Forces the reported phase for manual testing
            prompt_override: Forces the response window open or closed
            tracker: Deadline tracker; defaults to the configured grace period
        """
        self._on_snapshot = on_snapshot
        self._prompt = prompt
        self._window = get_prompt_window(prompt.prompt_date) if prompt else None
        self._opened_at_provider = opened_at_provider
        self._opened_at: datetime | None = None
        self._pending_read: asyncio.Future[datetime | None] | None = None
        self._clock = clock or utcnow
        self._interval = interval
        self.phase_override = phase_override
        self.prompt_override = prompt_override
        self._tracker = tracker or ResponseDeadlineTracker()
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def interval(self) -> float:
        return max(0.01, float(self._interval or settings.client_tick_seconds))

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def set_prompt(self, prompt: DailyPrompt | None) -> None:
        """Swap the active prompt, e.g. after a refetch at the cycle flip."""
        self._prompt = prompt
        self._window = get_prompt_window(prompt.prompt_date) if prompt else None
        self._opened_at = None
        self._cancel_pending_read()

    async def start(self) -> None:
        """Start the background tick loop."""

        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background tick loop and wait for it to finish."""

        self._cancel_pending_read()
        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None

    async def tick_once(self) -> CycleSnapshot:
        """Compute and publish one snapshot."""
        snapshot = await self._compute()
        result = self._on_snapshot(snapshot)
        if inspect.isawaitable(result):
            await result
        return snapshot

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                await self.tick_once()
            except Exception:
                logger.exception("CycleTicker failed to publish a snapshot")

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval)
            except TimeoutError:
                continue

    def _cancel_pending_read(self) -> None:
        if self._pending_read is not None and not self._pending_read.done():
            self._pending_read.cancel()
        self._pending_read = None

    async def _read_opened_at(self) -> tuple[datetime | None, bool]:
        if self._opened_at is not None or self._opened_at_provider is None:
            return self._opened_at, True

        # One read in flight at a time; it outlives the tick that started it.
        task = self._pending_read
        if task is None:
            task = self._pending_read = asyncio.ensure_future(self._opened_at_provider())
            await asyncio.sleep(0)

        if not task.done():
            logger.debug("Opened-at read still pending; deadline unknown this tick")
            return None, False

        self._pending_read = None
        try:
            opened_at = task.result()
        except Exception as e:
            logger.warning("Opened-at read failed; deadline unknown this tick: %s", e)
            return None, False

        # The mark is written once per user and prompt, so it can be kept.
        if opened_at is not None:
            self._opened_at = to_instant(opened_at)
        return self._opened_at, True

    async def _compute(self) -> CycleSnapshot:
        now = to_instant(self._clock())
        phase = get_phase_info(now, override=self.phase_override)

        if self._prompt is None or self._window is None:
            return CycleSnapshot(now=now, phase=phase)

        opened_at, known = await self._read_opened_at()
        response = self._tracker.evaluate(
            self._window,
            opened_at,
            now,
            signed_in=self._opened_at_provider is not None,
            override=self.prompt_override,
            opened_at_known=known,
        )
        logger.debug(
            "Tick %s: phase=%s prompt=%s countdown=%s",
            now.isoformat(),
            phase.phase.value,
            self._prompt.id,
            response.countdown,
        )
        return CycleSnapshot(
            now=now,
            phase=phase,
            prompt=self._prompt,
            window=self._window,
            response=response,
        )
