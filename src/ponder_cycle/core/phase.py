# src/ponder_cycle/core/phase.py
"""Posting/viewing phase calculation.

Phases alternate every civil day at the flip hour (6AM Pacific by default):

- Posting days: the anchor date and every second civil day after it
- Viewing days: the civil days in between

Parity is counted in civil days between the most recent flip and the anchor,
so the 23 and 25 hour days around DST changes still count as one day each.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

from ponder_cycle.core.civil_time import (
    CivilDateTime,
    absolute_to_civil,
    civil_to_absolute,
    to_instant,
)
from ponder_cycle.core.settings import settings


class Phase(str, Enum):
    """Which half of the two-day cycle is active."""

    POSTING = "posting"
    VIEWING = "viewing"


@dataclass(frozen=True)
class CyclePhaseInfo:
    """Snapshot of the phase at one instant. Derived, never stored."""

    phase: Phase
    phase_started_at: datetime
    phase_ends_at: datetime
    time_remaining: timedelta
    is_overridden: bool = False


def flip_instant(day: date) -> datetime:
    """Return the instant the phase flips on civil date ``day``."""
    return civil_to_absolute(CivilDateTime.at(day, settings.phase_flip_hour))


def last_flip_boundary(now: datetime) -> datetime:
    """Return the most recent flip instant at or before ``now``."""
    now = to_instant(now)
    today = absolute_to_civil(now).date()
    today_flip = flip_instant(today)
    if now < today_flip:
        return flip_instant(today - timedelta(days=1))
    return today_flip


def next_flip_boundary(now: datetime) -> datetime:
    """Return the first flip instant strictly after ``now``."""
    now = to_instant(now)
    today = absolute_to_civil(now).date()
    today_flip = flip_instant(today)
    if now >= today_flip:
        return flip_instant(today + timedelta(days=1))
    return today_flip


def cycle_date_for(now: datetime) -> date:
    """Return the civil date of the flip-to-flip cycle containing ``now``.

    Before the flip hour this is yesterday's date; it is the key under which
    the active prompt is stored.
    """
    return absolute_to_civil(last_flip_boundary(now)).date()


def days_since_anchor(now: datetime, anchor: CivilDateTime | None = None) -> int:
    """Return whole civil days between the last flip and the anchor flip.

    Negative for instants before the anchor. Only the anchor date counts, so
    the anchor must sit exactly on the flip hour; any other wall time raises
    ``ValueError``.
    """
    anchor = anchor or settings.anchor
    if (anchor.hour, anchor.minute, anchor.second) != (settings.phase_flip_hour, 0, 0):
        raise ValueError(
            f"anchor {anchor} is not on the flip hour {settings.phase_flip_hour:02d}:00"
        )
    return (cycle_date_for(now) - anchor.date()).days


def get_current_phase(now: datetime, anchor: CivilDateTime | None = None) -> Phase:
    """Return the phase active at ``now``.

    Args:
        now: Instant to evaluate
        anchor: Civil instant of the first posting flip; defaults to settings

    Returns:
        ``Phase.POSTING`` on even days from the anchor, ``Phase.VIEWING`` on odd
    """
    return Phase.POSTING if days_since_anchor(now, anchor) % 2 == 0 else Phase.VIEWING


def get_time_until_next_phase(now: datetime) -> timedelta:
    """Return the time left until the next flip, never negative."""
    remaining = next_flip_boundary(now) - to_instant(now)
    return max(timedelta(0), remaining)


def get_phase_info(
    now: datetime,
    anchor: CivilDateTime | None = None,
    override: Phase | None = None,
) -> CyclePhaseInfo:
    """Get complete phase information including countdown and boundaries.

    ``phase_ends_at`` is the next civil flip, not ``phase_started_at`` plus a
    fixed 24 hours: the phase spanning a DST change lasts 23 or 25 hours, and
    every phase still ends at the flip hour on the wall clock.

    Args:
        now: Instant to evaluate
        anchor: Civil instant of the first posting flip, on the flip hour;
            defaults to settings
        override: Forces the reported phase (manual testing); boundaries and
            countdown are still computed from ``now``

    Returns:
        CyclePhaseInfo for ``now``
    """
    started_at = last_flip_boundary(now)
    ends_at = flip_instant(absolute_to_civil(started_at).date() + timedelta(days=1))
    computed = get_current_phase(now, anchor)

    return CyclePhaseInfo(
        phase=override or computed,
        phase_started_at=started_at,
        phase_ends_at=ends_at,
        time_remaining=get_time_until_next_phase(now),
        is_overridden=override is not None,
    )
