# src/ponder_cycle/core/civil_time.py
"""Conversion between absolute instants and civil wall time in the cycle zone.

Instants are timezone-aware UTC ``datetime`` values truncated to millisecond
precision. Civil readings are plain field tuples (:class:`CivilDateTime`) that
are always interpreted in the single configured zone.

The civil-to-absolute direction uses an iterative offset correction: start
from a naive guess that reads the civil fields as UTC, read the guess back in
the zone, and shift by the observed difference. Two passes converge because the
offset used in the first correction can be wrong by at most one DST step.
Wall times that fall inside a DST gap or overlap are then resolved with an
explicit :class:`DstPolicy`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from enum import Enum
from functools import lru_cache
from typing import Final
from zoneinfo import ZoneInfo

from ponder_cycle.core.settings import settings

logger = logging.getLogger(__name__)

EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=UTC)
SECONDS_PER_DAY: Final[int] = 24 * 60 * 60
CORRECTION_PASSES: Final[int] = 2

_ISO_DATE_RE: Final = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


class CivilTimeError(Exception):
    """Base error for civil time conversion failures."""


class InvalidPromptDateError(CivilTimeError, ValueError):
    """Raised when a prompt date string is not a valid ``YYYY-MM-DD`` date."""


class AmbiguousTimeError(CivilTimeError):
    """Raised under ``DstPolicy.REJECT`` for a wall time that occurs twice."""


class NonexistentTimeError(CivilTimeError):
    """Raised under ``DstPolicy.REJECT`` for a wall time skipped by the clock."""


class DstPolicy(str, Enum):
    """How to resolve wall times inside a DST transition.

    ``EARLIER`` reads the wall time with the offset in force before the
    transition: an ambiguous time resolves to its first occurrence and a
    nonexistent time lands after the gap (02:30 on spring-forward day reads
    03:30). ``LATER`` uses the post-transition offset: the second occurrence,
    or before the gap (02:30 reads 01:30). ``REJECT`` raises.
    """

    EARLIER = "earlier"
    LATER = "later"
    REJECT = "reject"


@dataclass(frozen=True, order=True)
class CivilDateTime:
    """Wall-clock reading in the cycle zone."""

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0

    def __post_init__(self) -> None:
        # Delegates range checks (month 1-12, day within month, hour 0-23...).
        datetime(self.year, self.month, self.day, self.hour, self.minute, self.second)

    @classmethod
    def at(cls, day: date, hour: int = 0, minute: int = 0, second: int = 0) -> CivilDateTime:
        """Build a civil reading for ``day`` at the given time of day."""
        return cls(day.year, day.month, day.day, hour, minute, second)

    @classmethod
    def from_datetime(cls, value: datetime) -> CivilDateTime:
        """Take the wall-clock fields of ``value`` as-is, ignoring any tzinfo."""
        return cls(value.year, value.month, value.day, value.hour, value.minute, value.second)

    def date(self) -> date:
        return date(self.year, self.month, self.day)

    def with_date(self, day: date) -> CivilDateTime:
        return CivilDateTime.at(day, self.hour, self.minute, self.second)

    def to_naive(self) -> datetime:
        return datetime(self.year, self.month, self.day, self.hour, self.minute, self.second)

    def seconds_of_day(self) -> int:
        return (self.hour * 60 + self.minute) * 60 + self.second

    def date_key(self) -> str:
        """Return the ``YYYY-MM-DD`` key of the civil date."""
        return self.date().isoformat()

    def __str__(self) -> str:
        return self.to_naive().isoformat()


def get_zone(name: str | None = None) -> ZoneInfo:
    """Return the configured cycle zone, or the named one when given."""
    return _load_zone(name or settings.cycle_timezone)


@lru_cache(maxsize=8)
def _load_zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def _resolve_zone(zone: ZoneInfo | str | None) -> ZoneInfo:
    if isinstance(zone, ZoneInfo):
        return zone
    return get_zone(zone)


def to_instant(value: datetime) -> datetime:
    """Normalize an aware datetime to a UTC instant with millisecond precision.

    Args:
        value: Timezone-aware datetime in any zone

    Returns:
        The same instant expressed in UTC, truncated to whole milliseconds

    Raises:
        ValueError: If ``value`` is naive
    """
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("Instants must be timezone-aware datetimes")
    value = value.astimezone(UTC)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def instant_from_ms(epoch_ms: int) -> datetime:
    """Return the instant ``epoch_ms`` milliseconds after the Unix epoch."""
    return EPOCH + timedelta(milliseconds=epoch_ms)


def instant_to_ms(instant: datetime) -> int:
    """Return ``instant`` as whole milliseconds since the Unix epoch."""
    return (to_instant(instant) - EPOCH) // timedelta(milliseconds=1)


def utcnow() -> datetime:
    """Return the current instant."""
    return to_instant(datetime.now(UTC))


def absolute_to_civil(instant: datetime, zone: ZoneInfo | str | None = None) -> CivilDateTime:
    """Read ``instant`` on a wall clock in the cycle zone."""
    local = to_instant(instant).astimezone(_resolve_zone(zone))
    return CivilDateTime.from_datetime(local)


def _correct_offset(desired: CivilDateTime, tz: ZoneInfo) -> datetime:
    guess = desired.to_naive().replace(tzinfo=UTC)

    for _ in range(CORRECTION_PASSES):
        actual = absolute_to_civil(guess, tz)
        delta = timedelta(seconds=desired.seconds_of_day() - actual.seconds_of_day())

        # The offset shift can push the reading across midnight.
        if actual.date() != desired.date():
            guess += desired.date() - actual.date()

        guess += delta

    return guess


def civil_to_absolute(
    civil: CivilDateTime,
    zone: ZoneInfo | str | None = None,
    policy: DstPolicy | None = None,
) -> datetime:
    """Convert a wall-clock reading in the cycle zone to an absolute instant.

    Args:
        civil: Desired wall-clock reading
        zone: Optional zone override; defaults to the configured cycle zone
        policy: Resolution for DST gaps and overlaps (default ``EARLIER``)

    Returns:
        UTC instant whose civil reading equals ``civil`` (outside DST gaps)

    Raises:
        AmbiguousTimeError: Under ``REJECT`` when ``civil`` occurs twice
        NonexistentTimeError: Under ``REJECT`` when ``civil`` is skipped
    """
    tz = _resolve_zone(zone)
    policy = policy or DstPolicy.EARLIER
    result = _correct_offset(civil, tz)

    naive = civil.to_naive()
    earlier = naive.replace(tzinfo=tz, fold=0)
    later = naive.replace(tzinfo=tz, fold=1)
    if earlier.utcoffset() == later.utcoffset():
        return result

    earlier_utc = earlier.astimezone(UTC)
    later_utc = later.astimezone(UTC)
    nonexistent = absolute_to_civil(earlier_utc, tz) != civil

    if policy is DstPolicy.REJECT:
        if nonexistent:
            raise NonexistentTimeError(f"{civil} does not exist in {tz.key}")
        raise AmbiguousTimeError(f"{civil} occurs twice in {tz.key}")

    resolved = earlier_utc if policy is DstPolicy.EARLIER else later_utc
    logger.warning(
        "Resolved %s wall time %s in %s to %s using %s policy",
        "nonexistent" if nonexistent else "ambiguous",
        civil,
        tz.key,
        resolved.isoformat(),
        policy.value,
    )
    return resolved


def parse_prompt_date(value: str | date) -> date:
    """Parse a ``YYYY-MM-DD`` prompt date.

    ``date`` instances pass through unchanged. Anything else that is not a
    real calendar date in that exact form raises; no default is substituted.

    Raises:
        InvalidPromptDateError: If ``value`` is malformed or not a real date
    """
    if isinstance(value, datetime):
        raise InvalidPromptDateError(f"Expected a calendar date, got datetime {value!r}")
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidPromptDateError(f"Invalid ISO date: {value!r}")

    match = _ISO_DATE_RE.match(value)
    if not match:
        raise InvalidPromptDateError(f"Invalid ISO date: {value!r}")

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise InvalidPromptDateError(f"Invalid ISO date: {value!r}") from exc


def civil_time_for_prompt_date(
    prompt_date: str | date,
    hour: int,
    minute: int = 0,
    second: int = 0,
    zone: ZoneInfo | str | None = None,
) -> datetime:
    """Return the instant of the given wall time on a prompt's civil date."""
    day = parse_prompt_date(prompt_date)
    return civil_to_absolute(CivilDateTime.at(day, hour, minute, second), zone)


def today_civil_date(now: datetime, zone: ZoneInfo | str | None = None) -> date:
    """Return the civil calendar date that ``now`` falls on."""
    return absolute_to_civil(now, zone).date()


def today_date_key(now: datetime, zone: ZoneInfo | str | None = None) -> str:
    """Return the ``YYYY-MM-DD`` key of the civil date that ``now`` falls on."""
    return today_civil_date(now, zone).isoformat()
