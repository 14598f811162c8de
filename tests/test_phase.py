# tests/test_phase.py
"""Tests for posting/viewing phase calculation."""

from datetime import UTC, date, datetime, timedelta

import pytest

from ponder_cycle.core.civil_time import CivilDateTime
from ponder_cycle.core.phase import (
    Phase,
    cycle_date_for,
    days_since_anchor,
    get_current_phase,
    get_phase_info,
    get_time_until_next_phase,
    last_flip_boundary,
    next_flip_boundary,
)

ANCHOR = CivilDateTime(2026, 1, 12, 6, 0)


class TestFlipExactness:
    @pytest.mark.parametrize(
        "now",
        [
            datetime(2026, 1, 12, 14, 0, tzinfo=UTC),
            datetime(2026, 1, 12, 20, 0, tzinfo=UTC),
            datetime(2026, 1, 13, 13, 59, 59, 999000, tzinfo=UTC),
        ],
    )
    def test_anchor_day_is_posting(self, now):
        assert get_current_phase(now, ANCHOR) is Phase.POSTING

    @pytest.mark.parametrize(
        "now",
        [
            datetime(2026, 1, 13, 14, 0, tzinfo=UTC),
            datetime(2026, 1, 14, 8, 0, tzinfo=UTC),
            datetime(2026, 1, 14, 13, 59, 59, 999000, tzinfo=UTC),
        ],
    )
    def test_next_day_is_viewing(self, now):
        assert get_current_phase(now, ANCHOR) is Phase.VIEWING

    @pytest.mark.parametrize(
        "now",
        [
            datetime(2026, 1, 14, 14, 0, tzinfo=UTC),
            datetime(2026, 1, 15, 13, 59, 59, tzinfo=UTC),
        ],
    )
    def test_third_day_is_posting_again(self, now):
        assert get_current_phase(now, ANCHOR) is Phase.POSTING

    def test_before_flip_belongs_to_previous_day(self, pacific):
        # 05:59 on the anchor date still belongs to the cycle of Jan 11.
        assert get_current_phase(pacific(2026, 1, 12, 5, 59), ANCHOR) is Phase.VIEWING

    def test_defaults_to_configured_anchor(self, pacific):
        assert get_current_phase(pacific(2026, 1, 12, 6, 0, 1)) is Phase.POSTING
        assert get_current_phase(pacific(2026, 1, 13, 6, 0, 1)) is Phase.VIEWING


class TestDaylightSaving:
    def test_parity_survives_spring_forward(self, pacific):
        # 2026-03-08 is day 55 (viewing); 2026-03-09 is day 56 (posting) even though
        # only 56 days minus one hour have elapsed since the anchor flip.
        assert get_current_phase(pacific(2026, 3, 8, 12, 0), ANCHOR) is Phase.VIEWING
        assert get_current_phase(pacific(2026, 3, 9, 6, 0, 1), ANCHOR) is Phase.POSTING
        assert days_since_anchor(pacific(2026, 3, 9, 6, 0, 1), ANCHOR) == 56

    def test_parity_survives_fall_back(self, pacific):
        assert days_since_anchor(pacific(2026, 11, 1, 6, 0), ANCHOR) == 293
        assert get_current_phase(pacific(2026, 11, 1, 6, 0), ANCHOR) is Phase.VIEWING
        assert get_current_phase(pacific(2026, 11, 2, 6, 0), ANCHOR) is Phase.POSTING

    def test_flip_stays_at_six_on_spring_forward_day(self, pacific):
        assert last_flip_boundary(pacific(2026, 3, 8, 7, 0)) == datetime(
            2026, 3, 8, 13, 0, tzinfo=UTC
        )

    def test_short_day_phase_lasts_23_hours(self):
        now = datetime(2026, 3, 8, 3, 0, tzinfo=UTC)  # 2026-03-07 19:00 PST
        info = get_phase_info(now, ANCHOR)
        assert info.phase_started_at == datetime(2026, 3, 7, 14, 0, tzinfo=UTC)
        assert info.phase_ends_at == datetime(2026, 3, 8, 13, 0, tzinfo=UTC)
        assert info.phase_ends_at - info.phase_started_at == timedelta(hours=23)
        assert info.time_remaining == timedelta(hours=10)


class TestBoundaries:
    def test_last_and_next_flip(self, pacific):
        now = pacific(2026, 1, 12, 18, 0)
        assert last_flip_boundary(now) == datetime(2026, 1, 12, 14, 0, tzinfo=UTC)
        assert next_flip_boundary(now) == datetime(2026, 1, 13, 14, 0, tzinfo=UTC)

    def test_exactly_at_flip(self):
        now = datetime(2026, 1, 12, 14, 0, tzinfo=UTC)
        assert last_flip_boundary(now) == now
        assert next_flip_boundary(now) == datetime(2026, 1, 13, 14, 0, tzinfo=UTC)

    def test_cycle_date_before_flip_is_yesterday(self, pacific):
        assert cycle_date_for(pacific(2026, 1, 13, 5, 0)) == date(2026, 1, 12)
        assert cycle_date_for(pacific(2026, 1, 13, 6, 0)) == date(2026, 1, 13)

    def test_time_until_next_phase(self, pacific):
        assert get_time_until_next_phase(pacific(2026, 1, 12, 5, 0)) == timedelta(hours=1)
        assert get_time_until_next_phase(pacific(2026, 1, 12, 6, 0)) == timedelta(hours=24)


class TestPhaseInfo:
    def test_combines_phase_and_boundaries(self):
        now = datetime(2026, 1, 12, 14, 0, 1, tzinfo=UTC)
        info = get_phase_info(now, ANCHOR)
        assert info.phase is Phase.POSTING
        assert info.phase_started_at == datetime(2026, 1, 12, 14, 0, tzinfo=UTC)
        assert info.phase_ends_at == datetime(2026, 1, 13, 14, 0, tzinfo=UTC)
        assert info.time_remaining == timedelta(hours=24) - timedelta(seconds=1)
        assert info.is_overridden is False

    def test_override_replaces_phase_only(self):
        now = datetime(2026, 1, 12, 14, 0, 1, tzinfo=UTC)
        computed = get_phase_info(now, ANCHOR)
        forced = get_phase_info(now, ANCHOR, override=Phase.VIEWING)
        assert forced.phase is Phase.VIEWING
        assert forced.is_overridden is True
        assert forced.phase_started_at == computed.phase_started_at
        assert forced.time_remaining == computed.time_remaining

    def test_pure_function_of_inputs(self):
        now = datetime(2026, 2, 1, 0, 0, tzinfo=UTC)
        assert get_phase_info(now, ANCHOR) == get_phase_info(now, ANCHOR)

    def test_anchor_off_the_flip_hour_is_rejected(self):
        now = datetime(2026, 1, 12, 14, 0, 1, tzinfo=UTC)
        with pytest.raises(ValueError):
            get_phase_info(now, CivilDateTime(2026, 1, 12, 9, 0))
        with pytest.raises(ValueError):
            get_current_phase(now, CivilDateTime(2026, 1, 12, 6, 30))
