# tests/test_settings.py
"""Tests for cycle configuration."""

from datetime import date, time

import pytest
from pydantic import ValidationError

from ponder_cycle.core.civil_time import CivilDateTime
from ponder_cycle.core.settings import Settings


def test_defaults(test_settings):
    assert test_settings.cycle_timezone == "America/Los_Angeles"
    assert test_settings.phase_flip_hour == 6
    assert test_settings.anchor == CivilDateTime(2026, 1, 12, 6, 0)
    assert test_settings.response_grace_minutes == 30


def test_env_override(monkeypatch):
    monkeypatch.setenv("PHASE_ANCHOR_DATE", "2026-02-01")
    monkeypatch.setenv("RESPONSE_CLOSE_TIME", "11:00")
    configured = Settings()
    assert configured.phase_anchor_date == date(2026, 2, 1)
    assert configured.response_close_time == time(11, 0)


def test_unknown_zone_rejected():
    with pytest.raises(ValidationError):
        Settings(CYCLE_TIMEZONE="Mars/Olympus_Mons")


def test_flip_hour_range():
    with pytest.raises(ValidationError):
        Settings(PHASE_FLIP_HOUR=24)


def test_window_times_must_be_ordered():
    with pytest.raises(ValidationError):
        Settings(RESPONSE_CLOSE_TIME="13:00")


def test_reminder_hour_is_not_a_setting(monkeypatch):
    monkeypatch.setenv("REMINDER_HOUR", "17")
    configured = Settings()
    assert not hasattr(configured, "reminder_hour")
    assert "reminder_hour" not in Settings.model_fields


def test_no_self_reference_attribute(test_settings):
    assert not hasattr(test_settings, "settings")
