# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import UTC, datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from ponder_cycle.api.v1.endpoints.cycle import get_clock
from ponder_cycle.core.civil_time import CivilDateTime, civil_to_absolute
from ponder_cycle.core.settings import Settings
from ponder_cycle.main import app as fastapi_app

# 2026-01-12 06:00 Pacific (PST, UTC-8): the anchor flip, first posting day.
ANCHOR_INSTANT = datetime(2026, 1, 12, 14, 0, tzinfo=UTC)

_TEST_SETTINGS_INSTANCE = Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide a Settings instance aligned with runtime configuration."""
    return _TEST_SETTINGS_INSTANCE


@pytest.fixture()
def pacific() -> Callable[..., datetime]:
    """Build the instant for a Pacific wall-clock reading."""

    def _pacific(
        year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0
    ) -> datetime:
        return civil_to_absolute(CivilDateTime(year, month, day, hour, minute, second))

    return _pacific


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def frozen_clock(app: FastAPI) -> Iterator[Callable[[datetime], None]]:
    """Pin the API's notion of "now" to a chosen instant."""
    current = {"now": ANCHOR_INSTANT}

    def _set(now: datetime) -> None:
        current["now"] = now

    app.dependency_overrides[get_clock] = lambda: (lambda: current["now"])
    try:
        yield _set
    finally:
        app.dependency_overrides.pop(get_clock, None)
