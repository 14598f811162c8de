"""Tests for system and transparency endpoints."""

from fastapi import status
from fastapi.testclient import TestClient


def test_system_config(client: TestClient) -> None:
    """Test system configuration endpoint."""
    r = client.get("/api/v1/system/config")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["cycle"]["timezone"] == "America/Los_Angeles"
    assert data["cycle"]["anchor"] == "2026-01-12T06:00:00"
    assert data["prompt"]["grace_minutes"] == 30
    assert data["triggers"]["ticks"] == {"phase_flip": "6am", "reminder": "6pm"}
    assert "reminder_hour" not in data["triggers"]


def test_system_status(client: TestClient) -> None:
    """Test system status endpoint."""
    r = client.get("/api/v1/system/status")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["service"] == "ponder-cycle"
    assert data["status"] == "operational"
