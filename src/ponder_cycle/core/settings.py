"""Application settings and configuration.

This module defines all configuration options for the Ponder cycle service.
Settings are loaded from environment variables with sensible defaults. Every
host (the interactive client ticker and the scheduled notification trigger)
reads its zone, anchor and window constants from here so both compute the same
answers for the same instant.
"""

from datetime import date, time
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from ponder_cycle.core.civil_time import CivilDateTime


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Ponder Cycle", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")

    # Civil zone and phase anchor
    cycle_timezone: str = Field(default="America/Los_Angeles", alias="CYCLE_TIMEZONE")
    phase_flip_hour: int = Field(default=6, alias="PHASE_FLIP_HOUR")
    phase_anchor_date: date = Field(default=date(2026, 1, 12), alias="PHASE_ANCHOR_DATE")

    # Daily prompt windows (civil wall times on the prompt date)
    prompt_available_time: time = Field(default=time(6, 0), alias="PROMPT_AVAILABLE_TIME")
    response_close_time: time = Field(default=time(12, 0), alias="RESPONSE_CLOSE_TIME")
    post_release_time: time = Field(default=time(12, 30), alias="POST_RELEASE_TIME")
    response_grace_minutes: int = Field(default=30, alias="RESPONSE_GRACE_MINUTES")

    # Scheduled notification trigger
    push_batch_size: int = Field(default=100, alias="PUSH_BATCH_SIZE")

    # Interactive client refresh cadence
    client_tick_seconds: float = Field(default=1.0, alias="CLIENT_TICK_SECONDS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("cycle_timezone")
    @classmethod
    def _known_zone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone: {value!r}") from exc
        return value

    @field_validator("phase_flip_hour")
    @classmethod
    def _valid_hour(cls, value: int) -> int:
        if not 0 <= value <= 23:
            raise ValueError("hour must be within 0-23")
        return value

    @field_validator("response_grace_minutes", "push_batch_size")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be positive")
        return value

    @model_validator(mode="after")
    def _ordered_windows(self) -> "Settings":
        if not (
            self.prompt_available_time < self.response_close_time < self.post_release_time
        ):
            raise ValueError(
                "prompt windows must satisfy available < response close < release"
            )
        return self

    @property
    def anchor(self) -> "CivilDateTime":
        """Return the civil instant that seeds phase parity (first posting flip).

        Returns:
            The anchor date at the configured flip hour
        """
        from ponder_cycle.core.civil_time import CivilDateTime

        return CivilDateTime.at(self.phase_anchor_date, self.phase_flip_hour)


settings = Settings()  # type: ignore[call-arg]
