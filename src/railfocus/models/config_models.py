"""Configuration models for RailFocus."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class TimerConfig(BaseModel):
    """Timer configuration."""

    default_minutes: int = Field(default=25, ge=1, le=600)
    tick_interval: float = Field(default=1.0, gt=0, description="Seconds between ticks")


class LedgerConfig(BaseModel):
    """Journey ledger configuration."""

    count_interrupted: bool = Field(
        default=False,
        description="Count interrupted journeys toward streaks and totals",
    )
    database: str | None = Field(
        default=None, description="SQLite path; defaults to the user data dir"
    )

    @field_validator("database")
    @classmethod
    def validate_database(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not v.strip():
            raise ValueError("database cannot be empty")
        return v.strip()


class AppConfig(BaseModel):
    """Main RailFocus configuration."""

    timer: TimerConfig = Field(default_factory=TimerConfig)
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
