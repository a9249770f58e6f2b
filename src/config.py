"""Configuration loading and validation.

This module is responsible for:

- Loading `.env` into the process environment (without overriding existing vars).
- Converting environment variables into strongly-typed Pydantic models.
- Validating fields and providing actionable error messages.
"""

import os
from pathlib import Path
from typing import TypeVar

import dotenv
from pydantic import BaseModel, Field, field_validator

_T = TypeVar("_T", int, float)


def _get_env_str(name: str, default: str) -> str:
    """Read a string env var with a default (blank counts as unset)."""
    value = os.getenv(name, "").strip()
    return value or default


def _get_env_number(name: str, default: _T, cast: type[_T]) -> _T:
    """Read an int/float env var with a default."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a {cast.__name__}. Got: {raw!r}") from exc


class RingLoggerConfig(BaseModel):
    """Configuration for a ring buffer logger instance."""

    capacity: int = Field(default=100, description="Number of buffered events")
    output_dir: Path = Field(default=Path("./logs"), description="Directory for flush artifacts")
    error_event: str = Field(default="error", description="Event name that triggers error-context flushes")

    @field_validator("capacity")
    def validate_capacity(cls, v: int) -> int:
        """Capacity 0 is allowed (nothing is retained); negatives are not."""
        if v < 0:
            raise ValueError(f"RING_LOGGER_CAPACITY must be >= 0. Got: {v}")
        return v

    @field_validator("error_event")
    def validate_error_event(cls, v: str) -> str:
        """Validate the error marker is a non-empty event name."""
        if not v.strip():
            raise ValueError("RING_LOGGER_ERROR_EVENT must not be empty.")
        return v


class Config(BaseModel):
    """Top-level application configuration."""

    ring_logger: RingLoggerConfig = Field(default_factory=RingLoggerConfig, description="Ring logger configuration")


def load_config() -> Config:
    """Load application configuration from environment variables.

    Notes:
    - Calls `dotenv.load_dotenv()` so local `.env` values are visible to the process.
    - Every setting has a default; malformed values raise `ValueError`.
    """
    # Load variables from `.env` into the process environment (without overriding
    # already-set env vars).
    dotenv.load_dotenv()

    ring_logger = RingLoggerConfig(
        capacity=_get_env_number("RING_LOGGER_CAPACITY", 100, int),
        output_dir=Path(_get_env_str("RING_LOGGER_OUTPUT_DIR", "./logs")),
        error_event=_get_env_str("RING_LOGGER_ERROR_EVENT", "error"),
    )
    return Config(ring_logger=ring_logger)
