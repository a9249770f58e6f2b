"""Ring buffer logger record models.

Models are designed to be:
- Immutable once built (entries are only replaced by overwriting their slot).
- Serializable as-is: payloads have already passed through the sanitizer.
- Stable on the wire: field aliases match the persisted artifact layout.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

SCHEMA_VERSION = "v1"

FlushReason = Literal["pre-error-context", "post-error-context"]


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(tz=timezone.utc)


def format_timestamp(ts: datetime | None = None) -> str:
    """Render a UTC timestamp with millisecond precision (e.g. `2024-01-02T03:04:05.678Z`)."""
    ts = ts or utc_now()
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class _Model(BaseModel):
    # Snake-case attributes in Python, camelCase keys on the wire.
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Entry(_Model):
    """One logged event as stored in a ring buffer slot."""

    ts: str = Field(default_factory=format_timestamp)
    flush_id: int = Field(alias="flushId")
    event: str | None = None

    # Already sanitized; see `ringlog.sanitizer.sanitize`.
    data: Any = Field(default_factory=dict)


class FlushArtifact(_Model):
    """A snapshot of the buffer persisted around an error occurrence."""

    schema_version: str = Field(default=SCHEMA_VERSION, alias="schema")
    reason: FlushReason
    flush_id: int = Field(alias="flushId")
    flushed_at: str = Field(default_factory=format_timestamp, alias="flushedAt")
    events: list[Entry] = Field(default_factory=list)

    @property
    def name(self) -> str:
        """Artifact name derived from `(reason, flush_id)`; unique per logger lifetime."""
        return f"log-{self.reason}-{self.flush_id}.json"

    def to_wire(self) -> dict[str, Any]:
        """Dump the artifact using the persisted key names."""
        return self.model_dump(by_alias=True)


class LoggerStats(_Model):
    """Point-in-time view of buffer + state machine bookkeeping."""

    capacity: int
    current_index: int = Field(alias="currentIndex")
    flush_epoch: int = Field(alias="flushEpoch")
    error_armed: bool = Field(alias="errorArmed")
    error_slot: int | None = Field(default=None, alias="errorSlot")
    flush_in_progress: bool = Field(alias="flushInProgress")


class DegradedStatus(_Model):
    """Flush failures and dropped flush requests observed so far."""

    flush_failures: int = 0
    skipped_flushes: int = 0
    first_failure_at: datetime | None = None
    last_failure_at: datetime | None = None
