"""Ring buffer logger that persists context around error events.

Every `log()` call goes through the same sequence:

1. sanitize the payload,
2. write an `Entry` at the buffer cursor,
3. if the event is the error marker and the logger is idle, flush
   "pre-error-context" and arm on the slot just written,
4. advance the cursor,
5. if armed and the cursor is back on the armed slot, flush
   "post-error-context" and disarm.

Flushes are synchronous and single-flight; each one wipes the buffer. Nothing
raised inside this module escapes `log()`.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from config import RingLoggerConfig

from .buffer import RingBuffer
from .models import DegradedStatus, Entry, FlushArtifact, FlushReason, LoggerStats, utc_now
from .sanitizer import sanitize
from .sinks import ArtifactSink, DirectoryArtifactSink

logger = logging.getLogger(__name__)

PRE_ERROR_CONTEXT: FlushReason = "pre-error-context"
POST_ERROR_CONTEXT: FlushReason = "post-error-context"


class RingBufferLogger:
    """In-memory circular event log with error-bracketing flushes.

    State machine: Idle -> Armed when the error marker is logged while idle;
    Armed -> Idle once the cursor has rotated all the way back to the slot
    that held the triggering error. Error markers logged while armed are
    stored as ordinary entries.

    Not thread-safe: callers must serialize access to `log()`.
    """

    def __init__(
        self,
        capacity: int = 100,
        output_dir: str | Path = "./logs",
        *,
        error_event: str = "error",
        sink: ArtifactSink | None = None,
    ) -> None:
        """Create a logger.

        Args:
            capacity: Number of slots; 0 keeps nothing but still flushes.
            output_dir: Directory for JSON artifacts (ignored when `sink` is given).
            error_event: Event name that arms the error window.
            sink: Alternative artifact backend (e.g. in-memory or DuckDB).
        """
        self.output_dir = Path(output_dir)
        self.error_event = error_event
        self._buffer = RingBuffer(capacity)

        if sink is None:
            directory_sink = DirectoryArtifactSink(self.output_dir)
            # Best-effort: the logger stays usable in memory if this fails.
            directory_sink.ensure_directory()
            sink = directory_sink
        self._sink = sink

        self._flush_epoch = 0
        self._error_armed = False
        self._error_slot: int | None = None
        self._flush_in_progress = False

        # Degradation tracking: counts and time window.
        self._flush_failures = 0
        self._skipped_flushes = 0
        self._first_failure_at: datetime | None = None
        self._last_failure_at: datetime | None = None

    @classmethod
    def from_config(cls, config: RingLoggerConfig, *, sink: ArtifactSink | None = None) -> RingBufferLogger:
        """Create a logger from a validated `RingLoggerConfig`."""
        return cls(
            capacity=config.capacity,
            output_dir=config.output_dir,
            error_event=config.error_event,
            sink=sink,
        )

    def log(self, event: str | None, data: Any = None) -> None:
        """Record an event (fire-and-forget, never raises)."""
        try:
            self._log(event, data)
        except Exception:  # noqa: BLE001 - logging must not crash the host
            logger.exception("Unexpected failure while logging event %r", event)

    def _log(self, event: str | None, data: Any) -> None:
        if event is not None and not isinstance(event, str):
            event = str(event)

        entry = Entry(flush_id=self._flush_epoch, event=event, data=sanitize(data))
        written_slot = self._buffer.cursor
        self._buffer.write(entry)

        if event == self.error_event and not self._error_armed:
            self.flush(PRE_ERROR_CONTEXT)
            self._flush_epoch += 1
            self._error_slot = written_slot
            self._error_armed = True

        self._buffer.advance()

        if self._error_armed and self._buffer.cursor == self._error_slot:
            self.flush(POST_ERROR_CONTEXT)
            self._flush_epoch += 1
            self._error_slot = None
            self._error_armed = False

    def flush(self, reason: FlushReason) -> None:
        """Persist the current snapshot under `reason`, then wipe the buffer.

        Single-flight: a request arriving while a flush is running is dropped.
        Does not touch the flush epoch; the state machine owns it.
        """
        if self._flush_in_progress:
            self._skipped_flushes += 1
            logger.debug("Flush %s (%d) skipped: another flush is in progress", reason, self._flush_epoch)
            return
        self._flush_in_progress = True

        try:
            artifact = FlushArtifact(
                reason=reason,
                flush_id=self._flush_epoch,
                events=self._buffer.snapshot(),
            )
            location = self._sink.write(artifact)
            logger.info("Flushed %s (%d) -> %s", reason, self._flush_epoch, location)
        except Exception:  # noqa: BLE001 - a lost flush is acceptable, a crash is not
            now = utc_now()
            self._flush_failures += 1
            self._first_failure_at = self._first_failure_at or now
            self._last_failure_at = now
            logger.exception("Flush failed: %s (%d)", reason, self._flush_epoch)
        finally:
            self._flush_in_progress = False
            self._buffer.clear()

    def current_buffer(self) -> list[Entry]:
        """Return copies of the buffered entries, oldest first."""
        return [entry.model_copy(deep=True) for entry in self._buffer.snapshot()]

    def stats(self) -> LoggerStats:
        """Return buffer and state machine bookkeeping."""
        return LoggerStats(
            capacity=self._buffer.capacity,
            current_index=self._buffer.cursor,
            flush_epoch=self._flush_epoch,
            error_armed=self._error_armed,
            error_slot=self._error_slot,
            flush_in_progress=self._flush_in_progress,
        )

    def degraded_status(self) -> DegradedStatus:
        """Return a minimal degraded-status snapshot."""
        return DegradedStatus(
            flush_failures=self._flush_failures,
            skipped_flushes=self._skipped_flushes,
            first_failure_at=self._first_failure_at,
            last_failure_at=self._last_failure_at,
        )

    def close(self) -> None:
        """Close the artifact sink. Buffered entries are not flushed."""
        self._sink.close()
