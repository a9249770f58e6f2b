"""Artifact sinks (storage backends for flushed snapshots)."""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import duckdb

from .models import FlushArtifact

logger = logging.getLogger(__name__)


def encode_artifact(artifact: FlushArtifact, *, indent: int | None = 2) -> str:
    """Serialize an artifact to JSON text.

    Payloads are sanitized before they reach the buffer; `allow_nan=False` makes
    any non-finite float that slipped through fail loudly instead of emitting
    invalid JSON.
    """
    return json.dumps(artifact.to_wire(), indent=indent, allow_nan=False)


class ArtifactSink(Protocol):
    """A synchronous sink for flush artifacts.

    Sinks are synchronous because a flush must have landed before `log()`
    returns. `write` may raise; the logger absorbs and reports failures.
    """

    def write(self, artifact: FlushArtifact) -> str:
        """Persist a single artifact and return where it was written."""

    def close(self) -> None:
        """Close any underlying resources."""


class DirectoryArtifactSink:
    """Writes one JSON file per artifact into a directory, synced to disk."""

    def __init__(self, directory: str | Path) -> None:
        """Create a sink rooted at `directory` (creation is left to `ensure_directory`)."""
        self.directory = Path(directory)

    def ensure_directory(self) -> bool:
        """Best-effort creation of the output directory; returns whether it exists."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Failed to create log directory %s: %s", self.directory, exc)
            return False
        return True

    def write(self, artifact: FlushArtifact) -> str:
        """Write the artifact as `<directory>/<artifact.name>` and fsync it."""
        path = self.directory / artifact.name
        body = encode_artifact(artifact)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(body)
            fh.flush()
            os.fsync(fh.fileno())
        return str(path)

    def close(self) -> None:  # noqa: D401 - keep interface consistent
        """No-op."""


class InMemoryArtifactSink:
    """In-memory sink for tests and local debugging."""

    def __init__(self) -> None:
        """Create an empty in-memory sink."""
        self._lock = threading.Lock()
        self._artifacts: list[FlushArtifact] = []

    def write(self, artifact: FlushArtifact) -> str:
        """Append an artifact to the in-memory list (thread-safe)."""
        with self._lock:
            self._artifacts.append(artifact)
        return artifact.name

    def close(self) -> None:  # noqa: D401 - keep interface consistent
        """No-op."""

    def snapshot(self) -> Sequence[FlushArtifact]:
        """Return a point-in-time copy of all written artifacts."""
        with self._lock:
            return list(self._artifacts)


@dataclass(frozen=True)
class DuckDBOptions:
    path: Path
    table: str = "flush_artifacts"


class DuckDBArtifactSink:
    """DuckDB sink for durable local persistence.

    One row per artifact, keyed by the artifact name so a `(reason, flush_id)`
    pair is never stored twice.
    """

    def __init__(self, *, path: str | Path, table: str = "flush_artifacts") -> None:
        """Create (or open) a DuckDB-backed sink at the given path."""
        self._opts = DuckDBOptions(path=Path(path), table=table)
        self._lock = threading.Lock()
        self._conn = duckdb.connect(str(self._opts.path))
        self._ensure_schema()

    def _ensure_schema(self) -> None:
        """Create the backing table if it does not exist yet."""
        create_sql = f"""
        create table if not exists {self._opts.table} (
          name varchar primary key,
          reason varchar not null,
          flush_id bigint not null,
          flushed_at varchar not null,
          event_count integer not null,
          artifact_json varchar not null
        )
        """
        with self._lock:
            self._conn.execute(create_sql)

    def write(self, artifact: FlushArtifact) -> str:
        """Insert a single artifact row."""
        insert_sql = f"""
        insert into {self._opts.table}
        (name, reason, flush_id, flushed_at, event_count, artifact_json)
        values (?, ?, ?, ?, ?, ?)
        """
        with self._lock:
            self._conn.execute(
                insert_sql,
                [
                    artifact.name,
                    artifact.reason,
                    artifact.flush_id,
                    artifact.flushed_at,
                    len(artifact.events),
                    encode_artifact(artifact, indent=None),
                ],
            )
        return f"{self._opts.path}:{self._opts.table}/{artifact.name}"

    def fetch(self, name: str) -> dict | None:
        """Load a stored artifact body by name, or `None` when absent."""
        with self._lock:
            row = self._conn.execute(
                f"select artifact_json from {self._opts.table} where name = ?", [name]
            ).fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    def close(self) -> None:
        """Close the underlying DuckDB connection."""
        with self._lock:
            self._conn.close()
