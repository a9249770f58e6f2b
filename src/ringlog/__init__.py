"""Ring buffer logging with error-context snapshots.

This package keeps recent events in a fixed-size in-memory ring and only pays
for disk I/O around failures:
- Logging the error marker persists what led up to it ("pre-error-context").
- Once the ring has rotated back to that error's slot, what followed is
  persisted too ("post-error-context").
"""

from .buffer import RingBuffer
from .logger import POST_ERROR_CONTEXT, PRE_ERROR_CONTEXT, RingBufferLogger
from .models import DegradedStatus, Entry, FlushArtifact, LoggerStats
from .sanitizer import SERIALIZATION_FAILED, sanitize
from .sinks import ArtifactSink, DirectoryArtifactSink, DuckDBArtifactSink, InMemoryArtifactSink

__all__ = [
    "POST_ERROR_CONTEXT",
    "PRE_ERROR_CONTEXT",
    "SERIALIZATION_FAILED",
    "ArtifactSink",
    "DegradedStatus",
    "DirectoryArtifactSink",
    "DuckDBArtifactSink",
    "Entry",
    "FlushArtifact",
    "InMemoryArtifactSink",
    "LoggerStats",
    "RingBuffer",
    "RingBufferLogger",
    "sanitize",
]
