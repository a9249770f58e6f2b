from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from ringlog import RingBufferLogger


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Per-test output directory (created by the logger, not by the fixture)."""
    return tmp_path / "logs"


@pytest.fixture
def make_logger(log_dir: Path) -> Callable[..., RingBufferLogger]:
    """Build loggers writing into the per-test output directory."""

    def _make(capacity: int = 5, **kwargs: Any) -> RingBufferLogger:
        kwargs.setdefault("output_dir", log_dir)
        return RingBufferLogger(capacity, **kwargs)

    return _make


@pytest.fixture
def read_artifacts(log_dir: Path) -> Callable[[], dict[str, dict[str, Any]]]:
    """Load every artifact in the output directory, keyed by file name."""

    def _read() -> dict[str, dict[str, Any]]:
        if not log_dir.exists():
            return {}
        return {p.name: json.loads(p.read_text(encoding="utf-8")) for p in sorted(log_dir.iterdir())}

    return _read
