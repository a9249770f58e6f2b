from pathlib import Path

import pytest

from config import RingLoggerConfig, load_config


def test_ring_logger_config_defaults():
    cfg = RingLoggerConfig()

    assert cfg.capacity == 100
    assert cfg.output_dir == Path("./logs")
    assert cfg.error_event == "error"


@pytest.mark.parametrize("capacity", [-1, -100])
def test_ring_logger_config_rejects_negative_capacity(capacity: int):
    with pytest.raises(ValueError):
        RingLoggerConfig(capacity=capacity)


def test_ring_logger_config_allows_zero_capacity():
    assert RingLoggerConfig(capacity=0).capacity == 0


@pytest.mark.parametrize("error_event", ["", "   "])
def test_ring_logger_config_error_event_required(error_event: str):
    with pytest.raises(ValueError):
        RingLoggerConfig(error_event=error_event)


def test_load_config_reads_defaults(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr("config.dotenv.load_dotenv", lambda *a, **kw: False)
    monkeypatch.delenv("RING_LOGGER_CAPACITY", raising=False)
    monkeypatch.delenv("RING_LOGGER_OUTPUT_DIR", raising=False)
    monkeypatch.delenv("RING_LOGGER_ERROR_EVENT", raising=False)

    cfg = load_config().ring_logger
    assert cfg.capacity == 100
    assert cfg.output_dir == Path("./logs")
    assert cfg.error_event == "error"


def test_load_config_parses_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setattr("config.dotenv.load_dotenv", lambda *a, **kw: False)
    monkeypatch.setenv("RING_LOGGER_CAPACITY", "16")
    monkeypatch.setenv("RING_LOGGER_OUTPUT_DIR", str(tmp_path / "out"))
    monkeypatch.setenv("RING_LOGGER_ERROR_EVENT", "fatal")

    cfg = load_config().ring_logger
    assert cfg.capacity == 16
    assert cfg.output_dir == tmp_path / "out"
    assert cfg.error_event == "fatal"


def test_load_config_rejects_malformed_capacity(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr("config.dotenv.load_dotenv", lambda *a, **kw: False)
    monkeypatch.setenv("RING_LOGGER_CAPACITY", "lots")

    with pytest.raises(ValueError, match="RING_LOGGER_CAPACITY must be a int"):
        load_config()
