from __future__ import annotations

import pytest

from ringlog import Entry, RingBuffer


def _entry(n: int) -> Entry:
    return Entry(flush_id=0, event="info", data={"n": n})


def _fill(buf: RingBuffer, count: int) -> None:
    for n in range(count):
        buf.write(_entry(n))
        buf.advance()


def test_rejects_negative_capacity() -> None:
    with pytest.raises(ValueError):
        RingBuffer(-1)


@pytest.mark.parametrize("capacity", [1, 3, 5])
@pytest.mark.parametrize("writes", [0, 1, 4, 5, 12])
def test_snapshot_length_is_min_of_writes_and_capacity(capacity: int, writes: int) -> None:
    buf = RingBuffer(capacity)
    _fill(buf, writes)

    assert len(buf.snapshot()) == min(writes, capacity)
    assert len(buf) == min(writes, capacity)


def test_snapshot_is_oldest_first_after_wraparound() -> None:
    buf = RingBuffer(3)
    _fill(buf, 10)

    assert buf.cursor == 1
    assert [e.data["n"] for e in buf.snapshot()] == [7, 8, 9]


def test_snapshot_before_full_starts_at_oldest() -> None:
    buf = RingBuffer(4)
    _fill(buf, 2)

    assert [e.data["n"] for e in buf.snapshot()] == [0, 1]


def test_clear_keeps_cursor() -> None:
    buf = RingBuffer(4)
    _fill(buf, 3)

    buf.clear()
    assert buf.snapshot() == []
    assert buf.cursor == 3

    _fill(buf, 2)
    assert buf.cursor == 1
    assert [e.data["n"] for e in buf.snapshot()] == [0, 1]


def test_zero_capacity_is_inert() -> None:
    buf = RingBuffer(0)
    _fill(buf, 5)

    assert buf.capacity == 0
    assert buf.cursor == 0
    assert buf.snapshot() == []
    buf.clear()
    assert len(buf) == 0
