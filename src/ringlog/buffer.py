"""Fixed-capacity circular store with an overwrite-oldest write cursor."""

from __future__ import annotations

from .models import Entry


class RingBuffer:
    """Overwrite-oldest ring buffer of entries.

    `cursor` is the next write position. Once the buffer is full it also points
    at the oldest entry, so walking forward from it yields chronological order.
    A capacity of 0 is valid: nothing is ever retained.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0. Got: {capacity}")
        self._capacity = int(capacity)
        self._slots: list[Entry | None] = [None] * self._capacity
        self._cursor = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return sum(1 for slot in self._slots if slot is not None)

    def write(self, entry: Entry) -> None:
        """Store `entry` at the cursor, replacing whatever was there."""
        if self._capacity == 0:
            return
        self._slots[self._cursor] = entry

    def advance(self) -> None:
        """Move the cursor one slot forward, wrapping at capacity."""
        if self._capacity == 0:
            return
        self._cursor = (self._cursor + 1) % self._capacity

    def snapshot(self) -> list[Entry]:
        """Return occupied slots oldest-first, starting at the cursor."""
        out: list[Entry] = []
        for i in range(self._capacity):
            entry = self._slots[(self._cursor + i) % self._capacity]
            if entry is not None:
                out.append(entry)
        return out

    def clear(self) -> None:
        """Empty every slot. The cursor is left where it is."""
        for i in range(self._capacity):
            self._slots[i] = None
