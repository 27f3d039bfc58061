"""Fixed-capacity history of the most recent input lines."""

from __future__ import annotations


class LineHistory:
    """Ring buffer of raw lines, logical index 0 is always the oldest retained line.

    Slots are overwritten in place once the buffer is full, so ``push`` is O(1)
    and never shifts existing entries.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._slots: list[bytes] = [b""] * capacity
        self._head = 0
        self._count = 0

    def __len__(self) -> int:
        return self._count

    @property
    def count(self) -> int:
        return self._count

    @property
    def is_full(self) -> bool:
        return self._count == self.capacity

    def push(self, line: bytes | bytearray | memoryview) -> None:
        """Store a copy of *line*, evicting the oldest entry when full."""
        if not self.is_full:
            slot = (self._head + self._count) % self.capacity
            self._count += 1
        else:
            slot = self._head
            self._head = (self._head + 1) % self.capacity
        self._slots[slot] = bytes(line)

    def get(self, index: int) -> bytes:
        """Return the line at logical *index*, or ``b""`` when out of range."""
        if index < 0 or index >= self._count:
            return b""
        return self._slots[(self._head + index) % self.capacity]

    def snapshot(self) -> list[bytes]:
        """Return retained lines oldest to newest."""
        return [self.get(i) for i in range(self._count)]
