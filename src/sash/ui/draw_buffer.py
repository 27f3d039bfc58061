"""Reusable byte buffer that holds exactly one frame between emits."""

from __future__ import annotations


class DrawBuffer:
    """Growable byte buffer with amortized doubling and capacity kept across resets.

    The backing ``bytearray`` only ever grows; ``reset`` just rewinds the
    write position so steady-state redraws do not reallocate.
    """

    def __init__(self, initial_capacity: int = 4096) -> None:
        self._data = bytearray(max(initial_capacity, 1))
        self._length = 0

    def __len__(self) -> int:
        return self._length

    @property
    def capacity(self) -> int:
        return len(self._data)

    def reset(self) -> None:
        self._length = 0

    def _ensure(self, extra: int) -> None:
        need = self._length + extra
        if need > len(self._data):
            self._data.extend(bytes(need * 2 - len(self._data)))

    def append(self, chunk: bytes | bytearray | memoryview) -> None:
        size = len(chunk)
        if not size:
            return
        self._ensure(size)
        self._data[self._length : self._length + size] = chunk
        self._length += size

    def append_text(self, text: str) -> None:
        """Append *text* encoded as UTF-8 (escape sequences, gutter glyphs)."""
        self.append(text.encode("utf-8"))

    def view(self) -> memoryview:
        """Zero-copy view of the current frame; invalid after the next append."""
        return memoryview(self._data)[: self._length]

    def getvalue(self) -> bytes:
        return bytes(self._data[: self._length])
