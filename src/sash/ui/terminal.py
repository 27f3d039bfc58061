"""Controlling-terminal access: size query, one-shot writes and the DSR cursor probe.

The display talks to ``/dev/tty`` directly, never to stdin/stdout, so the
data path stays untouched when those are pipes or files.
"""

from __future__ import annotations

import logging
import os
import re
import termios
from contextlib import suppress
from typing import Protocol

from ..exceptions import TerminalError

CONTROLLING_TERMINAL = "/dev/tty"

DSR_CURSOR_QUERY = b"\x1b[6n"
_DSR_RESPONSE_MAX = 32
# VTIME is in tenths of a second.
_PROBE_TIMEOUT_DECISECONDS = 1

_CURSOR_REPORT_RE = re.compile(rb"\x1b?\[(\d+)(?:;(\d+))?R")

logger = logging.getLogger("sash.terminal")


class TerminalDevice(Protocol):
    """What the session needs from a terminal."""

    def size(self) -> tuple[int, int] | None: ...

    def write(self, data: bytes | memoryview) -> None: ...

    def query_cursor_row(self) -> int | None: ...

    def close(self) -> None: ...


def parse_cursor_report(response: bytes) -> int | None:
    """Extract the 1-based row from a ``ESC [ row ; col R`` report."""
    match = _CURSOR_REPORT_RE.search(response)
    if match is None:
        return None
    row = int(match.group(1))
    return row if row > 0 else None


class TtyDevice:
    """A file descriptor on the controlling terminal."""

    def __init__(self, fd: int, *, owns_fd: bool = True) -> None:
        self.fd = fd
        self._owns_fd = owns_fd

    @classmethod
    def open(cls, path: str = CONTROLLING_TERMINAL) -> TtyDevice | None:
        """Open the controlling terminal, or return None when there is none."""
        try:
            fd = os.open(path, os.O_RDWR | os.O_NOCTTY)
        except OSError as exc:
            logger.debug("No controlling terminal (%s): %s", path, exc)
            return None
        if not os.isatty(fd):
            os.close(fd)
            return None
        return cls(fd)

    def size(self) -> tuple[int, int] | None:
        """Return ``(columns, rows)`` or None when the query fails."""
        try:
            dims = os.get_terminal_size(self.fd)
        except OSError:
            return None
        return dims.columns, dims.lines

    def write(self, data: bytes | memoryview) -> None:
        """Emit *data* with exactly one write(2).

        Short writes are not retried: a torn frame beats a second syscall
        that another writer could slip in front of. Failures are ignored.
        """
        if self.fd < 0 or not len(data):
            return
        try:
            os.write(self.fd, data)
        except OSError as exc:
            logger.debug("Terminal write failed: %s", exc)

    def query_cursor_row(self) -> int | None:
        """Ask the terminal where the cursor is; None when it does not answer."""
        try:
            response = self._device_status_report()
        except TerminalError as exc:
            logger.debug("Cursor probe failed: %s", exc)
            return None
        return parse_cursor_report(response)

    def _device_status_report(self) -> bytes:
        try:
            original = termios.tcgetattr(self.fd)
        except termios.error as exc:
            raise TerminalError(f"tcgetattr failed: {exc}") from exc

        raw = list(original)
        raw[3] &= ~(termios.ICANON | termios.ECHO)
        raw[6] = list(original[6])
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = _PROBE_TIMEOUT_DECISECONDS
        try:
            termios.tcsetattr(self.fd, termios.TCSANOW, raw)
        except termios.error as exc:
            raise TerminalError(f"tcsetattr failed: {exc}") from exc

        try:
            os.write(self.fd, DSR_CURSOR_QUERY)
            response = bytearray()
            while len(response) < _DSR_RESPONSE_MAX - 1:
                byte = os.read(self.fd, 1)
                if not byte:
                    break
                response += byte
                if byte == b"R":
                    break
            return bytes(response)
        except OSError as exc:
            raise TerminalError(f"cursor report I/O failed: {exc}") from exc
        finally:
            try:
                termios.tcsetattr(self.fd, termios.TCSANOW, original)
            except termios.error as exc:
                logger.debug("Restoring terminal mode failed: %s", exc)

    def close(self) -> None:
        if self.fd >= 0 and self._owns_fd:
            with suppress(OSError):
                os.close(self.fd)
        self.fd = -1
