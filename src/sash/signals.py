"""Signal bridge: handlers only set flags, the main loop drains them.

Two dispositions are used. Resize restarts an interrupted blocking read so
routine window changes never disturb the input flow. Interrupt and broken
pipe make the blocking read return early: Python retries a read that fails
with EINTR unless the handler raises (PEP 475), so those handlers raise
``ReadInterrupted`` while the loop sits inside ``blocking_read()``, and only
then.
"""

from __future__ import annotations

import signal
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from types import FrameType
from typing import Any, Literal

StopReason = Literal["interrupted", "broken_pipe"]


class ReadInterrupted(Exception):
    """Raised out of a blocking read when a flow-altering signal arrives."""

    def __init__(self, signum: int) -> None:
        super().__init__(f"read interrupted by signal {signum}")
        self.signum = signum


@dataclass(slots=True)
class SignalFlags:
    """One independent flag per condition."""

    resize: bool = False
    interrupt: bool = False
    broken_pipe: bool = False


class SignalBridge:
    """Install the handlers and expose the flags to the single polling point."""

    RESTART_SIGNALS: tuple[str, ...] = ("SIGWINCH",)
    INTERRUPT_SIGNALS: tuple[str, ...] = ("SIGINT", "SIGPIPE")

    def __init__(self) -> None:
        self.flags = SignalFlags()
        self._in_blocking_read = False
        self._previous: dict[int, Any] = {}

    def __enter__(self) -> SignalBridge:
        self.install()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.uninstall()

    def install(self) -> None:
        for name in self.RESTART_SIGNALS:
            self._register(name, restart=True)
        for name in self.INTERRUPT_SIGNALS:
            self._register(name, restart=False)

    def _register(self, name: str, *, restart: bool) -> None:
        signum = getattr(signal, name, None)
        if signum is None or signum in self._previous:
            return
        self._previous[signum] = signal.signal(signum, self._handle)
        signal.siginterrupt(signum, not restart)

    def uninstall(self) -> None:
        for signum, previous in self._previous.items():
            signal.signal(signum, previous if previous is not None else signal.SIG_DFL)
        self._previous.clear()

    def _handle(self, signum: int, frame: FrameType | None) -> None:
        if signum == getattr(signal, "SIGWINCH", None):
            self.flags.resize = True
            return
        if signum == signal.SIGINT:
            self.flags.interrupt = True
        elif signum == getattr(signal, "SIGPIPE", None):
            self.flags.broken_pipe = True
        if self._in_blocking_read:
            raise ReadInterrupted(signum)

    @contextmanager
    def blocking_read(self) -> Iterator[None]:
        """Mark the span during which an interrupt should abort a blocking read or wait."""
        try:
            self._in_blocking_read = True
            yield
        finally:
            self._in_blocking_read = False

    def drain_resize(self) -> bool:
        """Read and clear the resize flag."""
        pending = self.flags.resize
        self.flags.resize = False
        return pending

    def mark_broken_pipe(self) -> None:
        self.flags.broken_pipe = True

    def stop_reason(self) -> StopReason | None:
        if self.flags.interrupt:
            return "interrupted"
        if self.flags.broken_pipe:
            return "broken_pipe"
        return None
