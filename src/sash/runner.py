"""The single-threaded line loop: read, tee to sinks, show in the window."""

from __future__ import annotations

from dataclasses import dataclass
from typing import IO, Literal

from .process import ChildProcess
from .signals import ReadInterrupted, SignalBridge
from .sinks import SinkSet
from .ui.session import TerminalSession

RunReason = Literal["eof", "interrupted", "broken_pipe"]


@dataclass(slots=True)
class RunOutcome:
    lines: int
    reason: RunReason


def run(
    source: IO[bytes],
    sinks: SinkSet,
    bridge: SignalBridge,
    *,
    session: TerminalSession | None = None,
    passthrough: IO[bytes] | None = None,
) -> RunOutcome:
    """Copy *source* line by line until end of stream or a stop signal.

    With a session the window shows the lines; without one they are copied
    to *passthrough* (normally stdout). Sinks always get every line that
    was read, including the one in hand when a stop signal is noticed.
    """
    lines = 0
    while True:
        try:
            with bridge.blocking_read():
                if bridge.stop_reason() is not None:
                    break
                line = source.readline()
        except ReadInterrupted:
            break
        if not line:
            break

        # The only polling point: between reading a line and processing it.
        if bridge.drain_resize() and session is not None:
            session.handle_resize()
        stopping = bridge.stop_reason() is not None

        lines += 1
        sinks.write(line)
        if session is not None:
            session.push_line(line)
        elif passthrough is not None:
            try:
                passthrough.write(line)
            except BrokenPipeError:
                bridge.mark_broken_pipe()
                break

        if stopping:
            break

    return RunOutcome(lines=lines, reason=bridge.stop_reason() or "eof")


def wait_for_child(child: ChildProcess, bridge: SignalBridge) -> int | None:
    """Wait for the command to exit and return its status.

    Returns None when an interrupt or broken pipe cut the wait short; the
    caller still owns terminating and reaping the child.
    """
    try:
        with bridge.blocking_read():
            if bridge.stop_reason() is not None:
                return None
            return child.wait()
    except ReadInterrupted:
        return None
