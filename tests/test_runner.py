"""Tests for the main line loop."""

from __future__ import annotations

import io
import logging
import signal
import threading
import time
from collections.abc import Callable
from pathlib import Path

from fake_terminal import FakeTerminal

from sash.config import WindowOptions
from sash.process import spawn_command
from sash.runner import run, wait_for_child
from sash.signals import SignalBridge
from sash.sinks import SinkSet, SinkSpec
from sash.ui.session import TerminalSession

_LOGGER = logging.getLogger("tests.runner")


class _ScriptedSource:
    """Line source that runs a hook after handing out the Nth line."""

    def __init__(self, lines: list[bytes], hooks: dict[int, Callable[[], None]]) -> None:
        self._lines = list(lines)
        self._hooks = hooks
        self.reads = 0

    def readline(self) -> bytes:
        self.reads += 1
        hook = self._hooks.get(self.reads)
        if not self._lines:
            return b""
        line = self._lines.pop(0)
        if hook is not None:
            hook()
        return line


class _ClosedPipe(io.BytesIO):
    def write(self, data: bytes) -> int:  # type: ignore[override]
        raise BrokenPipeError(32, "Broken pipe")


def _session(terminal: FakeTerminal, height: int) -> TerminalSession:
    session = TerminalSession(terminal, WindowOptions(height=height))
    session.setup()
    return session


def test_ten_thousand_lines_reach_sink_and_window_shows_last_ten(tmp_path: Path) -> None:
    target = tmp_path / "out.log"
    payload = b"".join(f"line {i}\n".encode() for i in range(1, 10001))
    terminal = FakeTerminal(rows=24, cursor_row=None)
    session = _session(terminal, height=10)

    with SinkSet.open([SinkSpec(target)], logger=_LOGGER) as sinks:
        outcome = run(io.BytesIO(payload), sinks, SignalBridge(), session=session)

    assert outcome.lines == 10000
    assert outcome.reason == "eof"
    assert target.read_bytes() == payload
    assert session.history.snapshot() == [f"line {i}\n".encode() for i in range(9991, 10001)]
    assert session.total_lines == 10000
    assert len(terminal.writes) == 10001


def test_final_line_without_newline_is_kept(tmp_path: Path) -> None:
    target = tmp_path / "out.log"
    with SinkSet.open([SinkSpec(target)], logger=_LOGGER) as sinks:
        outcome = run(io.BytesIO(b"a\nb"), sinks, SignalBridge(), passthrough=io.BytesIO())
    assert outcome.lines == 2
    assert target.read_bytes() == b"a\nb"


def test_passthrough_copies_every_line() -> None:
    out = io.BytesIO()
    sinks = SinkSet([], logger=_LOGGER)
    outcome = run(io.BytesIO(b"x\ny\n"), sinks, SignalBridge(), passthrough=out)
    assert out.getvalue() == b"x\ny\n"
    assert outcome.reason == "eof"


def test_empty_input_produces_nothing(tmp_path: Path) -> None:
    target = tmp_path / "out.log"
    with SinkSet.open([SinkSpec(target)], logger=_LOGGER) as sinks:
        outcome = run(io.BytesIO(b""), sinks, SignalBridge(), passthrough=io.BytesIO())
    assert outcome.lines == 0
    assert target.read_bytes() == b""


def test_interrupt_during_read_stops_without_a_partial_line(tmp_path: Path) -> None:
    bridge = SignalBridge()
    target = tmp_path / "out.log"

    def interrupt_while_blocked() -> None:
        bridge._handle(signal.SIGINT, None)

    source = _ScriptedSource([b"1\n", b"2\n", b"3\n", b"4\n"], {3: interrupt_while_blocked})
    with SinkSet.open([SinkSpec(target)], logger=_LOGGER) as sinks:
        outcome = run(source, sinks, bridge, passthrough=io.BytesIO())  # type: ignore[arg-type]

    assert outcome.reason == "interrupted"
    assert outcome.lines == 2
    assert target.read_bytes() == b"1\n2\n"


def test_interrupt_noticed_after_read_keeps_line_in_hand(tmp_path: Path) -> None:
    bridge = SignalBridge()
    target = tmp_path / "out.log"

    def interrupt_after_read() -> None:
        bridge.flags.interrupt = True

    source = _ScriptedSource([b"1\n", b"2\n", b"3\n"], {2: interrupt_after_read})
    with SinkSet.open([SinkSpec(target)], logger=_LOGGER) as sinks:
        outcome = run(source, sinks, bridge, passthrough=io.BytesIO())  # type: ignore[arg-type]

    assert outcome.reason == "interrupted"
    assert outcome.lines == 2
    assert target.read_bytes() == b"1\n2\n"
    assert source.reads == 2


def test_resize_is_handled_between_lines() -> None:
    bridge = SignalBridge()
    terminal = FakeTerminal(rows=24, cursor_row=None)
    session = _session(terminal, height=5)

    def shrink() -> None:
        terminal.resize(80, 4)
        bridge.flags.resize = True

    source = _ScriptedSource([b"a\n", b"b\n", b"c\n"], {2: shrink})
    outcome = run(source, SinkSet([], logger=_LOGGER), bridge, session=session)  # type: ignore[arg-type]

    assert outcome.lines == 3
    assert session.geometry.height == 3
    assert session.geometry.window_top == 2
    assert not bridge.flags.resize
    # setup, line a, resize frame, line b, line c
    assert len(terminal.writes) == 5


def test_broken_passthrough_stops_but_sinks_get_the_line(tmp_path: Path) -> None:
    target = tmp_path / "out.log"
    bridge = SignalBridge()
    with SinkSet.open([SinkSpec(target)], logger=_LOGGER) as sinks:
        outcome = run(io.BytesIO(b"1\n2\n"), sinks, bridge, passthrough=_ClosedPipe())

    assert outcome.reason == "broken_pipe"
    assert outcome.lines == 1
    assert target.read_bytes() == b"1\n"


def test_child_status_is_returned_after_exit() -> None:
    child = spawn_command(["exit 3"])
    try:
        child.stream.read()
        assert wait_for_child(child, SignalBridge()) == 3
    finally:
        child.close()


def test_pending_stop_skips_child_wait() -> None:
    bridge = SignalBridge()
    bridge.flags.interrupt = True
    child = spawn_command(["sleep", "5"], use_exec=True)
    try:
        assert wait_for_child(child, bridge) is None
    finally:
        child.terminate()
        child.close()


def test_interrupt_cuts_child_wait_short() -> None:
    child = spawn_command(["sleep", "5"], use_exec=True)
    try:
        with SignalBridge() as bridge:
            timer = threading.Timer(0.2, signal.pthread_kill, (threading.main_thread().ident, signal.SIGINT))
            started = time.monotonic()
            timer.start()
            status = wait_for_child(child, bridge)
            elapsed = time.monotonic() - started
            timer.join()
    finally:
        child.terminate()
        child.close()

    assert status is None
    assert bridge.stop_reason() == "interrupted"
    assert elapsed < 4
