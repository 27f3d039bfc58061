"""sash CLI: tee stdin (or a command's output) to files with a live tail window."""

from __future__ import annotations

import argparse
import os
import sys
from contextlib import suppress
from pathlib import Path
from typing import IO

from rich.console import Console

from .config import WindowOptions, load_settings, resolve_color
from .exceptions import ConfigError, SpawnError
from .log_setup import setup_logger
from .process import EXIT_COMMAND_NOT_FOUND, ChildProcess, spawn_command
from .runner import RunOutcome, run, wait_for_child
from .signals import SignalBridge
from .sinks import SinkSet, SinkSpec
from .ui.session import TerminalSession
from .ui.summary import render_summary
from .ui.terminal import TtyDevice

EXIT_USAGE = 1
EXIT_INTERRUPTED = 130
EXIT_BROKEN_PIPE = 141

_EPILOG = """\
Pipe mode:    command | sash [-w file ...]
Command mode: sash [-w file ...] command [args...]
"""


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with status 1, matching the classic tool."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: {message}\n")


def _write_sink(path: str) -> SinkSpec:
    return SinkSpec(path=Path(path), mode="w")


def _append_sink(path: str) -> SinkSpec:
    return SinkSpec(path=Path(path), mode="a")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments; option parsing stops at the command."""
    parser = _ArgumentParser(
        prog="sash",
        description="Tee input to files while showing the last N lines in a fixed terminal window.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-n", dest="height", type=int, default=None, help="Window height (default: 10).")
    parser.add_argument("-f", dest="flush", action="store_true", default=None, help="Flush output files after each line.")
    parser.add_argument(
        "-x",
        dest="use_exec",
        action="store_true",
        help="Use exec instead of shell (no pipes, &&, etc.).",
    )
    parser.add_argument("-l", dest="line_numbers", action="store_true", default=None, help="Show line numbers.")
    parser.add_argument("-c", dest="color", action="store_const", const="on", help="Force color on.")
    parser.add_argument("-C", dest="color", action="store_const", const="off", help="Force color off.")
    parser.add_argument(
        "-A",
        dest="ansi",
        action="store_true",
        default=None,
        help="Pass ANSI escape sequences in the input through to the window.",
    )
    parser.add_argument(
        "-w",
        dest="sinks",
        metavar="FILE",
        action="append",
        type=_write_sink,
        default=[],
        help="Write output to FILE (truncate).",
    )
    parser.add_argument(
        "-a",
        dest="sinks",
        metavar="FILE",
        action="append",
        type=_append_sink,
        help="Append output to FILE.",
    )
    parser.add_argument(
        "-s",
        "--summary",
        action="store_true",
        help="Print a run summary on stderr when done.",
    )
    parser.add_argument("--log-format", choices=["plain", "json"], default=None)
    parser.add_argument("command", nargs=argparse.REMAINDER, help="Command to run (via /bin/sh -c).")
    return parser.parse_args(argv)


def _open_terminal() -> TtyDevice | None:
    return TtyDevice.open()


def _finish_passthrough(stream: IO[bytes] | None) -> bool:
    """Flush passthrough output; return False when the reader has gone away."""
    if stream is None:
        return True
    try:
        stream.flush()
    except BrokenPipeError:
        # Point stdout at /dev/null so the interpreter's own exit-time
        # flush does not fail a second time.
        with suppress(OSError, ValueError):
            target = sys.stdout.fileno()
            devnull = os.open(os.devnull, os.O_WRONLY)
            try:
                os.dup2(devnull, target)
            finally:
                os.close(devnull)
        return False
    return True


def main(argv: list[str] | None = None) -> int:
    """Run one tee session and return the process exit status."""
    args = parse_args(argv)
    logger = setup_logger()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("%s", exc)
        return EXIT_USAGE
    logger = setup_logger(
        level=settings.log_level,
        log_format=args.log_format or settings.log_format,
    )

    height = args.height if args.height is not None else settings.height
    if height < 1:
        logger.error("window height must be >= 1")
        return EXIT_USAGE

    device = _open_terminal()
    options = WindowOptions(
        height=height,
        line_numbers=args.line_numbers if args.line_numbers is not None else settings.line_numbers,
        color=resolve_color(
            args.color or settings.color,
            tty_available=device is not None,
            no_color=settings.no_color,
            term=settings.term,
        ),
        ansi=args.ansi if args.ansi is not None else settings.ansi,
    )
    flush = args.flush if args.flush is not None else settings.flush
    sinks = SinkSet.open(args.sinks, flush=flush, logger=logger)

    child: ChildProcess | None = None
    if args.command:
        try:
            child = spawn_command(args.command, use_exec=args.use_exec)
        except SpawnError as exc:
            logger.error("%s", exc)
            sinks.close()
            if device is not None:
                device.close()
            return EXIT_COMMAND_NOT_FOUND
        source = child.stream
    else:
        source = sys.stdin.buffer
        if sys.stdin.isatty():
            logger.warning("warning: reading from terminal (did you forget to pipe input?)")

    session = TerminalSession(device, options) if device is not None else None
    passthrough = None if session is not None else sys.stdout.buffer

    exit_code = 0
    outcome = RunOutcome(lines=0, reason="eof")
    with SignalBridge() as bridge:
        try:
            if session is not None:
                session.setup()
            outcome = run(source, sinks, bridge, session=session, passthrough=passthrough)
            if child is not None and outcome.reason == "eof":
                status = wait_for_child(child, bridge)
                if status is None:
                    outcome.reason = bridge.stop_reason() or outcome.reason
                else:
                    exit_code = status
        finally:
            if child is not None:
                child.terminate()
                child.close()
            if session is not None:
                session.teardown()
            if not _finish_passthrough(passthrough) and outcome.reason == "eof":
                outcome.reason = "broken_pipe"
            sinks.close()
            if device is not None:
                device.close()

    if outcome.reason == "interrupted":
        exit_code = EXIT_INTERRUPTED
    elif outcome.reason == "broken_pipe":
        exit_code = EXIT_BROKEN_PIPE

    if args.summary:
        render_summary(
            Console(stderr=True),
            lines=outcome.lines,
            reason=outcome.reason,
            exit_code=exit_code,
            sinks=sinks,
            window=session is not None,
        )
    logger.debug("Exiting: lines=%d reason=%s exit_code=%d", outcome.lines, outcome.reason, exit_code)
    return exit_code
