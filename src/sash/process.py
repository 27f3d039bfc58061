"""Run the command whose merged stdout/stderr feeds the window."""

from __future__ import annotations

import logging
import subprocess
from contextlib import suppress
from typing import IO

from .exceptions import SpawnError

SHELL = "/bin/sh"
EXIT_COMMAND_NOT_FOUND = 127

logger = logging.getLogger("sash.process")


def exit_status(returncode: int) -> int:
    """Map a ``Popen.returncode`` to a shell-style exit status."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def build_argv(command: list[str], *, use_exec: bool) -> list[str]:
    """Direct exec keeps argv as-is; otherwise join it for ``sh -c``."""
    if use_exec:
        return list(command)
    return [SHELL, "-c", " ".join(command)]


class ChildProcess:
    """A spawned command with stdout and stderr merged into one pipe."""

    def __init__(self, popen: subprocess.Popen[bytes]) -> None:
        if popen.stdout is None:
            raise SpawnError(f"child pid={popen.pid} has no output pipe")
        self._popen = popen
        self._stream: IO[bytes] = popen.stdout

    @property
    def pid(self) -> int:
        return self._popen.pid

    @property
    def stream(self) -> IO[bytes]:
        return self._stream

    def wait(self) -> int:
        return exit_status(self._popen.wait())

    def terminate(self) -> None:
        """Send SIGTERM if still running and reap; a no-op once reaped."""
        if self._popen.poll() is not None:
            return
        logger.debug("Terminating child pid=%d", self._popen.pid)
        with suppress(ProcessLookupError):
            self._popen.terminate()
        self._popen.wait()

    def close(self) -> None:
        self._stream.close()


def spawn_command(command: list[str], *, use_exec: bool = False) -> ChildProcess:
    """Start *command*; raises SpawnError when it cannot be executed."""
    if not command:
        raise SpawnError("no command given")
    argv = build_argv(command, use_exec=use_exec)
    try:
        popen = subprocess.Popen(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
    except OSError as exc:
        raise SpawnError(f"exec: {argv[0]}: {exc.strerror or exc}") from exc
    logger.debug("Spawned pid=%d argv=%r", popen.pid, argv)
    return ChildProcess(popen)
