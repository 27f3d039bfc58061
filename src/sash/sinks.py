"""Sink files that receive every raw input line, verbatim."""

from __future__ import annotations

import logging
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Literal

from .exceptions import SinkError

SinkMode = Literal["w", "a"]


@dataclass(slots=True)
class SinkSpec:
    """A sink requested on the command line (``-w`` truncates, ``-a`` appends)."""

    path: Path
    mode: SinkMode = "w"


@dataclass(slots=True)
class Sink:
    index: int
    path: Path
    handle: BinaryIO | None = None
    error: str | None = None

    @property
    def active(self) -> bool:
        return self.handle is not None


def open_sink(spec: SinkSpec) -> BinaryIO:
    try:
        return spec.path.open(f"{spec.mode}b")
    except OSError as exc:
        raise SinkError(f"cannot open '{spec.path}': {exc.strerror or exc}", path=str(spec.path)) from exc


class SinkSet:
    """Tee destinations; a failing sink is disabled alone and reported once."""

    def __init__(self, sinks: list[Sink], *, flush: bool = False, logger: logging.Logger) -> None:
        self.sinks = sinks
        self.flush = flush
        self.logger = logger

    @classmethod
    def open(
        cls,
        specs: list[SinkSpec],
        *,
        flush: bool = False,
        logger: logging.Logger,
    ) -> SinkSet:
        """Open every sink in order; ones that fail to open are logged and skipped."""
        sinks: list[Sink] = []
        for index, spec in enumerate(specs):
            sink = Sink(index=index, path=spec.path)
            try:
                sink.handle = open_sink(spec)
            except SinkError as exc:
                sink.error = str(exc)
                logger.error("%s", exc)
            sinks.append(sink)
        return cls(sinks, flush=flush, logger=logger)

    @property
    def active_count(self) -> int:
        return sum(1 for sink in self.sinks if sink.active)

    def write(self, line: bytes) -> None:
        for sink in self.sinks:
            if sink.handle is None:
                continue
            try:
                sink.handle.write(line)
                if self.flush:
                    sink.handle.flush()
            except OSError as exc:
                self._disable(sink, exc)

    def _disable(self, sink: Sink, exc: OSError) -> None:
        sink.error = exc.strerror or str(exc)
        self.logger.error("write error on file %d: %s", sink.index, sink.error)
        handle, sink.handle = sink.handle, None
        if handle is not None:
            with suppress(OSError):
                handle.close()

    def close(self) -> None:
        for sink in self.sinks:
            handle, sink.handle = sink.handle, None
            if handle is None:
                continue
            try:
                handle.close()
            except OSError as exc:
                # Buffered data that never made it out is a lost write.
                sink.error = exc.strerror or str(exc)
                self.logger.error("write error on file %d: %s", sink.index, sink.error)

    def __enter__(self) -> SinkSet:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
