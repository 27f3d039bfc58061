"""End-of-run summary panel printed on stderr after the window is torn down."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..sinks import SinkSet


def build_summary_lines(
    *,
    lines: int,
    reason: str,
    exit_code: int,
    sinks: SinkSet,
    window: bool,
) -> list[str]:
    failed = [sink for sink in sinks.sinks if sink.error is not None]
    lines_out = [
        f"lines={lines} reason={reason} exit_code={exit_code} window={window}",
        f"sinks={len(sinks.sinks)} ok={len(sinks.sinks) - len(failed)} failed={len(failed)}",
    ]
    for sink in failed:
        lines_out.append(f"  [{sink.index}] {sink.path}: {sink.error}")
    return lines_out


def render_summary(
    console: Console,
    *,
    lines: int,
    reason: str,
    exit_code: int,
    sinks: SinkSet,
    window: bool,
) -> None:
    body = build_summary_lines(
        lines=lines,
        reason=reason,
        exit_code=exit_code,
        sinks=sinks,
        window=window,
    )
    border = "green" if exit_code == 0 else "red"
    console.print(Panel(Text("\n".join(body)), title="sash", border_style=border))
