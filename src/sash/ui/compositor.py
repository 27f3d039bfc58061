"""Build one complete window redraw into a draw buffer without emitting it."""

from __future__ import annotations

from .draw_buffer import DrawBuffer
from .history import LineHistory
from .models import TerminalGeometry
from .sanitize import sanitize_line

# Terminal control vocabulary. These must stay byte-exact.
CURSOR_POSITION = "\x1b[{row};1H"
CLEAR_ROW = b"\r\x1b[2K"
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
SET_SCROLL_REGION = "\x1b[1;{bottom}r"
RESET_SCROLL_REGION = b"\x1b[r"

GUTTER_COLOR = b"\x1b[90m"
COLOR_RESET = b"\x1b[0m"
GUTTER_SEPARATOR = "│"
BLANK_GUTTER = "     " + GUTTER_SEPARATOR


def cursor_to(row: int) -> bytes:
    return CURSOR_POSITION.format(row=row).encode("ascii")


def set_scroll_region(bottom: int) -> bytes:
    return SET_SCROLL_REGION.format(bottom=bottom).encode("ascii")


class FrameCompositor:
    """Compose frames for the fixed window: newest line on the last row.

    The compositor only appends; callers reset the buffer and may prepend
    setup sequences so that a whole mutation still goes out in one write.
    """

    def __init__(self, *, line_numbers: bool = False, color: bool = False, ansi: bool = False) -> None:
        self.line_numbers = line_numbers
        self.color = color
        self.ansi = ansi

    def compose(
        self,
        buffer: DrawBuffer,
        geometry: TerminalGeometry,
        history: LineHistory,
        total_lines: int,
    ) -> None:
        height = geometry.height
        content_cols = geometry.content_columns

        buffer.append(cursor_to(geometry.window_top))

        count = history.count
        visible = min(count, height)
        base = total_lines - visible + 1
        # Oldest visible entry; when the history holds more than fits (the
        # window shrank on resize) the excess oldest lines are skipped.
        first = count - visible

        for row in range(height):
            buffer.append(CLEAR_ROW)
            if row < visible:
                line = history.get(first + row)
                if self.line_numbers:
                    self._append_gutter(buffer, f"{base + row:5d}{GUTTER_SEPARATOR}")
            else:
                line = b""
                if self.line_numbers:
                    self._append_gutter(buffer, BLANK_GUTTER)

            rendered = sanitize_line(line, content_cols, ansi=self.ansi)
            if line:
                buffer.append(rendered)

            if row < height - 1:
                buffer.append(b"\n")

        # Park the cursor in the scroll region so concurrent writers land
        # above the window instead of inside it.
        if geometry.scroll_bottom > 0:
            buffer.append(cursor_to(geometry.scroll_bottom))

    def _append_gutter(self, buffer: DrawBuffer, gutter: str) -> None:
        if self.color:
            buffer.append(GUTTER_COLOR)
        buffer.append_text(gutter)
        if self.color:
            buffer.append(COLOR_RESET)
