"""Terminal session controller: owns the window's geometry, history and frames."""

from __future__ import annotations

import enum
import logging

from ..config import WindowOptions
from .compositor import (
    HIDE_CURSOR,
    RESET_SCROLL_REGION,
    SHOW_CURSOR,
    FrameCompositor,
    cursor_to,
    set_scroll_region,
)
from .draw_buffer import DrawBuffer
from .history import LineHistory
from .models import TerminalGeometry
from .terminal import TerminalDevice

logger = logging.getLogger("sash.session")


class SessionState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    ESTABLISHED = "established"
    TORN_DOWN = "torn_down"


class TerminalSession:
    """Live tail window on one terminal device.

    Every mutation (setup, redraw, resize, teardown) is assembled in the draw
    buffer first and reaches the device as a single write.
    """

    def __init__(self, device: TerminalDevice, options: WindowOptions) -> None:
        self.device = device
        self.options = options
        self.history = LineHistory(options.height)
        self.geometry = TerminalGeometry(
            requested_height=options.height,
            line_numbers=options.line_numbers,
        )
        self.compositor = FrameCompositor(
            line_numbers=options.line_numbers,
            color=options.color,
            ansi=options.ansi,
        )
        self.buffer = DrawBuffer()
        self.total_lines = 0
        self.state = SessionState.UNINITIALIZED

    @property
    def started(self) -> bool:
        return self.state is SessionState.ESTABLISHED

    def _refresh_size(self) -> None:
        dims = self.device.size()
        if dims is not None:
            self.geometry.update_size(*dims)

    def _flush(self) -> None:
        with self.buffer.view() as frame:
            self.device.write(frame)

    def setup(self) -> None:
        """Place the window, install the scroll region and draw the first frame."""
        if self.state is not SessionState.UNINITIALIZED:
            return
        self._refresh_size()
        cursor_row = self.device.query_cursor_row()
        newlines = self.geometry.place(cursor_row)
        logger.debug(
            "Window placed: top=%d height=%d rows=%d cursor_row=%s",
            self.geometry.window_top,
            self.geometry.height,
            self.geometry.rows,
            cursor_row,
        )

        self.buffer.reset()
        # Push existing content (the shell prompt) above the window.
        self.buffer.append(b"\n" * newlines)
        self.buffer.append(HIDE_CURSOR)
        if self.geometry.has_scroll_region:
            self.buffer.append(set_scroll_region(self.geometry.scroll_bottom))
        self.compositor.compose(self.buffer, self.geometry, self.history, self.total_lines)
        self._flush()
        self.state = SessionState.ESTABLISHED

    def push_line(self, line: bytes) -> None:
        """Record one raw input line and redraw the window."""
        self.total_lines += 1
        self.history.push(line)
        self.redraw()

    def redraw(self) -> None:
        if not self.started:
            return
        self.buffer.reset()
        self.compositor.compose(self.buffer, self.geometry, self.history, self.total_lines)
        self._flush()

    def handle_resize(self) -> None:
        """Re-query the size and re-anchor the window at the bottom.

        Unlike setup, no cursor probe is made: a resize always bottom-anchors.
        """
        self._refresh_size()
        self.geometry.anchor_bottom()
        if not self.started:
            return
        self.buffer.reset()
        if self.geometry.has_scroll_region:
            self.buffer.append(set_scroll_region(self.geometry.scroll_bottom))
        else:
            self.buffer.append(RESET_SCROLL_REGION)
        self.compositor.compose(self.buffer, self.geometry, self.history, self.total_lines)
        self._flush()

    def teardown(self) -> None:
        """Restore full-screen scrolling, move below the window, show the cursor."""
        if self.state is SessionState.ESTABLISHED:
            self.buffer.reset()
            self.buffer.append(RESET_SCROLL_REGION)
            self.buffer.append(cursor_to(self.geometry.row_after_window()))
            self.buffer.append(b"\n")
            self.buffer.append(SHOW_CURSOR)
            self._flush()
        self.state = SessionState.TORN_DOWN
