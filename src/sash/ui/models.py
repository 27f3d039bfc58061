"""Terminal geometry and window placement for the live tail window."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_COLUMNS = 80
DEFAULT_ROWS = 24

# "%5d" line number plus the one-column "│" separator.
LINE_NUMBER_MARGIN = 6


@dataclass(slots=True)
class TerminalGeometry:
    """Where the window sits on screen.

    Rows are 1-based. ``scroll_bottom`` is ``window_top - 1`` and 0 means no
    window has been placed yet. A scroll region is only installed when
    ``scroll_bottom >= 2`` because DECSTBM needs top < bottom.
    """

    requested_height: int
    columns: int = DEFAULT_COLUMNS
    rows: int = DEFAULT_ROWS
    window_top: int = 0
    scroll_bottom: int = 0
    line_numbers: bool = False

    @property
    def height(self) -> int:
        """Requested height clamped to ``rows - 1``, never below 1."""
        return max(1, min(self.requested_height, self.rows - 1))

    @property
    def margin(self) -> int:
        return LINE_NUMBER_MARGIN if self.line_numbers else 0

    @property
    def content_columns(self) -> int:
        return max(1, self.columns - self.margin)

    @property
    def has_scroll_region(self) -> bool:
        return self.scroll_bottom >= 2

    def update_size(self, columns: int | None, rows: int | None) -> None:
        """Take new dimensions, keeping the previous value for any that is unusable."""
        if columns is not None and columns > 0:
            self.columns = columns
        if rows is not None and rows > 0:
            self.rows = rows

    def place(self, cursor_row: int | None) -> int:
        """Place the window for startup and return how many newlines to emit.

        Below the cursor when it fits (nothing scrolls), otherwise flush
        against the bottom, pushing existing content up by ``height - 1``.
        """
        height = self.height
        if cursor_row is not None and cursor_row > 0 and cursor_row + height - 1 <= self.rows:
            self.window_top = cursor_row
            newlines = 0
        else:
            self.window_top = self.rows - height + 1
            newlines = height - 1
        self.scroll_bottom = self.window_top - 1
        return newlines

    def anchor_bottom(self) -> None:
        """Place the window flush against the bottom (used on every resize)."""
        self.window_top = self.rows - self.height + 1
        self.scroll_bottom = self.window_top - 1

    def row_after_window(self) -> int:
        """Row to park the cursor on at teardown, clamped to the screen."""
        return min(self.window_top + self.height, self.rows)
