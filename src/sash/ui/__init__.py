"""Live tail window rendered in a reserved region at the bottom of the terminal."""

from .compositor import FrameCompositor
from .draw_buffer import DrawBuffer
from .history import LineHistory
from .models import TerminalGeometry
from .sanitize import sanitize_line
from .session import SessionState, TerminalSession
from .terminal import TerminalDevice, TtyDevice

__all__ = [
    "DrawBuffer",
    "FrameCompositor",
    "LineHistory",
    "SessionState",
    "TerminalDevice",
    "TerminalGeometry",
    "TerminalSession",
    "TtyDevice",
    "sanitize_line",
]
