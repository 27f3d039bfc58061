"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class SinkError(Exception):
    """Raised when a sink file cannot be opened or written."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class SpawnError(Exception):
    """Raised when the command to run cannot be started."""


class TerminalError(Exception):
    """Raised for controlling-terminal I/O failures during a device query."""
