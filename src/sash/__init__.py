"""sash - tee with a live tail window."""

__version__ = "0.1.0"
