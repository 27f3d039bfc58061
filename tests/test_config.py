"""Tests for settings and color resolution."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from sash.config import Settings, WindowOptions, load_settings, resolve_color
from sash.exceptions import ConfigError

_ENV_VARS = (
    "SASH_HEIGHT",
    "SASH_LINE_NUMBERS",
    "SASH_COLOR",
    "SASH_ANSI",
    "SASH_FLUSH",
    "SASH_LOG_FORMAT",
    "SASH_LOG_LEVEL",
    "NO_COLOR",
    "TERM",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: Any) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = load_settings()
    assert settings.height == 10
    assert settings.line_numbers is False
    assert settings.color == "auto"
    assert settings.ansi is False
    assert settings.flush is False
    assert settings.log_format == "plain"
    assert settings.log_level == "INFO"
    assert settings.no_color is None
    assert settings.term is None


def test_environment_overrides(monkeypatch: Any) -> None:
    monkeypatch.setenv("SASH_HEIGHT", "4")
    monkeypatch.setenv("SASH_LINE_NUMBERS", "true")
    monkeypatch.setenv("SASH_ANSI", "1")
    monkeypatch.setenv("SASH_FLUSH", "yes")
    monkeypatch.setenv("SASH_LOG_FORMAT", "json")
    monkeypatch.setenv("SASH_LOG_LEVEL", "debug")
    monkeypatch.setenv("TERM", "xterm-256color")
    settings = load_settings()
    assert settings.height == 4
    assert settings.line_numbers is True
    assert settings.ansi is True
    assert settings.flush is True
    assert settings.log_format == "json"
    assert settings.log_level == "DEBUG"
    assert settings.term == "xterm-256color"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("always", "on"), ("TRUE", "on"), ("never", "off"), ("0", "off"), ("auto", "auto"), ("Off", "off")],
)
def test_color_mode_spellings(monkeypatch: Any, raw: str, expected: str) -> None:
    monkeypatch.setenv("SASH_COLOR", raw)
    assert load_settings().color == expected


def test_zero_height_is_rejected(monkeypatch: Any) -> None:
    monkeypatch.setenv("SASH_HEIGHT", "0")
    with pytest.raises(ConfigError) as excinfo:
        load_settings()
    assert "window height must be >= 1" in str(excinfo.value)


def test_unknown_log_level_is_rejected(monkeypatch: Any) -> None:
    monkeypatch.setenv("SASH_LOG_LEVEL", "chatty")
    with pytest.raises(ConfigError, match="invalid configuration"):
        load_settings()


def test_empty_no_color_still_counts(monkeypatch: Any) -> None:
    monkeypatch.setenv("NO_COLOR", "")
    assert load_settings().no_color == ""


def test_settings_accept_field_names() -> None:
    settings = Settings(height=3, color="on")
    assert settings.height == 3
    assert settings.color == "on"


def test_window_options_are_frozen_and_validated() -> None:
    options = WindowOptions(height=2, line_numbers=True)
    with pytest.raises(ValidationError):
        options.height = 3  # type: ignore[misc]
    with pytest.raises(ValidationError):
        WindowOptions(height=0)


@pytest.mark.parametrize(
    ("mode", "tty", "no_color", "term", "expected"),
    [
        ("on", False, "1", None, True),
        ("off", True, None, "xterm", False),
        ("auto", True, None, "xterm", True),
        ("auto", False, None, "xterm", False),
        ("auto", True, "", "xterm", False),
        ("auto", True, None, "dumb", False),
        ("auto", True, None, None, False),
        ("auto", True, None, "", False),
    ],
)
def test_resolve_color(mode: Any, tty: bool, no_color: str | None, term: str | None, expected: bool) -> None:
    assert resolve_color(mode, tty_available=tty, no_color=no_color, term=term) is expected
