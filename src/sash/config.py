"""Typed settings loader and the window options handed to the display core."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError

ColorMode = Literal["auto", "on", "off"]


class Settings(BaseSettings):
    """Defaults loaded from environment variables; CLI flags override them."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    height: int = Field(default=10, alias="SASH_HEIGHT")
    line_numbers: bool = Field(default=False, alias="SASH_LINE_NUMBERS")
    color: ColorMode = Field(default="auto", alias="SASH_COLOR")
    ansi: bool = Field(default=False, alias="SASH_ANSI")
    flush: bool = Field(default=False, alias="SASH_FLUSH")
    log_format: Literal["plain", "json"] = Field(default="plain", alias="SASH_LOG_FORMAT")
    log_level: str = Field(default="INFO", alias="SASH_LOG_LEVEL")

    no_color: str | None = Field(default=None, alias="NO_COLOR")
    term: str | None = Field(default=None, alias="TERM")

    @field_validator("height")
    @classmethod
    def validate_height(cls, value: int) -> int:
        if value < 1:
            raise ValueError("window height must be >= 1")
        return value

    @field_validator("color", mode="before")
    @classmethod
    def normalize_color(cls, value: Any) -> Any:
        """Accept the usual boolean spellings for the tri-state color mode."""
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in {"1", "true", "yes", "always"}:
                return "on"
            if lowered in {"0", "false", "no", "never"}:
                return "off"
            return lowered
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value!r}")
        return level


class WindowOptions(BaseModel):
    """Display configuration consumed by the terminal session (already resolved)."""

    model_config = ConfigDict(frozen=True)

    height: int = Field(default=10, ge=1, description="Requested window height in rows")
    line_numbers: bool = Field(default=False, description="Draw the line-number gutter")
    color: bool = Field(default=False, description="Dim the gutter with SGR color")
    ansi: bool = Field(
        default=False,
        description="Pass input escape sequences through instead of neutralizing them",
    )


def resolve_color(
    mode: ColorMode,
    *,
    tty_available: bool,
    no_color: str | None,
    term: str | None,
) -> bool:
    """Resolve the tri-state color mode to a bool.

    ``auto`` enables color only on a controlling terminal, when ``NO_COLOR``
    is absent (any value, even empty, disables it) and ``TERM`` names
    something other than ``dumb``.
    """
    if mode == "on":
        return True
    if mode == "off":
        return False
    if not tty_available or no_color is not None:
        return False
    return bool(term) and term != "dumb"


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        messages = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigError(f"invalid configuration: {messages}") from exc
