"""
Centralized settings for flw.

Manifesto:
    The few knobs the engine has (default ``each`` concurrency, the default
    stop reason, scheduler delay, log level) are read from one validated,
    cached settings object instead of module constants, so they can be
    tuned through ``FLW_*`` environment variables or a ``.env`` file.

Examples:
    >>> from flw.core.settings import get_settings
    >>> get_settings().default_concurrency
    3

    $ FLW_DEFAULT_CONCURRENCY=8 FLW_LOG_LEVEL=DEBUG python app.py

Tags:
    flw, configuration, settings, pydantic, caching, validation
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FlwSettings(BaseSettings):
    """flw configuration.

    All fields can be set via ``FLW_*`` environment variables (e.g.
    ``FLW_SCHEDULE_DELAY=0.001``) or through a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Engine ───────────────────────────────────────────────────
    default_concurrency: int = Field(default=3, ge=1, description="Window size for each() when none is given")
    stop_reason: str = Field(default="stopped", min_length=1, description="Reason recorded by Context.stop()")
    schedule_delay: float = Field(
        default=0.0,
        ge=0.0,
        description="Seconds to defer each step; 0 posts with call_soon, >0 with call_later",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="WARNING")
    log_json: bool | None = Field(default=None, description="None auto-detects from the TTY")


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, FlwSettings] = {}


def get_settings(*, _force_reload: bool = False) -> FlwSettings:
    """Load, validate, and cache a :class:`FlwSettings` instance.

    Parameters
    ----------
    _force_reload:
        Bypass cache and re-read the environment.
    """
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = FlwSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Drop the cached settings so the next :func:`get_settings` re-reads the environment."""
    _settings_cache.clear()


__all__ = ["FlwSettings", "get_settings", "clear_settings_cache"]
