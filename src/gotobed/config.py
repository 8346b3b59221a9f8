"""
Configuration for gotobed.

PURPOSE: Centralized configuration constants and runtime settings.
AI CONTEXT: All configurable values live here - modify this file to change behavior.

CONFIGURATION CATEGORIES:
- Storage: File names and data directory
- Tracking: Default target and timezone for new log entries
- Chart: Coordinate convention, smoothing window, colors
- Network: Dashboard bind address, Telegram API settings

ENVIRONMENT VARIABLES:
- GOTOBED_DATA_DIR: Directory holding time_log.json and telegram.json (default: ".")
- GOTOBED_TIMEZONE: IANA zone recorded with new entries (default: Australia/Melbourne)
- GOTOBED_PLOT_HOST: Dashboard bind address (default: 0.0.0.0)
- GOTOBED_PLOT_PORT: Dashboard port (default: 8080)
- GOTOBED_TELEGRAM_TOKEN: Telegram bot token (required for the bot)

USAGE:
    from gotobed.config import Config
    window = Config.SMOOTHING_WINDOW
    zone = Config.get_timezone()
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration container for gotobed.

    DESIGN: Frozen dataclass with class-level constants - no instance creation needed.
    Environment-backed values are read through classmethods so tests can override them.

    STORAGE STRUCTURE:
        <data dir>/
        ├── time_log.json   # Tracker: current target + chronological entries
        └── telegram.json   # Relay context: last known chat id
    """

    # =========================================================================
    # STORAGE CONFIGURATION
    # =========================================================================
    STORAGE_DIR: ClassVar[str] = "."
    LOG_FILE: ClassVar[str] = "time_log.json"
    CONTEXT_FILE: ClassVar[str] = "telegram.json"

    # =========================================================================
    # TRACKING DEFAULTS
    # =========================================================================
    DEFAULT_TARGET: ClassVar[tuple[int, int]] = (23, 0)
    DEFAULT_TIMEZONE: ClassVar[str] = "Australia/Melbourne"

    # =========================================================================
    # CHART CONFIGURATION
    # =========================================================================
    DAY_WRAP_HOUR: ClassVar[int] = 12
    """Local hour at which one chart day ends and the next begins."""

    SMOOTHING_WINDOW: ClassVar[int] = 7
    Y_TICK_MINUTES: ClassVar[int] = 15

    HISTORY_COLOR: ClassVar[str] = "blue"
    TREND_COLOR: ClassVar[str] = "green"
    TARGET_COLOR: ClassVar[str] = "red"

    # =========================================================================
    # NETWORK CONFIGURATION
    # =========================================================================
    DEFAULT_HOST: ClassVar[str] = "0.0.0.0"  # nosec B104
    DEFAULT_PORT: ClassVar[int] = 8080

    TELEGRAM_API_BASE: ClassVar[str] = "https://api.telegram.org"
    POLL_TIMEOUT: ClassVar[int] = 120
    """Long-poll timeout (seconds) passed to getUpdates."""

    # =========================================================================
    # ENVIRONMENT-BASED SETTINGS (runtime configurable)
    # =========================================================================
    _data_dir_override: ClassVar[str | None] = None
    _timezone_override: ClassVar[str | None] = None

    @classmethod
    def get_data_dir(cls) -> str:
        """
        Get the directory holding the persisted JSON files.

        Priority: test override, then GOTOBED_DATA_DIR, then STORAGE_DIR.

        Returns:
            Directory path string.

        Example:
            >>> Config.get_data_dir()
            '.'
        """
        if cls._data_dir_override is not None:
            return cls._data_dir_override
        return os.environ.get("GOTOBED_DATA_DIR", cls.STORAGE_DIR)

    @classmethod
    def get_timezone(cls) -> str:
        """
        Get the IANA zone recorded with new log entries.

        The zone travels with each entry so a later change of zone does not
        move historical bedtimes on the chart.

        Returns:
            IANA zone identifier, e.g. 'Australia/Melbourne'.
        """
        if cls._timezone_override is not None:
            return cls._timezone_override
        return os.environ.get("GOTOBED_TIMEZONE", cls.DEFAULT_TIMEZONE)

    @classmethod
    def get_host(cls) -> str:
        """Dashboard bind address from GOTOBED_PLOT_HOST or DEFAULT_HOST."""
        return os.environ.get("GOTOBED_PLOT_HOST", cls.DEFAULT_HOST)

    @classmethod
    def get_port(cls) -> int:
        """
        Dashboard port from GOTOBED_PLOT_PORT or DEFAULT_PORT.

        Returns:
            Port number. Falls back to DEFAULT_PORT when the variable is not
            an integer.
        """
        raw = os.environ.get("GOTOBED_PLOT_PORT", "")
        try:
            return int(raw) if raw else cls.DEFAULT_PORT
        except ValueError:
            return cls.DEFAULT_PORT

    @classmethod
    def get_telegram_token(cls) -> str | None:
        """
        Telegram bot token from GOTOBED_TELEGRAM_TOKEN.

        Returns:
            Token string, or None when unset or empty.
        """
        return os.environ.get("GOTOBED_TELEGRAM_TOKEN") or None

    @classmethod
    def set_test_overrides(
        cls,
        data_dir: str | None = None,
        timezone: str | None = None,
    ) -> None:
        """
        Set test overrides for environment-based settings.

        Must call reset_test_overrides() in test teardown to avoid affecting
        other tests.

        Args:
            data_dir: Override for the data directory. None to clear.
            timezone: Override for the recording timezone. None to clear.

        Example:
            >>> Config.set_test_overrides(timezone='Europe/Rome')
            >>> Config.get_timezone()
            'Europe/Rome'
            >>> Config.reset_test_overrides()
        """
        cls._data_dir_override = data_dir
        cls._timezone_override = timezone

    @classmethod
    def reset_test_overrides(cls) -> None:
        """Reset all test overrides to use environment variables."""
        cls._data_dir_override = None
        cls._timezone_override = None
