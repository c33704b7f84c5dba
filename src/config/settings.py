"""
Configuration settings for the calendar and file-system helpers.

**Conceptual**: This module provides strongly-typed configuration objects that
load from environment variables (via .env files). All settings are validated
when loaded, so a bad value fails at startup with a clear message rather than
deep inside a date calculation or directory scan.

Settings here only provide *defaults*. Every operation still takes its
calendar or scan options explicitly, so library code never depends on
process-wide configuration.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

TRUE_VALUES = ("true", "1", "yes")

DEFAULT_PACKAGE_EXTENSIONS = frozenset({
    ".app",
    ".bundle",
    ".framework",
    ".plugin",
    ".kext",
    ".xcodeproj",
    ".xcworkspace",
    ".playground",
    ".photoslibrary",
    ".rtfd",
    ".pages",
    ".numbers",
    ".key",
})

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw}")


def _parse_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in TRUE_VALUES


def parse_extensions(raw: str) -> FrozenSet[str]:
    """
    Parse a comma-separated list of directory extensions.

    Entries are lowercased and given a leading dot if missing; blanks are
    dropped. "app, .Bundle,," -> {".app", ".bundle"}.
    """
    extensions = set()
    for item in raw.split(","):
        item = item.strip().lower()
        if not item:
            continue
        extensions.add(item if item.startswith(".") else f".{item}")
    return frozenset(extensions)


@dataclass(frozen=True)
class CalendarSettings:
    """
    Default calendar used when callers do not pass one explicitly.

    Attributes:
        timezone: IANA time zone name (e.g. "Europe/Amsterdam"). Default "UTC".
        first_weekday: First day of the week, 0=Monday ... 6=Sunday. Default 0.
        min_days_in_first_week: Days of January week 1 must contain (1..7).
                               Default 4 (ISO-8601 week numbers).
    """
    timezone: str = "UTC"
    first_weekday: int = 0
    min_days_in_first_week: int = 4

    def __post_init__(self):
        """Validate settings after initialization."""
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(
                f"CALENDAR_TIMEZONE must be a known IANA time zone, got: {self.timezone!r}"
            )
        if not 0 <= self.first_weekday <= 6:
            raise ValueError(
                f"CALENDAR_FIRST_WEEKDAY must be between 0 (Monday) and 6 (Sunday), "
                f"got: {self.first_weekday}"
            )
        if not 1 <= self.min_days_in_first_week <= 7:
            raise ValueError(
                f"CALENDAR_MIN_DAYS_IN_FIRST_WEEK must be between 1 and 7, "
                f"got: {self.min_days_in_first_week}"
            )

    @classmethod
    def from_env(cls) -> "CalendarSettings":
        """
        Load calendar settings from environment variables.

        **Environment variables** (all optional):
          - CALENDAR_TIMEZONE: IANA zone name. Defaults to "UTC".
          - CALENDAR_FIRST_WEEKDAY: 0..6 (Monday..Sunday). Defaults to 0.
          - CALENDAR_MIN_DAYS_IN_FIRST_WEEK: 1..7. Defaults to 4.

        Raises:
            ValueError: If any value is malformed or out of range.
        """
        return cls(
            timezone=os.getenv("CALENDAR_TIMEZONE", "UTC"),
            first_weekday=_parse_int("CALENDAR_FIRST_WEEKDAY", "0"),
            min_days_in_first_week=_parse_int("CALENDAR_MIN_DAYS_IN_FIRST_WEEK", "4"),
        )


@dataclass(frozen=True)
class ScanSettings:
    """
    Defaults for directory scans.

    Attributes:
        package_extensions: Directory suffixes treated as opaque packages
                           (lowercase, with leading dot).
        include_hidden: Whether scans include dot-prefixed entries by default.
    """
    package_extensions: FrozenSet[str] = field(default=DEFAULT_PACKAGE_EXTENSIONS)
    include_hidden: bool = False

    def __post_init__(self):
        """Validate settings after initialization."""
        bad = sorted(ext for ext in self.package_extensions if not ext.startswith(".") or ext != ext.lower())
        if bad:
            raise ValueError(
                f"Package extensions must be lowercase and start with '.', got: {bad}"
            )

    @classmethod
    def from_env(cls) -> "ScanSettings":
        """
        Load scan settings from environment variables.

        **Environment variables** (all optional):
          - SCAN_PACKAGE_EXTENSIONS: comma-separated suffixes, e.g. "app,bundle".
            Replaces the built-in list when set.
          - SCAN_INCLUDE_HIDDEN: "true"/"1"/"yes" to include hidden entries.
        """
        raw_extensions = os.getenv("SCAN_PACKAGE_EXTENSIONS")
        if raw_extensions is None:
            extensions = DEFAULT_PACKAGE_EXTENSIONS
        else:
            extensions = parse_extensions(raw_extensions)
        return cls(
            package_extensions=extensions,
            include_hidden=_parse_bool("SCAN_INCLUDE_HIDDEN", "false"),
        )


@dataclass(frozen=True)
class LoggingSettings:
    """
    Logging level and format for scripts and applications.

    Attributes:
        level: Standard level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format: logging format string.
    """
    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.level not in LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {list(LOG_LEVELS)}, got: {self.level!r}"
            )

    @property
    def numeric_level(self) -> int:
        return getattr(logging, self.level)

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        """
        Load logging settings from environment variables.

        **Environment variables** (all optional):
          - LOG_LEVEL: level name, case-insensitive. Defaults to "WARNING".
          - LOG_FORMAT: logging format string.
        """
        return cls(
            level=os.getenv("LOG_LEVEL", "WARNING").strip().upper(),
            format=os.getenv("LOG_FORMAT", cls.format),
        )


@dataclass(frozen=True)
class Settings:
    """
    Global settings aggregating all subsystem settings.

    **Usage pattern**:
      ```python
      from src.config.settings import get_settings

      settings = get_settings()
      calendar = Calendar.from_settings(settings.calendar)
      ```

    Attributes:
        calendar: Default calendar (time zone and week rules).
        scan: Default directory-scan behaviour.
        logging: Logging level and format.
    """
    calendar: CalendarSettings = field(default_factory=CalendarSettings)
    scan: ScanSettings = field(default_factory=ScanSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Load global settings from environment variables.

        Raises:
            ValueError: If any subsystem setting is malformed.
        """
        return cls(
            calendar=CalendarSettings.from_env(),
            scan=ScanSettings.from_env(),
            logging=LoggingSettings.from_env(),
        )


# Lazily loaded on first get_settings(); tests call reset_settings() or build
# Settings(...) directly instead.
_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached.

    Returns:
        Global Settings singleton.

    Raises:
        ValueError: If the environment holds invalid settings.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    **Testing pattern**:
      ```python
      def test_something(monkeypatch):
          reset_settings()
          monkeypatch.setenv("CALENDAR_TIMEZONE", "Europe/Amsterdam")
          assert get_settings().calendar.timezone == "Europe/Amsterdam"
      ```
    """
    global _default_settings
    _default_settings = None
