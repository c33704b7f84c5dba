"""
Explicit calendar context and component decomposition.

**Conceptual**: Calendar math needs two things besides the instant itself:
a time zone (to know which wall-clock day an instant falls on) and week
numbering rules (which weekday starts a week, and how many days of a new year
week 1 needs). Those live in a `Calendar` value that is passed into every
operation, so results never depend on process-wide state.

**Functionally**:
  - `Calendar`: frozen dataclass (timezone, first_weekday, min_days_in_first_week).
  - `to_instant()`: coerce datetimes, dates, strings and Timestamps into a
    timezone-aware pd.Timestamp in the calendar's zone.
  - `components()`: break an instant into `DateComponents`.
  - Week helpers (`weekday_index`, `week_one_start`, `week_fields`) shared by
    the arithmetic module.

All wall-clock arithmetic is performed on naive Timestamps and converted back
with `localize()`, which resolves DST gaps and overlaps deterministically.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

import pandas as pd

from src.dates.units import CalendarUnit


@dataclass(frozen=True)
class Calendar:
    """
    Time zone and week numbering rules for calendar arithmetic.

    Attributes:
        timezone: IANA time zone name used to decompose instants (default "UTC").
        first_weekday: First day of the week, 0=Monday ... 6=Sunday (default Monday).
        min_days_in_first_week: Days of the new year that week 1 must contain
                               (1..7, default 4). Together with a Monday start
                               this gives ISO-8601 week numbers.
    """
    timezone: str = "UTC"
    first_weekday: int = 0
    min_days_in_first_week: int = 4

    def __post_init__(self):
        """Validate settings after initialization."""
        if not 0 <= self.first_weekday <= 6:
            raise ValueError(
                f"first_weekday must be between 0 (Monday) and 6 (Sunday), got: {self.first_weekday}"
            )
        if not 1 <= self.min_days_in_first_week <= 7:
            raise ValueError(
                f"min_days_in_first_week must be between 1 and 7, got: {self.min_days_in_first_week}"
            )

    @classmethod
    def iso(cls, timezone: str = "UTC") -> "Calendar":
        """ISO-8601 calendar (Monday start, week 1 holds the first Thursday)."""
        return cls(timezone=timezone, first_weekday=0, min_days_in_first_week=4)

    @classmethod
    def gregorian_us(cls, timezone: str = "UTC") -> "Calendar":
        """US convention: weeks start on Sunday and week 1 holds January 1st."""
        return cls(timezone=timezone, first_weekday=6, min_days_in_first_week=1)

    @classmethod
    def from_settings(cls, settings=None) -> "Calendar":
        """
        Build a calendar from CalendarSettings (or the global settings).

        Args:
            settings: Optional CalendarSettings. If omitted, uses
                      get_settings().calendar.
        """
        if settings is None:
            from src.config.settings import get_settings
            settings = get_settings().calendar
        return cls(
            timezone=settings.timezone,
            first_weekday=settings.first_weekday,
            min_days_in_first_week=settings.min_days_in_first_week,
        )


DEFAULT_CALENDAR = Calendar()


@dataclass(frozen=True)
class DateComponents:
    """
    Structured breakdown of an instant in a given calendar.

    `weekday` is absolute ISO numbering (1=Monday ... 7=Sunday), independent of
    the calendar's first weekday. `week_of_year` pairs with
    `year_for_week_of_year`, which differs from `year` for days in the first or
    last few days of a year.
    """
    era: int
    year: int
    quarter: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    nanosecond: int
    weekday: int
    weekday_ordinal: int
    week_of_month: int
    week_of_year: int
    year_for_week_of_year: int

    def value(self, unit: CalendarUnit) -> Optional[int]:
        """Return the component for `unit` (WEEK reads week_of_year)."""
        unit = CalendarUnit.parse(unit).normalized()
        return getattr(self, unit.value, None)


def resolve_calendar(calendar: Optional[Calendar]) -> Calendar:
    return DEFAULT_CALENDAR if calendar is None else calendar


def to_instant(value, calendar: Optional[Calendar] = None) -> pd.Timestamp:
    """
    Coerce a value into a timezone-aware pd.Timestamp in the calendar's zone.

    Naive values are interpreted as wall-clock time in the calendar's time
    zone; aware values are converted.

    Args:
        value: pd.Timestamp, datetime, date, numpy datetime64 or ISO-8601 string.
        calendar: Calendar supplying the time zone (default UTC).

    Raises:
        ValueError: If the value cannot be interpreted as a point in time.
    """
    calendar = resolve_calendar(calendar)
    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    try:
        instant = pd.Timestamp(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Cannot interpret {value!r} as an instant. Error: {e}")
    if instant is pd.NaT:
        raise ValueError(f"Cannot interpret {value!r} as an instant (got NaT)")
    if instant.tzinfo is None:
        return localize(instant, calendar)
    return instant.tz_convert(calendar.timezone)


def wall_time(instant: pd.Timestamp, calendar: Calendar) -> pd.Timestamp:
    """Naive wall-clock reading of an instant in the calendar's zone."""
    return to_instant(instant, calendar).tz_localize(None)


def localize(wall: pd.Timestamp, calendar: Calendar, dst: bool = True) -> pd.Timestamp:
    """
    Attach the calendar's time zone to a naive wall-clock Timestamp.

    Wall times repeated by a DST fall-back resolve to the occurrence selected
    by `dst` (True = the earlier, daylight-saving one). Wall times skipped by a
    spring-forward gap shift forward to the first valid instant.
    """
    return wall.tz_localize(calendar.timezone, ambiguous=dst, nonexistent="shift_forward")


def dst_flag(instant: pd.Timestamp) -> bool:
    """True when the instant is observing daylight-saving time."""
    offset = instant.dst()
    return bool(offset) if offset is not None else False


def weekday_index(wall: pd.Timestamp, calendar: Calendar) -> int:
    """Position of the day in its week, 1 for the calendar's first weekday."""
    return (wall.dayofweek - calendar.first_weekday) % 7 + 1


def week_one_start(year: int, calendar: Calendar) -> pd.Timestamp:
    """
    Midnight (naive) of the first day of week 1 of `year`.

    Week 1 is the first week that has at least `min_days_in_first_week` days
    in `year`; it may start in late December of the previous year.
    """
    january_first = pd.Timestamp(year=year, month=1, day=1)
    offset = (january_first.dayofweek - calendar.first_weekday) % 7
    start = january_first - pd.Timedelta(days=offset)
    if 7 - offset < calendar.min_days_in_first_week:
        start += pd.Timedelta(days=7)
    return start


def weeks_in_year(year: int, calendar: Calendar) -> int:
    """Number of weeks in the week-numbering year (52 or 53)."""
    return (week_one_start(year + 1, calendar) - week_one_start(year, calendar)).days // 7


def week_fields(wall: pd.Timestamp, calendar: Calendar) -> Tuple[int, int]:
    """Return (year_for_week_of_year, week_of_year) for a naive wall time."""
    week_start = wall.normalize() - pd.Timedelta(days=weekday_index(wall, calendar) - 1)
    week_year = wall.year
    if week_start < week_one_start(week_year, calendar):
        week_year -= 1
    elif week_start >= week_one_start(week_year + 1, calendar):
        week_year += 1
    week = (week_start - week_one_start(week_year, calendar)).days // 7 + 1
    return week_year, week


def week_of_month(wall: pd.Timestamp, calendar: Calendar) -> int:
    # Weeks are counted from the one holding the 1st, whatever its length
    first = wall.replace(day=1)
    leading = weekday_index(first, calendar) - 1
    return (wall.day + leading - 1) // 7 + 1


def components(instant, calendar: Optional[Calendar] = None) -> DateComponents:
    """
    Decompose an instant into calendar components.

    Args:
        instant: Any value accepted by to_instant().
        calendar: Calendar for time zone and week rules (default UTC/ISO).

    Returns:
        DateComponents for the instant's wall-clock reading.

    Example:
        >>> parts = components("2024-12-30 08:15:00")
        >>> parts.year, parts.week_of_year, parts.year_for_week_of_year
        (2024, 1, 2025)
    """
    calendar = resolve_calendar(calendar)
    wall = wall_time(instant, calendar)
    week_year, week = week_fields(wall, calendar)
    return DateComponents(
        era=1,
        year=wall.year,
        quarter=wall.quarter,
        month=wall.month,
        day=wall.day,
        hour=wall.hour,
        minute=wall.minute,
        second=wall.second,
        nanosecond=wall.microsecond * 1000 + wall.nanosecond,
        weekday=wall.dayofweek + 1,
        weekday_ordinal=(wall.day - 1) // 7 + 1,
        week_of_month=week_of_month(wall, calendar),
        week_of_year=week,
        year_for_week_of_year=week_year,
    )
