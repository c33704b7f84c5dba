"""
Calendar-aware date arithmetic: period bounds, stepping, editing and counting.

**Conceptual**: These are pure functions over instants (timezone-aware
pd.Timestamps) and calendar units. Each call decomposes its input in an
explicit `Calendar`, computes on the wall-clock reading, and returns a new
instant. Nothing is cached or mutated, so every function is safe to call from
any number of threads at once.

**Functionally**:
  - `start_of` / `end_of`: bounds of the unit-period containing an instant.
  - `next_unit` / `previous_unit`: step one calendar-aware unit forward/back.
  - `changing`: override named components and recompose a single instant.
  - `precise_count` / `count`: how many units elapsed between two instants.

**Totality**: Given a valid instant and unit, nothing here raises. Units with
no period semantics (NANOSECOND for bounds, ERA, WEEKDAY_ORDINAL) degrade to
identity, and edits that leave the representable range return the input.

Example:
    >>> import pandas as pd
    >>> from src.dates.arithmetic import start_of, end_of, precise_count
    >>> t = pd.Timestamp("2024-02-14 15:42:07", tz="UTC")
    >>> start_of(t, "month")
    Timestamp('2024-02-01 00:00:00+0000', tz='UTC')
    >>> end_of(t, "month")
    Timestamp('2024-02-29 23:59:59+0000', tz='UTC')
    >>> precise_count("1970-01-01", "1970-01-02 12:00", "day")
    1.5
"""

import logging
from typing import Dict, Mapping, Optional, Union

import numpy as np
import pandas as pd

from src.dates.calendar import (
    Calendar,
    components,
    dst_flag,
    localize,
    resolve_calendar,
    to_instant,
    week_fields,
    week_one_start,
    weekday_index,
    weeks_in_year,
)
from src.dates.units import CANONICAL_DURATIONS, MONTHS_PER_UNIT, CalendarUnit

logger = logging.getLogger(__name__)

UnitLike = Union[CalendarUnit, str]

ONE_SECOND = pd.Timedelta(seconds=1)

# Units stepped as absolute elapsed time rather than wall-clock fields
_ABSOLUTE_UNITS = frozenset({
    CalendarUnit.NANOSECOND,
    CalendarUnit.SECOND,
    CalendarUnit.MINUTE,
    CalendarUnit.HOUR,
})

# Units that can be written back by changing(); everything else is ignored
_DATE_FIELDS = ("year", "month", "day", "hour", "minute", "second", "nanosecond")


def start_of(instant, unit: UnitLike, calendar: Optional[Calendar] = None) -> pd.Timestamp:
    """
    Return the first instant of the `unit`-period containing `instant`.

    **Functionally**:
      - SECOND/MINUTE/HOUR: finer components reset to zero.
      - DAY (and WEEKDAY): midnight of the same day.
      - WEEK / WEEK_OF_YEAR / WEEK_OF_MONTH: midnight of the calendar's first
        weekday on or before the instant (day start minus weekday_index - 1 days).
      - MONTH / QUARTER / YEAR: midnight of the first day of the period.
      - YEAR_FOR_WEEK_OF_YEAR: midnight of the first day of week 1.
      - NANOSECOND, ERA, WEEKDAY_ORDINAL: the instant unchanged.

    When DST makes the start's wall time occur twice, SECOND/MINUTE/HOUR keep
    the occurrence the instant is in. Day and coarser units always start at
    the earlier occurrence (a midnight repeated by a fall-back).

    Args:
        instant: Any value accepted by to_instant().
        unit: CalendarUnit or unit name.
        calendar: Calendar to compute in (default UTC with ISO weeks).

    Returns:
        Timezone-aware pd.Timestamp in the calendar's zone.
    """
    calendar = resolve_calendar(calendar)
    unit = CalendarUnit.parse(unit).normalized()
    instant = to_instant(instant, calendar)

    start = _wall_start(instant.tz_localize(None), unit, calendar)
    if start is None:
        return instant
    # A repeated hour is its own period; a repeated midnight starts at its first occurrence
    dst = dst_flag(instant) if unit in _ABSOLUTE_UNITS else True
    return localize(start, calendar, dst)


def end_of(instant, unit: UnitLike, calendar: Optional[Calendar] = None) -> pd.Timestamp:
    """
    Return the last whole second of the `unit`-period containing `instant`.

    Computed as one second before the start of the following period, so
    `start_of(x, u) <= y <= end_of(x, u)` holds exactly for the whole-second
    instants `y` in the same period as `x`. For units where start_of() is the
    identity, end_of() is the identity too.

    The result has whole-second resolution, so a sub-second instant in the
    last second of its period lies after it: end_of(12:34:59.5, MINUTE) is
    12:34:59.
    """
    calendar = resolve_calendar(calendar)
    unit = CalendarUnit.parse(unit).normalized()
    instant = to_instant(instant, calendar)

    if _wall_start(instant.tz_localize(None), unit, calendar) is None:
        return instant
    start = start_of(instant, unit, calendar)
    return start_of(next_unit(start, unit, calendar), unit, calendar) - ONE_SECOND


def next_unit(instant, unit: UnitLike, calendar: Optional[Calendar] = None) -> pd.Timestamp:
    """
    Advance `instant` by exactly one calendar-aware `unit`.

    Sub-day units are absolute durations. Day and coarser units keep the
    wall-clock time of day (so a day across a DST change is 23 or 25 hours),
    and month-based units clamp to the last valid day (Jan 31 -> Feb 29).
    WEEK always advances seven calendar days.
    """
    return _shift(instant, unit, calendar, 1)


def previous_unit(instant, unit: UnitLike, calendar: Optional[Calendar] = None) -> pd.Timestamp:
    """Move `instant` back by exactly one calendar-aware `unit`."""
    return _shift(instant, unit, calendar, -1)


def changing(
    instant,
    unit_values: Mapping[UnitLike, int],
    calendar: Optional[Calendar] = None,
) -> pd.Timestamp:
    """
    Override named components of `instant` and recompose a new instant.

    **Conceptual**: The instant is decomposed once, every edit is applied to
    that single snapshot (order of `unit_values` is irrelevant), and the result
    is recomposed in one step.

    **Functionally**:
      - Components are tracked at whole-second resolution: the result has zero
        sub-second part unless NANOSECOND is one of the edits.
      - If any week-relative unit is edited (WEEK, WEEK_OF_YEAR, WEEKDAY,
        YEAR_FOR_WEEK_OF_YEAR) the date is composed from week-year, week and
        weekday; a YEAR edit then sets the week-numbering year, so the week
        number never contradicts the requested year. MONTH and DAY are not
        used in that mode.
      - Otherwise the date is composed from year, month, day and time fields.
      - ERA, QUARTER, WEEKDAY_ORDINAL and WEEK_OF_MONTH edits are ignored.

    **Normalization (overflow)**: Out-of-range values roll over into the next
    larger unit instead of being rejected or clamped:
      - {day: 30} in February -> March 1st or 2nd
      - {month: 13} -> January of the following year
      - {day: 0} -> last day of the previous month
      - {hour: 24} -> midnight of the following day
      - {week_of_year: 0} -> last week of the previous week-year

    If the recomposed date leaves the representable range, `instant` is
    returned unchanged.

    Args:
        instant: Any value accepted by to_instant().
        unit_values: Mapping of CalendarUnit (or unit name) to integer value.
                    WEEKDAY values use ISO numbering (1=Monday ... 7=Sunday).
        calendar: Calendar to compute in.

    Returns:
        New timezone-aware pd.Timestamp.

    Example:
        >>> changing("2023-01-31 10:30", {"month": 2})
        Timestamp('2023-03-03 10:30:00+0000', tz='UTC')
    """
    calendar = resolve_calendar(calendar)
    instant = to_instant(instant, calendar)
    edits: Dict[CalendarUnit, int] = {
        CalendarUnit.parse(unit).normalized(): int(value)
        for unit, value in unit_values.items()
    }
    parts = components(instant, calendar)

    fields = {name: getattr(parts, name) for name in _DATE_FIELDS}
    fields["nanosecond"] = 0
    for unit, value in edits.items():
        if unit.value in fields:
            fields[unit.value] = value

    time_of_day = pd.Timedelta(
        hours=fields["hour"],
        minutes=fields["minute"],
        seconds=fields["second"],
        nanoseconds=fields["nanosecond"],
    )

    try:
        if any(unit.is_week_relative for unit in edits):
            week_year = edits.get(
                CalendarUnit.YEAR_FOR_WEEK_OF_YEAR,
                edits.get(CalendarUnit.YEAR, parts.year_for_week_of_year),
            )
            week = edits.get(CalendarUnit.WEEK_OF_YEAR, parts.week_of_year)
            weekday = edits.get(CalendarUnit.WEEKDAY, parts.weekday)
            day = week_one_start(week_year, calendar) + pd.Timedelta(
                days=(week - 1) * 7 + _weekday_offset(weekday, calendar)
            )
        else:
            day = (
                pd.Timestamp(year=fields["year"], month=1, day=1)
                + pd.DateOffset(months=fields["month"] - 1)
                + pd.Timedelta(days=fields["day"] - 1)
            )
        wall = day + time_of_day
    except (OverflowError, ValueError, pd.errors.OutOfBoundsDatetime) as e:
        logger.debug("changing(%s, %s) left the representable range: %s", instant, edits, e)
        return instant

    return localize(wall, calendar, dst_flag(instant))


def precise_count(
    start,
    end,
    unit: UnitLike,
    calendar: Optional[Calendar] = None,
) -> float:
    """
    Fractional number of `unit`s elapsed from `start` to `end`.

    **Mathematically**:
      - Fixed-length units (nanosecond, second, minute, hour, day, week):
            (end - start) / duration(unit)
        with durations 60, 3600, 86400 and 604800 seconds for minute..week.
      - MONTH, QUARTER, YEAR: calendar component subtraction. Whole periods n
        are counted from `start` (anchor_n = start + n * period, clamped to
        month ends), then the fraction of the next period elapsed is added:
            n + (end - anchor_n) / (anchor_{n+1} - anchor_n)
        so 2024-02-01T12:00 -> 2024-03-01T12:00 is exactly 1.0 month.
      - ERA: 0.0.

    The result is negative when `end` is earlier than `start`; calendar
    counts are then the negated forward count.

    Args:
        start: Instant the interval begins at (any value accepted by to_instant()).
        end: Instant the interval ends at.
        unit: CalendarUnit or unit name to measure in.
        calendar: Calendar to compute in.
    """
    calendar = resolve_calendar(calendar)
    unit = CalendarUnit.parse(unit).normalized()
    start = to_instant(start, calendar)
    end = to_instant(end, calendar)

    if unit in MONTHS_PER_UNIT:
        return _calendar_count(
            start.tz_localize(None),
            end.tz_localize(None),
            MONTHS_PER_UNIT[unit],
        )

    duration = CANONICAL_DURATIONS.get(unit)
    if duration is None:
        return 0.0
    return float((end - start) / duration)


def count(
    start,
    end,
    unit: UnitLike,
    calendar: Optional[Calendar] = None,
) -> int:
    """Whole `unit`s elapsed: precise_count() truncated toward zero."""
    return int(np.trunc(precise_count(start, end, unit, calendar)))


def _wall_start(wall: pd.Timestamp, unit: CalendarUnit, calendar: Calendar) -> Optional[pd.Timestamp]:
    if unit is CalendarUnit.SECOND:
        return wall.replace(microsecond=0, nanosecond=0)
    if unit is CalendarUnit.MINUTE:
        return wall.replace(second=0, microsecond=0, nanosecond=0)
    if unit is CalendarUnit.HOUR:
        return wall.replace(minute=0, second=0, microsecond=0, nanosecond=0)

    midnight = wall.normalize()
    if unit in (CalendarUnit.DAY, CalendarUnit.WEEKDAY):
        return midnight
    if unit in (CalendarUnit.WEEK_OF_YEAR, CalendarUnit.WEEK_OF_MONTH):
        return midnight - pd.Timedelta(days=weekday_index(wall, calendar) - 1)
    if unit is CalendarUnit.MONTH:
        return midnight.replace(day=1)
    if unit is CalendarUnit.QUARTER:
        return midnight.replace(month=3 * (wall.quarter - 1) + 1, day=1)
    if unit is CalendarUnit.YEAR:
        return midnight.replace(month=1, day=1)
    if unit is CalendarUnit.YEAR_FOR_WEEK_OF_YEAR:
        week_year, _ = week_fields(wall, calendar)
        return week_one_start(week_year, calendar)
    return None


def _shift(instant, unit: UnitLike, calendar: Optional[Calendar], steps: int) -> pd.Timestamp:
    calendar = resolve_calendar(calendar)
    unit = CalendarUnit.parse(unit).normalized()
    instant = to_instant(instant, calendar)

    if unit in _ABSOLUTE_UNITS:
        return instant + steps * CANONICAL_DURATIONS[unit]

    wall = instant.tz_localize(None)
    if unit in (CalendarUnit.DAY, CalendarUnit.WEEKDAY):
        shifted = wall + pd.DateOffset(days=steps)
    elif unit in (CalendarUnit.WEEK_OF_YEAR, CalendarUnit.WEEK_OF_MONTH):
        shifted = wall + pd.DateOffset(weeks=steps)
    elif unit is CalendarUnit.MONTH:
        shifted = wall + pd.DateOffset(months=steps)
    elif unit is CalendarUnit.QUARTER:
        shifted = wall + pd.DateOffset(months=3 * steps)
    elif unit is CalendarUnit.YEAR:
        shifted = wall + pd.DateOffset(years=steps)
    elif unit is CalendarUnit.YEAR_FOR_WEEK_OF_YEAR:
        shifted = _shift_week_year(wall, calendar, steps)
    else:
        return instant
    return localize(shifted, calendar, dst_flag(instant))


def _shift_week_year(wall: pd.Timestamp, calendar: Calendar, steps: int) -> pd.Timestamp:
    # Same week number (clamped to 52/53) and weekday in the target week-year
    week_year, week = week_fields(wall, calendar)
    target = week_year + steps
    week = min(week, weeks_in_year(target, calendar))
    day = week_one_start(target, calendar) + pd.Timedelta(
        days=(week - 1) * 7 + weekday_index(wall, calendar) - 1
    )
    return day + (wall - wall.normalize())


def _weekday_offset(weekday: int, calendar: Calendar) -> int:
    """Days from the week's first day to ISO `weekday`; values past 7 overflow."""
    overflow_weeks, iso_index = divmod(weekday - 1, 7)
    return (iso_index - calendar.first_weekday) % 7 + 7 * overflow_weeks


def _calendar_count(start: pd.Timestamp, end: pd.Timestamp, months: int) -> float:
    if end < start:
        return -_calendar_count(end, start, months)

    def anchor(periods: int) -> pd.Timestamp:
        return start + pd.DateOffset(months=periods * months)

    whole = ((end.year - start.year) * 12 + end.month - start.month) // months
    while whole > 0 and anchor(whole) > end:
        whole -= 1
    while anchor(whole + 1) <= end:
        whole += 1

    current, following = anchor(whole), anchor(whole + 1)
    return whole + (end - current) / (following - current)
