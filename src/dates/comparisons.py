"""
Date comparisons relative to other instants and to "now".

**Conceptual**: Everyday questions about a date ("is it today?", "is it a
weekend?", "is it this month?") reduce to comparing period starts in a given
calendar. "Now" always comes from an injected Clock so these checks are
deterministic under test.
"""

from typing import Optional

import pandas as pd

from src.dates.arithmetic import UnitLike, next_unit, previous_unit, start_of
from src.dates.calendar import Calendar, resolve_calendar, to_instant
from src.dates.units import CalendarUnit
from src.utils.time import Clock, RealClock

# ISO weekday numbers (1=Monday) of Saturday and Sunday
WEEKEND_DAYS = frozenset({6, 7})


def is_same_as(
    instant,
    other,
    unit: UnitLike,
    calendar: Optional[Calendar] = None,
) -> bool:
    """
    True if both instants fall in the same `unit`-period.

    The instants must agree on `unit` and every coarser unit, e.g. the same
    DAY means the same calendar date in the calendar's time zone.
    """
    return start_of(instant, unit, calendar) == start_of(other, unit, calendar)


def today(clock: Optional[Clock] = None, calendar: Optional[Calendar] = None) -> pd.Timestamp:
    """Midnight at the start of the current day in the calendar's time zone."""
    clock = clock or RealClock()
    return start_of(clock.now(), CalendarUnit.DAY, calendar)


def is_today(instant, clock: Optional[Clock] = None, calendar: Optional[Calendar] = None) -> bool:
    return is_same_as(instant, today(clock, calendar), CalendarUnit.DAY, calendar)


def is_yesterday(instant, clock: Optional[Clock] = None, calendar: Optional[Calendar] = None) -> bool:
    yesterday = previous_unit(today(clock, calendar), CalendarUnit.DAY, calendar)
    return is_same_as(instant, yesterday, CalendarUnit.DAY, calendar)


def is_tomorrow(instant, clock: Optional[Clock] = None, calendar: Optional[Calendar] = None) -> bool:
    tomorrow = next_unit(today(clock, calendar), CalendarUnit.DAY, calendar)
    return is_same_as(instant, tomorrow, CalendarUnit.DAY, calendar)


def is_weekend(instant, calendar: Optional[Calendar] = None) -> bool:
    """True on Saturdays and Sundays (wall-clock date in the calendar's zone)."""
    calendar = resolve_calendar(calendar)
    return to_instant(instant, calendar).dayofweek + 1 in WEEKEND_DAYS


def is_workday(instant, calendar: Optional[Calendar] = None) -> bool:
    return not is_weekend(instant, calendar)


def is_in_future(instant, clock: Optional[Clock] = None) -> bool:
    clock = clock or RealClock()
    return to_instant(instant) > clock.now()


def is_in_past(instant, clock: Optional[Clock] = None) -> bool:
    clock = clock or RealClock()
    return to_instant(instant) < clock.now()


def is_this_week(instant, clock: Optional[Clock] = None, calendar: Optional[Calendar] = None) -> bool:
    clock = clock or RealClock()
    return is_same_as(instant, clock.now(), CalendarUnit.WEEK, calendar)


def is_this_month(instant, clock: Optional[Clock] = None, calendar: Optional[Calendar] = None) -> bool:
    clock = clock or RealClock()
    return is_same_as(instant, clock.now(), CalendarUnit.MONTH, calendar)


def is_this_year(instant, clock: Optional[Clock] = None, calendar: Optional[Calendar] = None) -> bool:
    clock = clock or RealClock()
    return is_same_as(instant, clock.now(), CalendarUnit.YEAR, calendar)


def days_in_month(instant, calendar: Optional[Calendar] = None) -> int:
    """Number of days in the month containing `instant` (28..31)."""
    calendar = resolve_calendar(calendar)
    return int(to_instant(instant, calendar).days_in_month)
