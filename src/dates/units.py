"""
Calendar units and their canonical durations.

**Conceptual**: A CalendarUnit names a granularity of calendar time (second,
day, month, ...). The same unit value is used for three jobs:
  - truncation (start/end of the period containing an instant),
  - arithmetic (advance an instant by one unit),
  - measurement (how many units elapsed between two instants).

Units are ordered from finest to coarsest by `rank`. `WEEK` is a convenience
alias: every operation normalizes it to `WEEK_OF_YEAR` first, so "one week"
is always seven calendar days and never nests under a month.
"""

from enum import Enum
from typing import List, Optional, Union

import pandas as pd


class CalendarUnit(Enum):
    """
    Named granularities of calendar time.

    **Conceptual**: The closed set of components a calendar can decompose an
    instant into. Some units (NANOSECOND, ERA, WEEKDAY_ORDINAL) have no useful
    period semantics; operations fall back to identity/no-op for them rather
    than raising.
    """
    NANOSECOND = "nanosecond"
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEKDAY = "weekday"
    WEEKDAY_ORDINAL = "weekday_ordinal"
    WEEK = "week"
    WEEK_OF_MONTH = "week_of_month"
    WEEK_OF_YEAR = "week_of_year"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    YEAR_FOR_WEEK_OF_YEAR = "year_for_week_of_year"
    ERA = "era"

    @classmethod
    def all(cls) -> List["CalendarUnit"]:
        """Return every unit, finest first."""
        return sorted(cls, key=lambda unit: unit.rank)

    @classmethod
    def parse(cls, name: Union[str, "CalendarUnit"]) -> "CalendarUnit":
        """
        Look up a unit by its name.

        Accepts the enum value ("week_of_year"), the member name
        ("WEEK_OF_YEAR"), hyphenated spellings ("week-of-year") and simple
        plurals ("days").

        Raises:
            ValueError: If the name does not match any unit.
        """
        if isinstance(name, CalendarUnit):
            return name
        key = str(name).strip().lower().replace("-", "_").replace(" ", "_")
        for candidate in (key, key[:-1] if key.endswith("s") else None):
            if candidate is None:
                continue
            try:
                return cls(candidate)
            except ValueError:
                continue
        raise ValueError(
            f"Unknown calendar unit: {name!r}. "
            f"Expected one of: {[unit.value for unit in cls]}"
        )

    def normalized(self) -> "CalendarUnit":
        """Return the unit operations actually work in (WEEK -> WEEK_OF_YEAR)."""
        if self is CalendarUnit.WEEK:
            return CalendarUnit.WEEK_OF_YEAR
        return self

    @property
    def rank(self) -> int:
        """Granularity rank; smaller is finer."""
        return _RANKS[self]

    @property
    def is_week_relative(self) -> bool:
        """True for fields that only make sense in week-based date composition."""
        return self in _WEEK_RELATIVE_UNITS

    @property
    def duration(self) -> Optional[pd.Timedelta]:
        """
        Canonical fixed duration of one unit, or None for variable-length units.

        Only the units whose length never changes have a duration here; months,
        quarters and years must be measured with calendar component arithmetic.
        """
        return CANONICAL_DURATIONS.get(self.normalized())


_RANKS = {
    CalendarUnit.NANOSECOND: 0,
    CalendarUnit.SECOND: 1,
    CalendarUnit.MINUTE: 2,
    CalendarUnit.HOUR: 3,
    CalendarUnit.DAY: 4,
    CalendarUnit.WEEKDAY: 4,
    CalendarUnit.WEEKDAY_ORDINAL: 5,
    CalendarUnit.WEEK: 5,
    CalendarUnit.WEEK_OF_MONTH: 5,
    CalendarUnit.WEEK_OF_YEAR: 5,
    CalendarUnit.MONTH: 6,
    CalendarUnit.QUARTER: 7,
    CalendarUnit.YEAR: 8,
    CalendarUnit.YEAR_FOR_WEEK_OF_YEAR: 8,
    CalendarUnit.ERA: 9,
}

_WEEK_RELATIVE_UNITS = frozenset({
    CalendarUnit.WEEK,
    CalendarUnit.WEEK_OF_YEAR,
    CalendarUnit.WEEKDAY,
    CalendarUnit.YEAR_FOR_WEEK_OF_YEAR,
})

# Flat durations; seconds: minute=60, hour=3600, day=86400, week=604800
CANONICAL_DURATIONS = {
    CalendarUnit.NANOSECOND: pd.Timedelta(nanoseconds=1),
    CalendarUnit.SECOND: pd.Timedelta(seconds=1),
    CalendarUnit.MINUTE: pd.Timedelta(minutes=1),
    CalendarUnit.HOUR: pd.Timedelta(hours=1),
    CalendarUnit.DAY: pd.Timedelta(days=1),
    CalendarUnit.WEEKDAY: pd.Timedelta(days=1),
    CalendarUnit.WEEK_OF_YEAR: pd.Timedelta(weeks=1),
    CalendarUnit.WEEK_OF_MONTH: pd.Timedelta(weeks=1),
    CalendarUnit.WEEKDAY_ORDINAL: pd.Timedelta(weeks=1),
}

# Length in months of the variable-length units
MONTHS_PER_UNIT = {
    CalendarUnit.MONTH: 1,
    CalendarUnit.QUARTER: 3,
    CalendarUnit.YEAR: 12,
    CalendarUnit.YEAR_FOR_WEEK_OF_YEAR: 12,
}
