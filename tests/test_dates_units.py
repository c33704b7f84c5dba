"""
Tests for src/dates/units.py

Unit parsing, week normalization, ordering and canonical durations.
"""

import pandas as pd
import pytest

from src.dates.units import CANONICAL_DURATIONS, MONTHS_PER_UNIT, CalendarUnit


def test_week_normalizes_to_week_of_year():
    """WEEK is an alias that every operation treats as WEEK_OF_YEAR."""
    assert CalendarUnit.WEEK.normalized() is CalendarUnit.WEEK_OF_YEAR
    assert CalendarUnit.MONTH.normalized() is CalendarUnit.MONTH


@pytest.mark.parametrize("name, expected", [
    ("day", CalendarUnit.DAY),
    ("DAY", CalendarUnit.DAY),
    ("days", CalendarUnit.DAY),
    ("week-of-year", CalendarUnit.WEEK_OF_YEAR),
    ("WEEK_OF_YEAR", CalendarUnit.WEEK_OF_YEAR),
    ("minutes", CalendarUnit.MINUTE),
    ("year for week of year", CalendarUnit.YEAR_FOR_WEEK_OF_YEAR),
])
def test_parse_accepts_common_spellings(name, expected):
    assert CalendarUnit.parse(name) is expected


def test_parse_passes_units_through():
    assert CalendarUnit.parse(CalendarUnit.QUARTER) is CalendarUnit.QUARTER


def test_parse_rejects_unknown_names():
    with pytest.raises(ValueError) as exc_info:
        CalendarUnit.parse("fortnight")
    assert "fortnight" in str(exc_info.value)


def test_all_is_ordered_finest_first():
    units = CalendarUnit.all()
    assert units[0] is CalendarUnit.NANOSECOND
    assert units[-1] is CalendarUnit.ERA
    assert set(units) == set(CalendarUnit)
    ranks = [unit.rank for unit in units]
    assert ranks == sorted(ranks)


def test_rank_orders_second_to_year():
    assert (
        CalendarUnit.SECOND.rank
        < CalendarUnit.MINUTE.rank
        < CalendarUnit.HOUR.rank
        < CalendarUnit.DAY.rank
        < CalendarUnit.WEEK.rank
        < CalendarUnit.YEAR.rank
    )


def test_canonical_durations_in_seconds():
    """minute=60, hour=3600, day=86400, week=604800 seconds."""
    assert CANONICAL_DURATIONS[CalendarUnit.MINUTE].total_seconds() == 60
    assert CANONICAL_DURATIONS[CalendarUnit.HOUR].total_seconds() == 3600
    assert CANONICAL_DURATIONS[CalendarUnit.DAY].total_seconds() == 86400
    assert CalendarUnit.WEEK.duration == pd.Timedelta(seconds=604800)


def test_variable_length_units_have_no_flat_duration():
    for unit in (CalendarUnit.MONTH, CalendarUnit.QUARTER, CalendarUnit.YEAR):
        assert unit.duration is None
        assert unit in MONTHS_PER_UNIT


def test_week_relative_units():
    assert CalendarUnit.WEEK.is_week_relative
    assert CalendarUnit.WEEKDAY.is_week_relative
    assert CalendarUnit.YEAR_FOR_WEEK_OF_YEAR.is_week_relative
    assert not CalendarUnit.YEAR.is_week_relative
    assert not CalendarUnit.DAY.is_week_relative
