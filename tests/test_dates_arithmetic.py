"""
Tests for src/dates/arithmetic.py

These tests pin down period bounds, calendar-aware stepping, component
editing (including the overflow normalization policy), and interval counting.
Property-style checks run over a small grid of hand-picked instants that
include month ends, leap days, ISO week-year boundaries and DST transitions.
"""

import itertools

import numpy as np
import pandas as pd
import pytest

from src.dates.arithmetic import (
    changing,
    count,
    end_of,
    next_unit,
    precise_count,
    previous_unit,
    start_of,
)
from src.dates.calendar import Calendar, components
from src.dates.units import CalendarUnit

UTC = Calendar()
US = Calendar.gregorian_us()
AMSTERDAM = Calendar(timezone="Europe/Amsterdam")
HAVANA = Calendar(timezone="America/Havana")


def ts(text: str, tz: str = "UTC") -> pd.Timestamp:
    return pd.Timestamp(text, tz=tz)


# Whole-second instants: month ends, leap day, week-year boundaries
UTC_INSTANTS = [
    ts("2024-02-14 15:42:07"),
    ts("2024-01-31 10:00:00"),
    ts("2024-02-29 23:59:59"),
    ts("2023-12-31 00:00:00"),
    ts("2020-12-31 12:00:00"),
    ts("2024-12-30 08:15:00"),
    ts("2024-11-30 18:00:00"),
    ts("1970-01-01 00:00:00"),
]

# Around the 2024 spring-forward and fall-back transitions
AMSTERDAM_INSTANTS = [
    ts("2024-03-30 12:00:00", "Europe/Amsterdam"),
    ts("2024-03-31 01:30:00", "Europe/Amsterdam"),
    ts("2024-10-27 12:00:00", "Europe/Amsterdam"),
    pd.Timestamp("2024-10-27 02:30:00").tz_localize("Europe/Amsterdam", ambiguous=True),
    pd.Timestamp("2024-10-27 02:30:00").tz_localize("Europe/Amsterdam", ambiguous=False),
]

# Havana falls back at midnight: 2024-11-03 00:00-00:59 happens twice
HAVANA_INSTANTS = [
    ts("2024-11-02 12:00:00", "America/Havana"),
    pd.Timestamp("2024-11-03 00:30:00").tz_localize("America/Havana", ambiguous=True),
    pd.Timestamp("2024-11-03 00:30:00").tz_localize("America/Havana", ambiguous=False),
    ts("2024-11-03 12:00:00", "America/Havana"),
]

PERIOD_UNITS = [
    CalendarUnit.SECOND,
    CalendarUnit.MINUTE,
    CalendarUnit.HOUR,
    CalendarUnit.DAY,
    CalendarUnit.WEEK,
    CalendarUnit.MONTH,
    CalendarUnit.QUARTER,
    CalendarUnit.YEAR,
    CalendarUnit.YEAR_FOR_WEEK_OF_YEAR,
]

GRID = (
    [(x, UTC) for x in UTC_INSTANTS]
    + [(x, US) for x in UTC_INSTANTS]
    + [(x, AMSTERDAM) for x in AMSTERDAM_INSTANTS]
    + [(x, HAVANA) for x in HAVANA_INSTANTS]
)


# ============================================================================
# start_of / end_of
# ============================================================================

@pytest.mark.parametrize("unit, expected", [
    (CalendarUnit.SECOND, "2024-02-14 15:42:07"),
    (CalendarUnit.MINUTE, "2024-02-14 15:42:00"),
    (CalendarUnit.HOUR, "2024-02-14 15:00:00"),
    (CalendarUnit.DAY, "2024-02-14 00:00:00"),
    (CalendarUnit.WEEK, "2024-02-12 00:00:00"),
    (CalendarUnit.MONTH, "2024-02-01 00:00:00"),
    (CalendarUnit.QUARTER, "2024-01-01 00:00:00"),
    (CalendarUnit.YEAR, "2024-01-01 00:00:00"),
])
def test_start_of_known_values(unit, expected):
    assert start_of(ts("2024-02-14 15:42:07.250"), unit) == ts(expected)


@pytest.mark.parametrize("unit, expected", [
    (CalendarUnit.SECOND, "2024-02-14 15:42:07"),
    (CalendarUnit.MINUTE, "2024-02-14 15:42:59"),
    (CalendarUnit.HOUR, "2024-02-14 15:59:59"),
    (CalendarUnit.DAY, "2024-02-14 23:59:59"),
    (CalendarUnit.WEEK, "2024-02-18 23:59:59"),
    (CalendarUnit.MONTH, "2024-02-29 23:59:59"),
    (CalendarUnit.QUARTER, "2024-03-31 23:59:59"),
    (CalendarUnit.YEAR, "2024-12-31 23:59:59"),
])
def test_end_of_known_values(unit, expected):
    assert end_of(ts("2024-02-14 15:42:07"), unit) == ts(expected)


def test_start_of_week_follows_first_weekday():
    """Wednesday 2024-02-14: ISO weeks start Monday the 12th, US weeks Sunday the 11th."""
    wednesday = ts("2024-02-14 15:42:07")
    assert start_of(wednesday, "week", UTC) == ts("2024-02-12")
    assert start_of(wednesday, "week", US) == ts("2024-02-11")


def test_start_of_week_crosses_month_boundary():
    assert start_of(ts("2024-03-02 09:00"), CalendarUnit.WEEK) == ts("2024-02-26")


def test_start_of_week_year_is_first_day_of_week_one():
    assert start_of(ts("2024-12-30 08:15"), CalendarUnit.YEAR_FOR_WEEK_OF_YEAR) == ts("2024-12-30")
    assert start_of(ts("2021-01-01 08:15"), CalendarUnit.YEAR_FOR_WEEK_OF_YEAR) == ts("2019-12-30")


def test_start_of_day_in_calendar_time_zone():
    """Midnight is computed on the Amsterdam wall clock, not in UTC."""
    instant = ts("2024-01-15 23:30", "UTC")
    start = start_of(instant, CalendarUnit.DAY, AMSTERDAM)
    assert start == ts("2024-01-16 00:00", "Europe/Amsterdam")


def test_end_of_day_on_fall_back_day_is_25_hours_after_start():
    day = ts("2024-10-27 12:00", "Europe/Amsterdam")
    start = start_of(day, CalendarUnit.DAY, AMSTERDAM)
    end = end_of(day, CalendarUnit.DAY, AMSTERDAM)
    assert end - start == pd.Timedelta(hours=25) - pd.Timedelta(seconds=1)


def test_start_of_hour_keeps_repeated_hour_occurrence():
    second_pass = pd.Timestamp("2024-10-27 02:30").tz_localize("Europe/Amsterdam", ambiguous=False)
    start = start_of(second_pass, CalendarUnit.HOUR, AMSTERDAM)
    assert start == pd.Timestamp("2024-10-27 02:00").tz_localize("Europe/Amsterdam", ambiguous=False)


def test_start_of_day_uses_first_of_repeated_midnights():
    """Havana falls back from 01:00 CDT to 00:00 CST on 2024-11-03."""
    first_midnight = pd.Timestamp("2024-11-03 00:00").tz_localize("America/Havana", ambiguous=True)
    early = pd.Timestamp("2024-11-03 00:30").tz_localize("America/Havana", ambiguous=True)
    noon = ts("2024-11-03 12:00", "America/Havana")

    assert start_of(noon, CalendarUnit.DAY, HAVANA) == first_midnight
    assert start_of(noon, CalendarUnit.DAY, HAVANA).utcoffset() == pd.Timedelta(hours=-4)
    assert start_of(noon, CalendarUnit.DAY, HAVANA) <= early
    assert start_of(noon, CalendarUnit.MONTH, HAVANA) == start_of(early, CalendarUnit.MONTH, HAVANA)


def test_day_with_repeated_midnight_is_25_hours():
    noon = ts("2024-11-03 12:00", "America/Havana")
    start = start_of(noon, CalendarUnit.DAY, HAVANA)
    end = end_of(noon, CalendarUnit.DAY, HAVANA)
    assert end - start == pd.Timedelta(hours=25) - pd.Timedelta(seconds=1)


def test_start_of_hour_in_repeated_midnight_hour_keeps_occurrence():
    second_pass = pd.Timestamp("2024-11-03 00:30").tz_localize("America/Havana", ambiguous=False)
    start = start_of(second_pass, CalendarUnit.HOUR, HAVANA)
    assert start == pd.Timestamp("2024-11-03 00:00").tz_localize("America/Havana", ambiguous=False)


def test_end_of_has_whole_second_resolution():
    """A sub-second instant in the last second of its period lies after end_of()."""
    instant = ts("2024-02-14 12:34:59.5")
    assert end_of(instant, CalendarUnit.MINUTE) == ts("2024-02-14 12:34:59")
    assert end_of(instant, CalendarUnit.MINUTE) < instant
    assert end_of(instant, CalendarUnit.SECOND) == start_of(instant, CalendarUnit.SECOND)


@pytest.mark.parametrize("unit", [CalendarUnit.NANOSECOND, CalendarUnit.ERA, CalendarUnit.WEEKDAY_ORDINAL])
def test_unsupported_bounds_are_identity(unit):
    instant = ts("2024-02-14 15:42:07.123456789")
    assert start_of(instant, unit) == instant
    assert end_of(instant, unit) == instant


@pytest.mark.parametrize("unit", list(CalendarUnit))
@pytest.mark.parametrize("instant, calendar", GRID)
def test_instant_lies_within_its_period(instant, calendar, unit):
    assert start_of(instant, unit, calendar) <= instant <= end_of(instant, unit, calendar)


@pytest.mark.parametrize("unit", PERIOD_UNITS)
@pytest.mark.parametrize("instant, calendar", GRID)
def test_period_boundaries_stable_under_next(instant, calendar, unit):
    assert (
        start_of(next_unit(instant, unit, calendar), unit, calendar)
        == next_unit(start_of(instant, unit, calendar), unit, calendar)
    )


def test_end_of_is_one_second_before_next_start():
    for instant, unit in itertools.product(UTC_INSTANTS, PERIOD_UNITS):
        following = start_of(next_unit(instant, unit), unit)
        assert end_of(instant, unit) == following - pd.Timedelta(seconds=1)


# ============================================================================
# next_unit / previous_unit
# ============================================================================

def test_next_month_clamps_to_month_end():
    assert next_unit(ts("2024-01-31 10:00"), CalendarUnit.MONTH) == ts("2024-02-29 10:00")
    assert previous_unit(ts("2024-03-31 10:00"), CalendarUnit.MONTH) == ts("2024-02-29 10:00")


def test_next_year_from_leap_day():
    assert next_unit(ts("2024-02-29"), CalendarUnit.YEAR) == ts("2025-02-28")


def test_next_week_is_seven_days_across_month_boundary():
    assert next_unit(ts("2024-01-29 07:00"), CalendarUnit.WEEK) == ts("2024-02-05 07:00")
    assert previous_unit(ts("2024-02-05 07:00"), "week") == ts("2024-01-29 07:00")


def test_next_quarter():
    assert next_unit(ts("2024-11-30"), CalendarUnit.QUARTER) == ts("2025-02-28")


def test_next_day_keeps_wall_time_across_dst():
    saturday = ts("2024-03-30 12:00", "Europe/Amsterdam")
    sunday = next_unit(saturday, CalendarUnit.DAY, AMSTERDAM)
    assert sunday == ts("2024-03-31 12:00", "Europe/Amsterdam")
    assert sunday - saturday == pd.Timedelta(hours=23)


def test_next_hour_is_absolute_across_dst():
    before_gap = ts("2024-03-31 01:30", "Europe/Amsterdam")
    assert next_unit(before_gap, CalendarUnit.HOUR, AMSTERDAM) == ts("2024-03-31 03:30", "Europe/Amsterdam")


def test_next_week_year_clamps_week_53():
    """2020-W53 Thursday -> 2021 has only 52 weeks -> 2021-W52 Thursday."""
    result = next_unit(ts("2020-12-31 12:00"), CalendarUnit.YEAR_FOR_WEEK_OF_YEAR)
    assert result == ts("2021-12-30 12:00")
    parts = components(result)
    assert (parts.year_for_week_of_year, parts.week_of_year, parts.weekday) == (2021, 52, 4)


def test_sub_second_steps():
    instant = ts("2024-02-14 15:42:07")
    assert next_unit(instant, CalendarUnit.NANOSECOND) - instant == pd.Timedelta(nanoseconds=1)
    assert previous_unit(instant, CalendarUnit.SECOND) == ts("2024-02-14 15:42:06")


@pytest.mark.parametrize("unit", [CalendarUnit.ERA, CalendarUnit.WEEKDAY_ORDINAL])
def test_unsupported_steps_are_no_ops(unit):
    instant = ts("2024-02-14 15:42:07")
    assert next_unit(instant, unit) == instant
    assert previous_unit(instant, unit) == instant


def test_previous_undoes_next_for_fixed_units():
    for instant, unit in itertools.product(UTC_INSTANTS, ["second", "minute", "hour", "day", "week"]):
        assert previous_unit(next_unit(instant, unit), unit) == instant


# ============================================================================
# changing
# ============================================================================

@pytest.mark.parametrize("instant, calendar", GRID)
def test_changing_round_trip_truncates_to_second(instant, calendar):
    instant = instant + pd.Timedelta(nanoseconds=987654321)
    parts = components(instant, calendar)
    rebuilt = changing(instant, {
        CalendarUnit.YEAR: parts.year,
        CalendarUnit.MONTH: parts.month,
        CalendarUnit.DAY: parts.day,
        CalendarUnit.HOUR: parts.hour,
        CalendarUnit.MINUTE: parts.minute,
        CalendarUnit.SECOND: parts.second,
    }, calendar)
    assert rebuilt == start_of(instant, CalendarUnit.SECOND, calendar)


def test_changing_sets_components():
    result = changing(ts("2024-02-14 15:42:07"), {CalendarUnit.HOUR: 9, CalendarUnit.MINUTE: 5})
    assert result == ts("2024-02-14 09:05:07")


def test_changing_nanosecond_is_kept_only_when_named():
    instant = ts("2024-02-14 15:42:07.5")
    assert changing(instant, {"hour": 3}) == ts("2024-02-14 03:42:07")
    assert changing(instant, {"hour": 3, "nanosecond": 5}) == ts("2024-02-14 03:42:07.000000005")


@pytest.mark.parametrize("instant, edits, expected", [
    ("2023-02-10 08:00", {"day": 30}, "2023-03-02 08:00"),
    ("2024-02-10 08:00", {"day": 30}, "2024-03-01 08:00"),
    ("2023-05-10 08:00", {"month": 13}, "2024-01-10 08:00"),
    ("2023-05-10 08:00", {"month": 0}, "2022-12-10 08:00"),
    ("2024-03-10 08:00", {"day": 0}, "2024-02-29 08:00"),
    ("2024-03-10 15:00", {"hour": 24}, "2024-03-11 00:00"),
    ("2024-03-10 15:00", {"minute": 90}, "2024-03-10 16:30"),
    ("2024-12-31 23:59", {"second": 60}, "2025-01-01 00:00"),
])
def test_changing_overflows_invalid_dates(instant, edits, expected):
    assert changing(ts(instant), edits) == ts(expected)


def test_changing_applies_all_edits_to_one_snapshot():
    """April 31st overflows to May 1st whichever edit is listed first."""
    instant = ts("2024-01-31 10:00")
    month_first = changing(instant, {CalendarUnit.MONTH: 4, CalendarUnit.DAY: 31})
    day_first = changing(instant, {CalendarUnit.DAY: 31, CalendarUnit.MONTH: 4})
    assert month_first == day_first == ts("2024-05-01 10:00")


def test_changing_overflow_is_consistent_across_calendars():
    for calendar in (UTC, US, AMSTERDAM):
        result = changing(pd.Timestamp("2023-02-10 08:00"), {"day": 30}, calendar)
        parts = components(result, calendar)
        assert (parts.month, parts.day, parts.hour) == (3, 2, 8)


def test_changing_accepts_unit_names_and_week_alias():
    instant = ts("2024-02-14 10:00")
    assert changing(instant, {"week": 10}) == changing(instant, {CalendarUnit.WEEK_OF_YEAR: 10})


def test_changing_year_with_week_fields_uses_week_year():
    """2024-12-30 is ISO 2025-W01; {year: 2024, week: 1} means 2024-W01, not late December."""
    instant = ts("2024-12-30 08:15")
    result = changing(instant, {CalendarUnit.YEAR: 2024, CalendarUnit.WEEK: 1})
    assert result == ts("2024-01-01 08:15")
    parts = components(result)
    assert (parts.year_for_week_of_year, parts.week_of_year) == (2024, 1)


def test_changing_year_alone_uses_calendar_year():
    assert changing(ts("2024-12-30 08:15"), {CalendarUnit.YEAR: 2025}) == ts("2025-12-30 08:15")


def test_changing_weekday_moves_within_week():
    wednesday = ts("2024-02-14 10:00")
    assert changing(wednesday, {CalendarUnit.WEEKDAY: 7}) == ts("2024-02-18 10:00")
    assert changing(wednesday, {CalendarUnit.WEEKDAY: 7}, US) == ts("2024-02-11 10:00")
    assert changing(wednesday, {CalendarUnit.WEEKDAY: 1}) == ts("2024-02-12 10:00")


def test_changing_week_zero_overflows_into_previous_week_year():
    result = changing(ts("2024-02-14 10:00"), {CalendarUnit.WEEK: 0})
    assert result == ts("2023-12-27 10:00")
    assert components(result).week_of_year == 52


def test_changing_into_dst_gap_shifts_forward():
    result = changing(ts("2024-03-31 00:00", "Europe/Amsterdam"), {"hour": 2, "minute": 30}, AMSTERDAM)
    assert result == ts("2024-03-31 03:00", "Europe/Amsterdam")


def test_changing_ignores_units_without_recomposition_meaning():
    instant = ts("2024-02-14 15:42:07")
    assert changing(instant, {CalendarUnit.ERA: 2, CalendarUnit.QUARTER: 4}) == instant


def test_changing_out_of_range_returns_input():
    instant = ts("2024-02-14 15:42:07")
    assert changing(instant, {CalendarUnit.YEAR: 99999}) == instant


# ============================================================================
# precise_count / count
# ============================================================================

EPOCH = ts("1970-01-01 00:00:00")


def test_precise_count_days_from_epoch():
    later = EPOCH + pd.Timedelta(hours=36)
    assert np.isclose(precise_count(EPOCH, later, CalendarUnit.DAY), 1.5)
    assert count(EPOCH, later, CalendarUnit.DAY) == 1


def test_precise_count_month_is_calendar_based():
    """Feb 2024 has 29 days; a flat 30-day month would give ~0.97."""
    assert precise_count(ts("2024-02-01 12:00"), ts("2024-03-01 12:00"), CalendarUnit.MONTH) == 1.0


def test_precise_count_month_from_month_end():
    assert precise_count(ts("2024-01-31"), ts("2024-02-29"), "month") == 1.0
    assert precise_count(ts("2024-01-31"), ts("2024-03-31"), "month") == 2.0


def test_precise_count_partial_month():
    assert np.isclose(precise_count(ts("2024-01-01"), ts("2024-01-16"), "month"), 15 / 31)


def test_precise_count_year():
    assert precise_count(ts("2023-03-01"), ts("2024-03-01"), CalendarUnit.YEAR) == 1.0
    assert np.isclose(precise_count(ts("2024-01-01"), ts("2024-07-01"), CalendarUnit.YEAR), 182 / 366)


def test_precise_count_quarter():
    assert precise_count(ts("2024-01-15"), ts("2024-07-15"), CalendarUnit.QUARTER) == 2.0


def test_precise_count_fixed_units():
    assert np.isclose(precise_count(EPOCH, EPOCH + pd.Timedelta(days=10), "week"), 10 / 7)
    assert np.isclose(precise_count(EPOCH, EPOCH + pd.Timedelta(minutes=90), "hour"), 1.5)
    assert precise_count(EPOCH, EPOCH + pd.Timedelta(minutes=2), "second") == 120.0
    assert precise_count(EPOCH, EPOCH + pd.Timedelta(microseconds=1), "nanosecond") == 1000.0


def test_precise_count_is_negative_backwards():
    assert precise_count(ts("2024-03-01 12:00"), ts("2024-02-01 12:00"), "month") == -1.0
    assert np.isclose(precise_count(EPOCH + pd.Timedelta(hours=36), EPOCH, "day"), -1.5)


def test_count_truncates_toward_zero():
    later = EPOCH + pd.Timedelta(hours=36)
    assert count(later, EPOCH, CalendarUnit.DAY) == -1
    assert count(ts("2024-01-01"), ts("2024-02-15"), CalendarUnit.MONTH) == 1
    assert count(ts("2024-01-01"), ts("2024-12-31 23:59:59"), CalendarUnit.YEAR) == 0


def test_precise_count_day_across_dst_is_elapsed_time():
    saturday = ts("2024-03-30 12:00", "Europe/Amsterdam")
    sunday = ts("2024-03-31 12:00", "Europe/Amsterdam")
    assert np.isclose(precise_count(saturday, sunday, "day", AMSTERDAM), 23 / 24)


@pytest.mark.parametrize("unit", list(CalendarUnit))
@pytest.mark.parametrize("instant", UTC_INSTANTS)
def test_count_is_reflexive(instant, unit):
    assert count(instant, instant, unit) == 0
    assert precise_count(instant, instant, unit) == 0.0


def test_era_count_is_zero():
    assert precise_count(EPOCH, ts("2024-01-01"), CalendarUnit.ERA) == 0.0
