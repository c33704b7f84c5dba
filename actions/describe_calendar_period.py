#!/usr/bin/env python3
"""
Describe the calendar period containing an instant.

**Purpose**: Command-line front end for src.dates.arithmetic. For an instant
and a unit, prints the components of the instant, the start and end of its
period, and the next/previous instants one unit away. With --until, also
prints the precise and whole count of units between the two instants.

**Usage**:
    From project root:
    ```bash
    python actions/describe_calendar_period.py 2024-02-14T15:42:07 --unit month
    python actions/describe_calendar_period.py now --unit week --timezone Europe/Amsterdam
    python actions/describe_calendar_period.py 2024-02-01T12:00 --unit month --until 2024-03-01T12:00
    ```

Calendar defaults (time zone, first weekday, week-1 rule) come from the
CALENDAR_* environment variables; --timezone and --first-weekday override them.

**Exit codes**:
  - 0: Success
  - 2: Invalid instant, unit, calendar option or settings (CALENDAR_*, LOG_*)
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from src.dates.arithmetic import count, end_of, next_unit, precise_count, previous_unit, start_of
from src.dates.calendar import Calendar, components, to_instant
from src.dates.units import CalendarUnit
from src.utils.log import configure_logging
from src.utils.time import Clock, RealClock


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Describe the calendar period containing an instant.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("instant", type=str, help="ISO-8601 instant, or 'now'.")
    parser.add_argument(
        "--unit",
        type=str,
        default="day",
        help=f"Calendar unit. One of: {', '.join(unit.value for unit in CalendarUnit)}. Default: day.",
    )
    parser.add_argument("--until", type=str, default=None, help="Second instant to count units up to.")
    parser.add_argument("--timezone", type=str, default=None, help="IANA time zone (overrides CALENDAR_TIMEZONE).")
    parser.add_argument(
        "--first-weekday",
        type=int,
        default=None,
        help="First day of the week, 0=Monday ... 6=Sunday (overrides CALENDAR_FIRST_WEEKDAY).",
    )
    return parser


def describe(instant, unit: CalendarUnit, calendar: Calendar, until=None) -> Dict[str, str]:
    """
    Compute the period description for an instant.

    Returns:
        Ordered mapping of label -> rendered value.
    """
    instant = to_instant(instant, calendar)
    parts = components(instant, calendar)
    report = {
        "instant": instant.isoformat(),
        "unit": unit.value,
        "weekday": str(parts.weekday),
        "week": f"{parts.year_for_week_of_year}-W{parts.week_of_year:02d}",
        "start": start_of(instant, unit, calendar).isoformat(),
        "end": end_of(instant, unit, calendar).isoformat(),
        "next": next_unit(instant, unit, calendar).isoformat(),
        "previous": previous_unit(instant, unit, calendar).isoformat(),
    }
    if until is not None:
        report["precise_count"] = f"{precise_count(instant, until, unit, calendar):.6f}"
        report["count"] = str(count(instant, until, unit, calendar))
    return report


def main(argv: Optional[List[str]] = None, clock: Optional[Clock] = None) -> int:
    """
    Main entrypoint for the calendar period action.

    Returns:
        Process exit code (0 on success, 2 on invalid input).
    """
    args = build_parser().parse_args(argv)
    clock = clock or RealClock()

    try:
        configure_logging()
        unit = CalendarUnit.parse(args.unit)
        calendar = Calendar.from_settings()
        if args.timezone is not None:
            calendar = replace(calendar, timezone=args.timezone)
        if args.first_weekday is not None:
            calendar = replace(calendar, first_weekday=args.first_weekday)
        instant = clock.now() if args.instant == "now" else to_instant(args.instant, calendar)
        until = None if args.until is None else to_instant(args.until, calendar)
        report = describe(instant, unit, calendar, until)
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    width = max(len(label) for label in report)
    for label, value in report.items():
        print(f"{label:<{width}}  {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
