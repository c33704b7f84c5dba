"""
chronoscan – Main entry point.

Minimal bootstrap script that loads settings and prints the configured
calendar and the start of the current week, to verify the project is wired up.
"""

from src.config.settings import get_settings
from src.dates.arithmetic import start_of
from src.dates.calendar import Calendar
from src.utils.log import configure_logging
from src.utils.time import RealClock


def main() -> None:
    """Print a bootstrap confirmation message."""
    settings = get_settings()
    configure_logging(settings.logging)
    calendar = Calendar.from_settings(settings.calendar)
    week_start = start_of(RealClock().now(), "week", calendar)
    print(f"chronoscan bootstrap complete (timezone={calendar.timezone}, week starts {week_start.date()})")


if __name__ == "__main__":
    main()
