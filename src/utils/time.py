"""
Wall-clock sources for "now".

Calendar helpers that ask questions relative to the present ("is this date
today?", "is it in the past?") take a Clock instead of reading the system
time themselves. Production code passes a RealClock; tests pass a FrozenClock
pinned to a known instant, which keeps every such check deterministic.
"""

from datetime import datetime
from typing import Protocol, Union

import pandas as pd

InstantLike = Union[pd.Timestamp, datetime, str]


class Clock(Protocol):
    """
    Abstract time source protocol.

    **Usage**: Accept a Clock (as a function parameter or constructor argument)
    and call clock.now() wherever the current time is needed.

    **Example**:
        def is_overdue(deadline, clock: Clock) -> bool:
            return clock.now() > deadline

        is_overdue(deadline, RealClock())
        is_overdue(deadline, FrozenClock("2024-01-05T09:00:00Z"))
    """

    def now(self) -> pd.Timestamp:
        """
        Return the current time according to this clock.

        Returns:
            Timezone-aware pd.Timestamp in UTC.
        """
        ...


class RealClock:
    """Clock that reads the system time (UTC, nanosecond resolution)."""

    def now(self) -> pd.Timestamp:
        return pd.Timestamp.now(tz="UTC")


class FrozenClock:
    """
    Clock that always returns a fixed instant.

    **Usage**:
        clock = FrozenClock("2015-01-05 12:30:00")
        clock.now()  # Timestamp('2015-01-05 12:30:00+0000', tz='UTC')
    """

    def __init__(self, fixed_now: InstantLike):
        """
        Initialize a FrozenClock with a fixed instant.

        Args:
            fixed_now: The instant to return on every call to now(). Naive
                       values are taken to be UTC; aware values are converted
                       to UTC.
        """
        instant = pd.Timestamp(fixed_now)
        if instant.tzinfo is None:
            instant = instant.tz_localize("UTC")
        self._fixed_now = instant.tz_convert("UTC")

    def now(self) -> pd.Timestamp:
        return self._fixed_now


def get_real_clock() -> Clock:
    """Factory function to create a RealClock instance."""
    return RealClock()


def get_frozen_clock(fixed_now: InstantLike) -> Clock:
    """
    Factory function to create a FrozenClock with a given instant.

    Args:
        fixed_now: The instant to freeze at (naive values are UTC).

    Returns:
        FrozenClock instance configured with fixed_now.
    """
    return FrozenClock(fixed_now)
