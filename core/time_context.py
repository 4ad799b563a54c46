"""
core/time_context.py

Wall-clock context for the assistant's home timezone.

The persona prompt states the present time in Dhaka and every reply carries a coarse
period-of-day tag. Both are derived from the same fixed timezone regardless of where
the service is hosted. The current instant is read on every call so results always
reflect "now"; a clock callable can be injected to pin the instant in tests.
"""

from datetime import datetime, tzinfo
from typing import Any, Callable, Dict, Optional
from zoneinfo import ZoneInfo

from shared.models import DayPeriod

DEFAULT_TIMEZONE = "Asia/Dhaka"
DEFAULT_LOCATION = "Dhaka, Bangladesh"

# Half-open [start, end) hour ranges; hours outside all of them are night
_PERIOD_BOUNDARIES = (
    (5, 12, DayPeriod.MORNING),
    (12, 17, DayPeriod.AFTERNOON),
    (17, 21, DayPeriod.EVENING),
)


def period_for_hour(hour: int) -> DayPeriod:
    """
    Map an hour of the day (0-23) to its period label.

    Boundaries include the lower bound and exclude the upper one:
    5-11 morning, 12-16 afternoon, 17-20 evening, everything else night.

    Args:
        hour (int): Hour of the day in 24-hour format.

    Returns:
        DayPeriod: The matching period.
    """
    for start, end, period in _PERIOD_BOUNDARIES:
        if start <= hour < end:
            return period
    return DayPeriod.NIGHT


class TimeContext:
    """
    Compute the formatted local time and the day period in a fixed timezone.

    The class holds no state besides its timezone and clock, so a single instance can be
    shared by the engine and the command layer.
    """

    def __init__(self, timezone: str = DEFAULT_TIMEZONE, location: str = DEFAULT_LOCATION, clock: Optional[Callable[[tzinfo], datetime]] = None):
        """
        Args:
            timezone (str): IANA timezone name. Defaults to Asia/Dhaka.
            location (str): Human-readable place named in the formatted time.
            clock (Optional[Callable]): Returns the current instant for a given tzinfo.
                Defaults to `datetime.now`.
        """
        self.timezone_name = timezone
        self.location = location
        self.tz = ZoneInfo(timezone)
        self._clock = clock or datetime.now

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "TimeContext":
        """
        Build a TimeContext from the `timezone` and `location` configuration keys.
        """
        return cls(
            timezone=config.get("timezone") or DEFAULT_TIMEZONE,
            location=config.get("location") or DEFAULT_LOCATION,
        )

    def now(self) -> datetime:
        return self._clock(self.tz).astimezone(self.tz)

    def formatted_time(self) -> str:
        """
        Render the current instant as a long-form sentence for the persona prompt.

        Returns:
            str: e.g. "Current time in Dhaka, Bangladesh: Monday, October 19, 2026 at 07:05 PM"
        """
        current = self.now()
        stamp = f"{current:%A, %B} {current.day}, {current.year} at {current:%I:%M %p}"
        return f"Current time in {self.location}: {stamp}"

    def day_period(self) -> DayPeriod:
        return period_for_hour(self.now().hour)
