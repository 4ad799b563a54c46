"""
Tests for `core/time_context.py` using pytest.

Focus:
- Day-period boundaries for every hour of the day
- Conversion of the current instant into the fixed Asia/Dhaka timezone
- The long-form time sentence used in the persona prompt

The clock is injected so no test depends on when it runs.
"""

from datetime import datetime, timezone

import pytest

from conftest import fixed_clock
from core.time_context import TimeContext, period_for_hour
from shared.models import DayPeriod


@pytest.mark.parametrize(
    "hour, expected",
    [
        (4, DayPeriod.NIGHT),
        (5, DayPeriod.MORNING),
        (11, DayPeriod.MORNING),
        (12, DayPeriod.AFTERNOON),
        (16, DayPeriod.AFTERNOON),
        (17, DayPeriod.EVENING),
        (20, DayPeriod.EVENING),
        (21, DayPeriod.NIGHT),
        (0, DayPeriod.NIGHT),
        (23, DayPeriod.NIGHT),
    ],
)
def test_period_boundaries(hour, expected):
    assert period_for_hour(hour) is expected


def test_every_hour_has_exactly_one_period():
    periods = [period_for_hour(hour) for hour in range(24)]
    assert all(isinstance(period, DayPeriod) for period in periods)
    assert periods.count(DayPeriod.MORNING) == 7
    assert periods.count(DayPeriod.AFTERNOON) == 5
    assert periods.count(DayPeriod.EVENING) == 4
    assert periods.count(DayPeriod.NIGHT) == 8


def test_day_period_uses_dhaka_hour_not_utc():
    """
    06:30 UTC is 12:30 in Dhaka (UTC+6), so the period is afternoon rather than morning.
    """
    utc_instant = datetime(2026, 10, 19, 6, 30, tzinfo=timezone.utc)
    context = TimeContext(clock=lambda tz: utc_instant)

    assert context.now().hour == 12
    assert context.day_period() is DayPeriod.AFTERNOON


def test_formatted_time_is_long_form_twelve_hour():
    context = TimeContext(clock=fixed_clock(19, 5))

    assert context.formatted_time() == (
        "Current time in Dhaka, Bangladesh: Monday, October 19, 2026 at 07:05 PM"
    )


def test_formatted_time_reflects_clock_on_each_call():
    instants = iter([
        datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc),
        datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc),
    ])
    context = TimeContext(clock=lambda tz: next(instants))

    first = context.formatted_time()
    second = context.formatted_time()

    assert first.endswith("02:00 PM")
    assert second.endswith("03:00 PM")


def test_from_config_uses_configured_timezone_and_location():
    context = TimeContext.from_config({"timezone": "Europe/London", "location": "London, UK"})

    assert context.tz.key == "Europe/London"
    assert context.formatted_time().startswith("Current time in London, UK: ")


def test_from_config_defaults_to_dhaka():
    context = TimeContext.from_config({})

    assert context.timezone_name == "Asia/Dhaka"
    assert context.location == "Dhaka, Bangladesh"
