"""Pytest configuration and shared fixtures."""

import os
import time
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from calendar_logic import CalendarContext, SUNDAY
from events import Event, EventColor, sample_events


@pytest.fixture
def utc_context():
    return CalendarContext(tz=timezone.utc, first_weekday=SUNDAY)


@pytest.fixture
def june_events():
    """50 naive events spread over 3–7 June 2024, every 7th inverted."""
    return sample_events(date(2024, 6, 3), count=50, days=5, inverted_every=7)


@pytest.fixture
def late_event():
    """Starts at 23:59 and ends the next day at 00:30."""
    return Event(
        start=datetime(2024, 6, 15, 23, 59),
        end=datetime(2024, 6, 16, 0, 30),
        label="Late",
        color=EventColor.RED,
        id="late",
    )


@pytest.fixture
def inverted_event():
    start = datetime(2024, 6, 15, 10, 0)
    return Event(start=start, end=start - timedelta(hours=2), label="Inverted", id="inv")


@pytest.fixture
def berlin():
    """Europe/Berlin: CET (+01:00) in winter, CEST (+02:00) from 31 March 2024."""
    try:
        return ZoneInfo("Europe/Berlin")
    except ZoneInfoNotFoundError:
        pytest.skip("tz database not available")


@pytest.fixture
def berlin_local(berlin):
    """Run the test with the process-local timezone set to Europe/Berlin."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    old = os.environ.get("TZ")
    os.environ["TZ"] = "Europe/Berlin"
    time.tzset()
    yield berlin
    if old is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = old
    time.tzset()
