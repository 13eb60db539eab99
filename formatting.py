"""Display labels for dates and times.

Plain functions over fixed English name tables; the timezone comes from the
context passed in, never from a shared formatter object.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from calendar_logic import DAY_ABBR, DEFAULT_CONTEXT, CalendarContext, InvalidArgument

MONTH_NAMES = ["", "January", "February", "March", "April", "May", "June",
               "July", "August", "September", "October", "November", "December"]
MONTH_ABBR = ["", "Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def _day(value: date | datetime, context: CalendarContext | None) -> date:
    return (context or DEFAULT_CONTEXT).day_of(value)


def format_day(value: date | datetime, context: CalendarContext | None = None) -> str:
    """Two-digit day of month, e.g. ``"05"``."""
    return f"{_day(value, context).day:02d}"


def format_weekday(value: date | datetime, context: CalendarContext | None = None) -> str:
    return DAY_ABBR[_day(value, context).weekday()]


def format_weekday_date(value: date | datetime, context: CalendarContext | None = None) -> str:
    """e.g. ``"Sat, Jun 15, 2024"``."""
    d = _day(value, context)
    return f"{DAY_ABBR[d.weekday()]}, {MONTH_ABBR[d.month]} {d.day}, {d.year}"


def format_month_year(value: date | datetime, context: CalendarContext | None = None) -> str:
    d = _day(value, context)
    return f"{MONTH_NAMES[d.month]} {d.year}"


def format_short(value: date | datetime, context: CalendarContext | None = None) -> str:
    """e.g. ``"15 Jun"``."""
    d = _day(value, context)
    return f"{d.day} {MONTH_ABBR[d.month]}"


def format_full(value: date | datetime, context: CalendarContext | None = None) -> str:
    """e.g. ``"15-06-2024 09:30"``; plain dates show midnight."""
    ctx = context or DEFAULT_CONTEXT
    if isinstance(value, datetime):
        ts = ctx.localize(value)
        hh, mm = ts.hour, ts.minute
    else:
        hh = mm = 0
    d = ctx.day_of(value)
    return f"{d.day:02d}-{d.month:02d}-{d.year} {hh:02d}:{mm:02d}"


def format_week_range(start: date | datetime, context: CalendarContext | None = None) -> str:
    """Label for a 7-day week starting at ``start``, e.g. ``"10 Jun - 16 Jun"``."""
    d = _day(start, context)
    return f"{format_short(d)} - {format_short(d + timedelta(days=6))}"


def format_hour(hour: int) -> str:
    if isinstance(hour, bool) or not isinstance(hour, int) or not 0 <= hour <= 23:
        raise InvalidArgument(f"Hour must be in 0..23, got {hour!r}")
    return f"{hour:02d}"
