"""Day / week / month navigation and the visible-range boundaries."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from enum import Enum

from calendar_logic import (
    DEFAULT_CONTEXT,
    CalendarContext,
    InvalidArgument,
    InvalidDate,
    days_in_month,
    next_month,
    prev_month,
    resolve_reference,
)


class ViewMode(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def parse(cls, value: "ViewMode | str") -> "ViewMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as ex:
            raise InvalidArgument(f"Unknown view mode: {value!r}") from ex


def week_start(reference: date | datetime | str,
               *, context: CalendarContext | None = None) -> date:
    """Return the first day of the week containing ``reference``."""
    ctx = context or DEFAULT_CONTEXT
    d = resolve_reference(reference, ctx)
    offset = (d.weekday() - ctx.first_weekday) % 7
    return _shift_days(d, -offset)


def week_days(reference: date | datetime | str,
              *, context: CalendarContext | None = None) -> list[date]:
    """Return the 7 dates of the week containing ``reference``."""
    start = week_start(reference, context=context)
    return [_shift_days(start, i) for i in range(7)]


def _shift_days(d: date, n: int) -> date:
    try:
        return d + timedelta(days=n)
    except OverflowError as ex:
        raise InvalidDate(f"Date out of range: {d} {n:+d} days") from ex


def _shift_months(d: date, n: int) -> date:
    year, month = d.year, d.month
    step = next_month if n > 0 else prev_month
    for _ in range(abs(n)):
        year, month = step(year, month)
    try:
        return date(year, month, min(d.day, days_in_month(year, month)))
    except ValueError as ex:
        raise InvalidDate(f"Date out of range: {year}-{month}") from ex


def step(mode: ViewMode | str, reference: date | datetime | str, delta: int = 1,
         *, context: CalendarContext | None = None) -> date:
    """Move ``delta`` days, weeks or months from ``reference``.

    Month steps keep the day-of-month, clamped to the target month's length.
    """
    mode = ViewMode.parse(mode)
    d = resolve_reference(reference, context)
    if mode is ViewMode.DAY:
        return _shift_days(d, delta)
    if mode is ViewMode.WEEK:
        return _shift_days(d, 7 * delta)
    return _shift_months(d, delta)


def visible_range(mode: ViewMode | str, reference: date | datetime | str,
                  *, context: CalendarContext | None = None) -> tuple[datetime, datetime]:
    """Return the (start, end) instants of the visible day, week or month.

    ``start`` is midnight of the first visible day and ``end`` is the
    exclusive midnight after the last one, in the context's timezone.
    """
    ctx = context or DEFAULT_CONTEXT
    mode = ViewMode.parse(mode)
    d = resolve_reference(reference, ctx)
    if mode is ViewMode.DAY:
        first, last = d, _shift_days(d, 1)
    elif mode is ViewMode.WEEK:
        first = week_start(d, context=ctx)
        last = _shift_days(first, 7)
    else:
        first = d.replace(day=1)
        last = _shift_months(first, 1)
    return ctx.midnight(first), ctx.midnight(last)
