"""Group events into day and hour buckets for the calendar views.

Events are bucketed by their ``start`` only: an event spanning several hours
(or crossing midnight) appears in the bucket of its start hour and nowhere
else. All functions return fresh lists and keep the input's relative order.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Sequence

from calendar_logic import (
    DEFAULT_CONTEXT,
    CalendarCell,
    CalendarContext,
    InvalidArgument,
    MonthGrid,
    resolve_reference,
)
from events import Event

logger = logging.getLogger(__name__)


def _check_hour(hour: int) -> None:
    if isinstance(hour, bool) or not isinstance(hour, int) or not 0 <= hour <= 23:
        raise InvalidArgument(f"Hour must be in 0..23, got {hour!r}")


def events_on_day(events: Iterable[Event], day: date | datetime | str,
                  *, context: CalendarContext | None = None) -> list[Event]:
    """Return the events whose start falls on the calendar day of ``day``."""
    ctx = context or DEFAULT_CONTEXT
    target = resolve_reference(day, ctx)
    return [ev for ev in events if ctx.day_of(ev.start) == target]


def events_in_hour(events: Iterable[Event], day: date | datetime | str, hour: int,
                   *, context: CalendarContext | None = None) -> list[Event]:
    """Return the events starting on ``day`` during hour-of-day ``hour``."""
    _check_hour(hour)
    ctx = context or DEFAULT_CONTEXT
    return [ev for ev in events_on_day(events, day, context=ctx)
            if ctx.localize(ev.start).hour == hour]


def index_events_by_day(events: Iterable[Event],
                        *, context: CalendarContext | None = None) -> dict[date, list[Event]]:
    """Return {start day: [events, ...]} in a single pass."""
    ctx = context or DEFAULT_CONTEXT
    index: dict[date, list[Event]] = {}
    inverted = 0
    for ev in events:
        if ev.is_inverted:
            inverted += 1
        index.setdefault(ctx.day_of(ev.start), []).append(ev)
    if inverted:
        logger.debug("%d event(s) end before they start; bucketed by start", inverted)
    return index


def month_events_by_date(events: Iterable[Event], grid: MonthGrid,
                         *, context: CalendarContext | None = None,
                         ) -> dict[CalendarCell, list[Event]]:
    """Map every cell of ``grid`` to its events; padding cells map to []."""
    index = index_events_by_day(events, context=context)
    result: dict[CalendarCell, list[Event]] = {}
    for cell in grid:
        if cell.is_empty:
            result[cell] = []
        else:
            result[cell] = list(index.get(cell.date, ()))
    return result


def _hour_buckets(day_events: Iterable[Event], ctx: CalendarContext) -> list[list[Event]]:
    buckets: list[list[Event]] = [[] for _ in range(24)]
    for ev in day_events:
        buckets[ctx.localize(ev.start).hour].append(ev)
    return buckets


def day_hour_buckets(events: Iterable[Event], day: date | datetime | str,
                     *, context: CalendarContext | None = None) -> list[list[Event]]:
    """Return 24 buckets (one per hour) for a day view."""
    ctx = context or DEFAULT_CONTEXT
    return _hour_buckets(events_on_day(events, day, context=ctx), ctx)


def week_hour_buckets(events: Iterable[Event], week_days: Sequence[date],
                      *, context: CalendarContext | None = None,
                      ) -> dict[date, list[list[Event]]]:
    """Return {day: 24 hour buckets} for each day of a week view."""
    ctx = context or DEFAULT_CONTEXT
    index = index_events_by_day(events, context=ctx)
    return {d: _hour_buckets(index.get(d, ()), ctx) for d in week_days}


def cell_summary(events: Sequence[Event], limit: int = 3) -> tuple[list[Event], int]:
    """Return (events to draw, number hidden behind a "+N" badge)."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise InvalidArgument(f"Invalid summary limit: {limit!r}")
    visible = list(events[:limit])
    return visible, len(events) - len(visible)
