"""Tests for day / hour / month event bucketing."""

from datetime import date, datetime, timedelta, timezone

import pytest

from calendar_logic import SUNDAY, CalendarContext, InvalidArgument, InvalidDate, build_month_grid
from event_buckets import (
    cell_summary,
    day_hour_buckets,
    events_in_hour,
    events_on_day,
    index_events_by_day,
    month_events_by_date,
    week_hour_buckets,
)
from events import Event
from navigation import week_days
from settings import context_from_settings, default_settings


def test_events_on_day_keeps_input_order(june_events):
    day = events_on_day(june_events, date(2024, 6, 4))
    assert [ev.id for ev in day] == [f"evt-{i:03d}" for i in range(11, 21)]


def test_events_on_day_is_idempotent(june_events):
    once = events_on_day(june_events, date(2024, 6, 5))
    twice = events_on_day(once, date(2024, 6, 5))
    assert once == twice
    assert once is not twice


def test_events_on_day_accepts_timestamp(june_events):
    assert events_on_day(june_events, datetime(2024, 6, 3, 18, 0)) == events_on_day(
        june_events, date(2024, 6, 3))


def test_events_on_day_empty_results(june_events):
    assert events_on_day([], date(2024, 6, 3)) == []
    assert events_on_day(june_events, date(2024, 7, 3)) == []


def test_day_accepts_iso_strings(june_events):
    assert events_on_day(june_events, "2024-06-03") == events_on_day(june_events, date(2024, 6, 3))
    assert events_in_hour(june_events, "2024-06-03", 0) == events_in_hour(
        june_events, date(2024, 6, 3), 0)
    assert len(day_hour_buckets(june_events, "2024-06-03T12:00:00")[0]) == 1


@pytest.mark.parametrize("bad", ["2024-06-31", "tomorrow", None, 3])
def test_events_on_day_rejects_bad_day(june_events, bad):
    with pytest.raises(InvalidDate):
        events_on_day(june_events, bad)


def test_mixed_awareness_event_is_rejected_before_bucketing():
    with pytest.raises(InvalidDate):
        Event.from_dict({"start": "2024-06-15T10:00:00+00:00", "end": "2024-06-15T11:00:00"})
    with pytest.raises(InvalidDate):
        Event(start=datetime(2024, 6, 15, 10), end=datetime(2024, 6, 15, 11, tzinfo=timezone.utc))


def test_events_in_hour_is_subset_of_day(june_events):
    day = date(2024, 6, 3)
    on_day = events_on_day(june_events, day)
    seen = []
    for hour in range(24):
        bucket = events_in_hour(june_events, day, hour)
        assert all(ev in on_day for ev in bucket)
        assert all(ev.start.hour == hour for ev in bucket)
        seen.extend(bucket)
    assert sorted(ev.id for ev in seen) == sorted(ev.id for ev in on_day)


@pytest.mark.parametrize("hour", [-1, 24, 100, 1.5, "3", True, None])
def test_events_in_hour_rejects_bad_hour(june_events, hour):
    with pytest.raises(InvalidArgument):
        events_in_hour(june_events, date(2024, 6, 3), hour)


def test_event_bucketed_by_start_only(late_event):
    events = [late_event]
    assert events_on_day(events, date(2024, 6, 15)) == [late_event]
    assert events_on_day(events, date(2024, 6, 16)) == []
    assert events_in_hour(events, date(2024, 6, 15), 23) == [late_event]
    assert events_in_hour(events, date(2024, 6, 16), 0) == []


def test_multi_hour_event_not_duplicated():
    ev = Event(start=datetime(2024, 6, 15, 9, 15), end=datetime(2024, 6, 15, 12, 0), id="long")
    buckets = day_hour_buckets([ev], date(2024, 6, 15))
    assert buckets[9] == [ev]
    assert buckets[10] == [] and buckets[11] == [] and buckets[12] == []


def test_inverted_event_bucketed_by_start(inverted_event):
    assert inverted_event.is_inverted
    assert events_on_day([inverted_event], date(2024, 6, 15)) == [inverted_event]
    assert events_in_hour([inverted_event], date(2024, 6, 15), 10) == [inverted_event]
    assert events_in_hour([inverted_event], date(2024, 6, 15), 8) == []


def test_month_partition_of_sample_events(june_events):
    grid = build_month_grid(date(2024, 6, 15), SUNDAY)
    by_cell = month_events_by_date(june_events, grid)
    assert set(by_cell) == set(grid.cells)
    non_empty = [cell for cell, evs in by_cell.items() if evs]
    assert len(non_empty) <= 5
    assert {cell.date for cell in non_empty} == {date(2024, 6, d) for d in range(3, 8)}
    assert sum(len(evs) for evs in by_cell.values()) == 50
    for cell in grid:
        if cell.is_empty:
            assert by_cell[cell] == []


def test_month_excludes_other_months():
    events = [
        Event(start=datetime(2024, 5, 31, 10), end=datetime(2024, 5, 31, 11), id="may"),
        Event(start=datetime(2024, 6, 1, 10), end=datetime(2024, 6, 1, 11), id="june"),
    ]
    grid = build_month_grid(date(2024, 6, 15), SUNDAY)
    by_cell = month_events_by_date(events, grid)
    assert [ev.id for evs in by_cell.values() for ev in evs] == ["june"]


def test_month_events_match_events_on_day(june_events):
    grid = build_month_grid(date(2024, 6, 15), SUNDAY)
    by_cell = month_events_by_date(june_events, grid)
    for cell in grid.dated_cells():
        assert by_cell[cell] == events_on_day(june_events, cell.date)


def test_aware_events_use_context_day():
    # 01:30 UTC is still the previous evening at -05:00
    ev = Event(start=datetime(2024, 6, 16, 1, 30, tzinfo=timezone.utc),
               end=datetime(2024, 6, 16, 2, 30, tzinfo=timezone.utc), id="tz")
    ctx = CalendarContext(tz=timezone(timedelta(hours=-5)))
    assert events_on_day([ev], date(2024, 6, 15), context=ctx) == [ev]
    assert events_in_hour([ev], date(2024, 6, 15), 20, context=ctx) == [ev]
    assert events_on_day([ev], date(2024, 6, 16), context=ctx) == []


def test_index_events_by_day(june_events):
    index = index_events_by_day(june_events)
    assert sorted(index) == [date(2024, 6, d) for d in range(3, 8)]
    assert all(len(evs) == 10 for evs in index.values())


def test_week_hour_buckets(june_events):
    days = week_days(date(2024, 6, 5))
    buckets = week_hour_buckets(june_events, days)
    assert list(buckets) == days
    assert all(len(hours) == 24 for hours in buckets.values())
    assert sum(len(b) for hours in buckets.values() for b in hours) == 50


def test_cell_summary():
    events = [Event(start=datetime(2024, 6, 1, h), end=datetime(2024, 6, 1, h, 30), id=str(h))
              for h in range(5)]
    visible, hidden = cell_summary(events)
    assert [ev.id for ev in visible] == ["0", "1", "2"]
    assert hidden == 2
    assert cell_summary(events[:2]) == (events[:2], 0)
    with pytest.raises(InvalidArgument):
        cell_summary(events, -1)


def _utc_event(y, m, d, hh, mm, ident):
    start = datetime(y, m, d, hh, mm, tzinfo=timezone.utc)
    return Event(start=start, end=start + timedelta(minutes=30), id=ident)


def test_bucketing_follows_dst_in_iana_zone(berlin):
    ctx = CalendarContext(tz=berlin)
    before = _utc_event(2024, 3, 30, 22, 30, "before")   # 23:30 CET, 30 March
    after = _utc_event(2024, 3, 31, 21, 30, "after")     # 23:30 CEST, 31 March
    crossing = _utc_event(2024, 3, 31, 22, 30, "cross")  # 00:30 CEST, 1 April
    winter = _utc_event(2024, 12, 15, 22, 30, "winter")  # 23:30 CET, 15 December
    events = [before, after, crossing, winter]

    assert events_on_day(events, date(2024, 3, 30), context=ctx) == [before]
    assert events_on_day(events, date(2024, 3, 31), context=ctx) == [after]
    assert events_on_day(events, date(2024, 4, 1), context=ctx) == [crossing]
    assert events_in_hour(events, date(2024, 3, 31), 23, context=ctx) == [after]
    assert events_in_hour(events, date(2024, 4, 1), 0, context=ctx) == [crossing]
    assert events_in_hour(events, date(2024, 12, 15), 23, context=ctx) == [winter]
    assert day_hour_buckets(events, date(2024, 3, 31), context=ctx)[23] == [after]

    grid = build_month_grid(date(2024, 3, 1), SUNDAY, context=ctx)
    by_cell = month_events_by_date(events, grid, context=ctx)
    assert by_cell[grid.cell_for(date(2024, 3, 30))] == [before]
    assert by_cell[grid.cell_for(date(2024, 3, 31))] == [after]
    assert sum(len(evs) for evs in by_cell.values()) == 2


def test_local_context_offset_is_per_timestamp(berlin_local):
    ctx = context_from_settings(default_settings())
    assert ctx.local
    winter = _utc_event(2024, 12, 15, 22, 30, "winter")  # 23:30 CET
    summer = _utc_event(2024, 6, 15, 22, 30, "summer")   # 00:30 CEST next day
    events = [winter, summer]
    assert events_on_day(events, date(2024, 12, 15), context=ctx) == [winter]
    assert events_in_hour(events, date(2024, 12, 15), 23, context=ctx) == [winter]
    assert events_on_day(events, date(2024, 6, 16), context=ctx) == [summer]
    assert events_in_hour(events, date(2024, 6, 16), 0, context=ctx) == [summer]
