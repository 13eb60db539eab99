"""Timed event model and deterministic sample data."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum

from calendar_logic import InvalidArgument, InvalidDate


class EventColor(Enum):
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"
    BLACK = "black"

    @property
    def default_hex(self) -> str:
        return _DEFAULT_HEX[self]

    @classmethod
    def parse(cls, value: "EventColor | str") -> "EventColor":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as ex:
            raise InvalidArgument(f"Unknown event color: {value!r}") from ex


_DEFAULT_HEX = {
    EventColor.GREEN: "#4CAF50",
    EventColor.YELLOW: "#FFD700",
    EventColor.ORANGE: "#FF9800",
    EventColor.RED: "#FF0000",
    EventColor.BLACK: "#000000",
}


def _is_aware(ts: datetime) -> bool:
    return ts.tzinfo is not None and ts.utcoffset() is not None


@dataclass(frozen=True)
class Event:
    """A timed event.

    ``start <= end`` is not enforced: historical data contains inverted
    ranges, and those are bucketed by ``start`` alone.
    """

    start: datetime
    end: datetime
    label: str = ""
    color: EventColor = EventColor.GREEN
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        if not isinstance(self.start, datetime) or not isinstance(self.end, datetime):
            raise InvalidDate(f"Event {self.id}: start and end must be timestamps")
        # Aware and naive timestamps cannot be compared or bucketed together
        if _is_aware(self.start) != _is_aware(self.end):
            raise InvalidDate(f"Event {self.id}: start and end mix aware and naive timestamps")

    @property
    def is_inverted(self) -> bool:
        return self.end < self.start

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        """Build an event from a JSON-style dict with ISO timestamps."""
        try:
            start = datetime.fromisoformat(data["start"])
            end = datetime.fromisoformat(data.get("end") or data["start"])
        except (KeyError, TypeError, ValueError) as ex:
            raise InvalidDate(f"Invalid event timestamps: {data!r}") from ex
        kwargs = {}
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        return cls(
            start=start,
            end=end,
            label=str(data.get("label", "")),
            color=EventColor.parse(data.get("color", "green")),
            **kwargs,
        )


_COLORS = list(EventColor)


def sample_events(anchor: date | datetime, count: int = 50, days: int = 5,
                  *, inverted_every: int = 0, tz: tzinfo | None = None) -> list[Event]:
    """Return ``count`` events spread evenly over ``days`` days from ``anchor``.

    Colours cycle through :class:`EventColor`. When ``inverted_every`` is set,
    every Nth event ends 30 minutes before it starts.
    """
    if count < 0 or days < 1:
        raise InvalidArgument(f"Invalid sample size: count={count}, days={days}")
    if isinstance(anchor, datetime):
        tz = tz or anchor.tzinfo
        anchor = anchor.date()

    per_day = max(1, -(-count // days))
    step = timedelta(minutes=24 * 60 // per_day)
    events: list[Event] = []
    for i in range(count):
        day = anchor + timedelta(days=i // per_day)
        start = datetime.combine(day, time(0), tzinfo=tz) + step * (i % per_day)
        end = start + timedelta(minutes=45)
        if inverted_every and (i + 1) % inverted_every == 0:
            end = start - timedelta(minutes=30)
        events.append(Event(
            start=start,
            end=end,
            label=f"Event {i + 1}",
            color=_COLORS[i % len(_COLORS)],
            id=f"evt-{i + 1:03d}",
        ))
    return events
