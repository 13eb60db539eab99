"""Pure calendar calculations — no UI dependencies.

Everything here takes an explicit :class:`CalendarContext` (timezone and first
weekday) instead of reading ambient globals, so the same inputs always produce
the same month grid.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, time, tzinfo
from typing import Iterator

DAY_ABBR = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
DAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

SUNDAY = calendar.SUNDAY
MONDAY = calendar.MONDAY


class CalendarError(ValueError):
    """Base class for calendar computation errors."""


class InvalidDate(CalendarError):
    """A reference could not be resolved to a calendar month/day."""


class InvalidArgument(CalendarError):
    """An argument is outside its allowed range or malformed."""


def parse_weekday(value: int | str) -> int:
    """Return a weekday index (0=Monday … 6=Sunday).

    Accepts an int in range or an English day name / three-letter abbreviation.
    """
    if isinstance(value, bool):
        raise InvalidArgument(f"Invalid first weekday: {value!r}")
    if isinstance(value, int):
        if 0 <= value <= 6:
            return value
        raise InvalidArgument(f"Invalid first weekday: {value!r}")
    if isinstance(value, str):
        key = value.strip().lower()
        for idx, name in enumerate(DAY_NAMES):
            if key == name or key == name[:3]:
                return idx
    raise InvalidArgument(f"Invalid first weekday: {value!r}")


@dataclass(frozen=True)
class CalendarContext:
    """Timezone and week layout every computation is evaluated in.

    ``tz=None`` means timestamps are taken as naive wall-clock values.
    Aware timestamps are converted into ``tz`` before their day or hour is read.
    With ``local=True`` they are converted into the system timezone, whose
    offset is looked up per timestamp so DST changes are honoured.
    """

    tz: tzinfo | None = None
    first_weekday: int = SUNDAY
    local: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "first_weekday", parse_weekday(self.first_weekday))
        if self.local and self.tz is not None:
            raise InvalidArgument("A local context cannot also carry a fixed tz")

    def localize(self, ts: datetime) -> datetime:
        """Express ``ts`` in this context's timezone."""
        if ts.tzinfo is None:
            return ts
        if self.local:
            return ts.astimezone()
        if self.tz is None:
            return ts
        return ts.astimezone(self.tz)

    def midnight(self, d: date) -> datetime:
        """Start of day ``d``; aware unless the context is naive."""
        start = datetime.combine(d, time(0), tzinfo=self.tz)
        return start.astimezone() if self.local else start

    def day_of(self, value: date | datetime) -> date:
        """Return the calendar day of a date or timestamp."""
        if isinstance(value, datetime):
            return self.localize(value).date()
        if isinstance(value, date):
            return value
        raise InvalidDate(f"Not a date or timestamp: {value!r}")


DEFAULT_CONTEXT = CalendarContext()


def resolve_reference(reference: date | datetime | str,
                      context: CalendarContext | None = None) -> date:
    """Resolve a date, timestamp or ISO string to a calendar day."""
    ctx = context or DEFAULT_CONTEXT
    if isinstance(reference, str):
        text = reference.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return ctx.day_of(datetime.fromisoformat(text))
        except ValueError as ex:
            raise InvalidDate(f"Unparseable date: {reference!r}") from ex
    return ctx.day_of(reference)


def same_day(a: date | datetime, b: date | datetime,
             context: CalendarContext | None = None) -> bool:
    """True when both values fall on the same calendar day of ``context``."""
    ctx = context or DEFAULT_CONTEXT
    return ctx.day_of(a) == ctx.day_of(b)


def days_in_month(year: int, month: int) -> int:
    """Return 28–31, leap-year aware."""
    try:
        return calendar.monthrange(year, month)[1]
    except (calendar.IllegalMonthError, ValueError) as ex:
        raise InvalidDate(f"Invalid month: {year}-{month}") from ex


# ------------------------------------------------------------------
# Month grid
# ------------------------------------------------------------------
@dataclass(frozen=True)
class CalendarCell:
    """One slot in a month grid; ``date`` is None for padding cells."""

    index: int
    date: date | None = None

    @property
    def is_empty(self) -> bool:
        return self.date is None

    @property
    def row(self) -> int:
        return self.index // 7

    @property
    def column(self) -> int:
        return self.index % 7


@dataclass(frozen=True)
class MonthGrid:
    """Weekday-aligned cells for one month, always complete weeks."""

    year: int
    month: int
    first_weekday: int
    cells: tuple[CalendarCell, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[CalendarCell]:
        return iter(self.cells)

    def __getitem__(self, index: int) -> CalendarCell:
        return self.cells[index]

    @property
    def leading_padding(self) -> int:
        """Number of empty cells before day 1."""
        for cell in self.cells:
            if not cell.is_empty:
                return cell.index
        return len(self.cells)

    def rows(self) -> list[tuple[CalendarCell, ...]]:
        return [self.cells[i:i + 7] for i in range(0, len(self.cells), 7)]

    def dated_cells(self) -> list[CalendarCell]:
        return [c for c in self.cells if not c.is_empty]

    def contains(self, d: date) -> bool:
        return d.year == self.year and d.month == self.month

    def cell_for(self, d: date) -> CalendarCell | None:
        """Return the cell showing ``d``, or None if it is outside the month."""
        if not self.contains(d):
            return None
        return self.cells[self.leading_padding + d.day - 1]


def build_month_grid(reference: date | datetime | str,
                     first_weekday: int | str | None = None,
                     *,
                     context: CalendarContext | None = None,
                     fixed_rows: bool = False) -> MonthGrid:
    """Return the padded cell grid for the month containing ``reference``.

    ``first_weekday`` defaults to the context's (Sunday unless configured).
    With ``fixed_rows`` the grid is padded to 6 rows so its height stays
    constant across months.
    """
    ctx = context or DEFAULT_CONTEXT
    fw = ctx.first_weekday if first_weekday is None else parse_weekday(first_weekday)
    ref = resolve_reference(reference, ctx)

    cal = calendar.Calendar(firstweekday=fw)
    cells: list[CalendarCell] = []
    for idx, day in enumerate(cal.itermonthdays(ref.year, ref.month)):
        cells.append(CalendarCell(idx, date(ref.year, ref.month, day) if day else None))
    if fixed_rows:
        while len(cells) < 42:
            cells.append(CalendarCell(len(cells)))
    return MonthGrid(ref.year, ref.month, fw, tuple(cells))


def prev_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month earlier."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month later."""
    if month == 12:
        return year + 1, 1
    return year, month + 1
