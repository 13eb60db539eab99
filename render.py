"""Draw day / week / month views into a PIL Image (in-memory)."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Mapping

from PIL import Image, ImageColor, ImageDraw, ImageFont

from calendar_logic import DAY_ABBR, DEFAULT_CONTEXT, CalendarContext, build_month_grid, resolve_reference
from event_buckets import cell_summary, day_hour_buckets, month_events_by_date, week_hour_buckets
from events import Event, EventColor
from formatting import (
    format_day,
    format_hour,
    format_month_year,
    format_week_range,
    format_weekday,
    format_weekday_date,
)
from navigation import ViewMode, week_days

logger = logging.getLogger(__name__)

# Colours
HEADER_BG = "#F3F3F3"
GRID_BG = "white"
GRID_LINE = "#DDDDDD"
TEXT_FG = "#333333"
MUTED_FG = "#888888"

CELL_SIZE = 48
MONTH_DOTS = 3
DAY_COLUMN_SPAN = 6  # day view column is this many cells wide


# ------------------------------------------------------------------
# Layout
# ------------------------------------------------------------------
def header_height(cell_size: int = CELL_SIZE) -> int:
    return max(14, cell_size // 2)


def row_height(cell_size: int = CELL_SIZE) -> int:
    """Height of one hour row in day and week views."""
    return max(12, cell_size // 2)


def month_cell_box(index: int, cell_size: int = CELL_SIZE) -> tuple[int, int, int, int]:
    """Pixel box (x0, y0, x1, y1) of month-grid cell ``index``."""
    col, row = index % 7, index // 7
    x0 = col * cell_size
    y0 = 2 * header_height(cell_size) + row * cell_size
    return x0, y0, x0 + cell_size, y0 + cell_size


def hour_cell_box(column: int, hour: int, cell_size: int = CELL_SIZE,
                  column_width: int | None = None) -> tuple[int, int, int, int]:
    """Pixel box of an hour slot; column 0 starts right of the hour labels."""
    width = column_width or cell_size
    x0 = cell_size + column * width
    y0 = 2 * header_height(cell_size) + hour * row_height(cell_size)
    return x0, y0, x0 + width, y0 + row_height(cell_size)


def dot_radius(box: tuple[int, int, int, int]) -> int:
    return max(2, min(box[2] - box[0], box[3] - box[1]) // 12)


def dot_center(box: tuple[int, int, int, int], k: int) -> tuple[int, int]:
    """Centre of the k-th event dot, laid out left to right along the bottom."""
    r = dot_radius(box)
    return box[0] + 4 + r + k * (2 * r + 3), box[3] - r - 3


def _dot_capacity(box: tuple[int, int, int, int]) -> int:
    r = dot_radius(box)
    return max(1, (box[2] - box[0] - 8) // (2 * r + 3))


# ------------------------------------------------------------------
# Drawing helpers
# ------------------------------------------------------------------
def _resolve_colors(colors: Mapping[str, str] | None) -> dict[EventColor, tuple]:
    out = {}
    for c in EventColor:
        value = (colors or {}).get(c.value, c.default_hex)
        try:
            out[c] = ImageColor.getrgb(value)
        except ValueError:
            logger.warning("Invalid colour %r for %s; using default", value, c.value)
            out[c] = ImageColor.getrgb(c.default_hex)
    return out


def _draw_dots(draw: ImageDraw.ImageDraw, box: tuple[int, int, int, int],
               events: list[Event], limit: int, palette: dict, font) -> None:
    visible, hidden = cell_summary(events, limit)
    r = dot_radius(box)
    for k, ev in enumerate(visible):
        cx, cy = dot_center(box, k)
        draw.ellipse((cx - r, cy - r, cx + r, cy + r), fill=palette[ev.color])
    if hidden:
        cx, cy = dot_center(box, len(visible))
        draw.text((cx - r, cy - r - 4), f"+{hidden}", fill=MUTED_FG, font=font)


def _header(draw: ImageDraw.ImageDraw, width: int, text: str, cell_size: int, font) -> None:
    h = header_height(cell_size)
    draw.rectangle((0, 0, width - 1, h - 1), fill=HEADER_BG)
    bbox = draw.textbbox((0, 0), text, font=font)
    x = (width - (bbox[2] - bbox[0])) / 2 - bbox[0]
    y = (h - (bbox[3] - bbox[1])) / 2 - bbox[1]
    draw.text((x, y), text, fill=TEXT_FG, font=font)


def _hour_labels(draw: ImageDraw.ImageDraw, cell_size: int, font) -> None:
    for hour in range(24):
        y0 = hour_cell_box(0, hour, cell_size)[1]
        draw.text((4, y0 + 2), format_hour(hour), fill=MUTED_FG, font=font)


# ------------------------------------------------------------------
# Views
# ------------------------------------------------------------------
def render_month(reference: date | datetime | str, events: Iterable[Event],
                 *, context: CalendarContext | None = None,
                 colors: Mapping[str, str] | None = None,
                 cell_size: int = CELL_SIZE, fixed_rows: bool = False) -> Image.Image:
    ctx = context or DEFAULT_CONTEXT
    grid = build_month_grid(reference, context=ctx, fixed_rows=fixed_rows)
    buckets = month_events_by_date(events, grid, context=ctx)
    palette = _resolve_colors(colors)
    font = ImageFont.load_default()

    rows = len(grid) // 7
    width = 7 * cell_size
    height = 2 * header_height(cell_size) + rows * cell_size
    img = Image.new("RGB", (width, height), GRID_BG)
    draw = ImageDraw.Draw(img)

    _header(draw, width, format_month_year(date(grid.year, grid.month, 1)), cell_size, font)
    hy = header_height(cell_size)
    for col in range(7):
        abbr = DAY_ABBR[(grid.first_weekday + col) % 7]
        draw.text((col * cell_size + 4, hy + 2), abbr, fill=MUTED_FG, font=font)

    for cell in grid:
        box = month_cell_box(cell.index, cell_size)
        draw.rectangle((box[0], box[1], box[2] - 1, box[3] - 1), outline=GRID_LINE)
        if cell.is_empty:
            continue
        draw.text((box[0] + 3, box[1] + 2), format_day(cell.date), fill=TEXT_FG, font=font)
        _draw_dots(draw, box, buckets[cell], MONTH_DOTS, palette, font)
    logger.debug("Rendered month %d-%02d (%d cells)", grid.year, grid.month, len(grid))
    return img


def render_week(reference: date | datetime | str, events: Iterable[Event],
                *, context: CalendarContext | None = None,
                colors: Mapping[str, str] | None = None,
                cell_size: int = CELL_SIZE) -> Image.Image:
    ctx = context or DEFAULT_CONTEXT
    days = week_days(reference, context=ctx)
    buckets = week_hour_buckets(events, days, context=ctx)
    palette = _resolve_colors(colors)
    font = ImageFont.load_default()

    width = 8 * cell_size
    height = 2 * header_height(cell_size) + 24 * row_height(cell_size)
    img = Image.new("RGB", (width, height), GRID_BG)
    draw = ImageDraw.Draw(img)

    _header(draw, width, format_week_range(days[0]), cell_size, font)
    _hour_labels(draw, cell_size, font)
    hy = header_height(cell_size)
    for col, d in enumerate(days):
        x0 = hour_cell_box(col, 0, cell_size)[0]
        draw.text((x0 + 3, hy + 2), f"{format_weekday(d)} {format_day(d)}", fill=TEXT_FG, font=font)
        for hour, bucket in enumerate(buckets[d]):
            box = hour_cell_box(col, hour, cell_size)
            draw.rectangle((box[0], box[1], box[2] - 1, box[3] - 1), outline=GRID_LINE)
            if bucket:
                _draw_dots(draw, box, bucket, _dot_capacity(box) - 1, palette, font)
    return img


def render_day(reference: date | datetime | str, events: Iterable[Event],
               *, context: CalendarContext | None = None,
               colors: Mapping[str, str] | None = None,
               cell_size: int = CELL_SIZE) -> Image.Image:
    ctx = context or DEFAULT_CONTEXT
    day = resolve_reference(reference, ctx)
    buckets = day_hour_buckets(events, day, context=ctx)
    palette = _resolve_colors(colors)
    font = ImageFont.load_default()

    column_width = DAY_COLUMN_SPAN * cell_size
    width = cell_size + column_width
    height = 2 * header_height(cell_size) + 24 * row_height(cell_size)
    img = Image.new("RGB", (width, height), GRID_BG)
    draw = ImageDraw.Draw(img)

    _header(draw, width, format_weekday_date(day), cell_size, font)
    _hour_labels(draw, cell_size, font)
    for hour, bucket in enumerate(buckets):
        box = hour_cell_box(0, hour, cell_size, column_width)
        draw.rectangle((box[0], box[1], box[2] - 1, box[3] - 1), outline=GRID_LINE)
        if bucket:
            _draw_dots(draw, box, bucket, _dot_capacity(box) - 1, palette, font)
    return img


def render_view(mode: ViewMode | str, reference: date | datetime | str,
                events: Iterable[Event], *, context: CalendarContext | None = None,
                colors: Mapping[str, str] | None = None,
                cell_size: int = CELL_SIZE, fixed_rows: bool = False) -> Image.Image:
    """Render ``events`` in the given view mode around ``reference``."""
    mode = ViewMode.parse(mode)
    if mode is ViewMode.MONTH:
        return render_month(reference, events, context=context, colors=colors,
                            cell_size=cell_size, fixed_rows=fixed_rows)
    if mode is ViewMode.WEEK:
        return render_week(reference, events, context=context, colors=colors,
                           cell_size=cell_size)
    return render_day(reference, events, context=context, colors=colors,
                      cell_size=cell_size)
