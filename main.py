"""Entry point — render a day, week or month view of events to a PNG file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date

from calendar_logic import CalendarError, resolve_reference
from events import Event, sample_events
from navigation import ViewMode, visible_range
from render import render_view
from settings import context_from_settings, load_settings

logger = logging.getLogger("event_calendar")


def _load_events(path: str) -> list[Event]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise CalendarError(f"{path}: expected a JSON list of events")
    return [Event.from_dict(item) for item in data]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Render a calendar view to an image.")
    p.add_argument("--mode", choices=[m.value for m in ViewMode],
                   help="View mode (default: from settings)")
    p.add_argument("--date", help="Reference date YYYY-MM-DD (default: today)")
    p.add_argument("--events", help="JSON file with a list of events (default: sample data)")
    p.add_argument("--settings", help="Settings file (default: ~/.event-calendar-settings.json)")
    p.add_argument("--out", default="calendar.png", help="Output PNG path")
    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = load_settings(args.settings)
    try:
        ctx = context_from_settings(settings)
        mode = ViewMode.parse(args.mode or settings["default_mode"])
        reference = resolve_reference(args.date or date.today(), ctx)
        if args.events:
            events = _load_events(args.events)
        else:
            events = sample_events(reference, tz=ctx.tz)
        image = render_view(
            mode, reference, events,
            context=ctx,
            colors=settings["event_colors"],
            cell_size=settings["cell_size"],
            fixed_rows=settings["fixed_rows"],
        )
        start, end = visible_range(mode, reference, context=ctx)
        logger.info("Visible %s range: %s -> %s", mode.value, start.isoformat(), end.isoformat())
        image.save(args.out)
    except CalendarError as ex:
        logger.error("%s", ex)
        return 2
    except json.JSONDecodeError as ex:
        logger.error("Cannot read events: %s", ex)
        return 2
    except OSError as ex:
        logger.error("%s", ex)
        return 2

    logger.info("Wrote %s", args.out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
