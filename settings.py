"""JSON-based settings persistence and the calendar context built from it."""

from __future__ import annotations

import json
import logging
import os
import re
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from calendar_logic import CalendarContext, InvalidArgument, parse_weekday
from events import EventColor

logger = logging.getLogger(__name__)

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".event-calendar-settings.json")

_MODES = ("day", "week", "month")

_DEFAULTS = {
    "first_weekday": "sunday",
    "timezone": "local",
    "default_mode": "month",
    "fixed_rows": False,
    "cell_size": 48,
    "event_colors": {c.value: c.default_hex for c in EventColor},
}

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")
_LOCAL_NAMES = ("", "local", "system")
_LOCALTIME = "/etc/localtime"


def default_settings() -> dict:
    settings = dict(_DEFAULTS)
    settings["event_colors"] = dict(_DEFAULTS["event_colors"])
    return settings


def load_settings(path: str | None = None) -> dict:
    """Load settings from disk, returning defaults for missing keys."""
    path = path or _SETTINGS_PATH
    settings = default_settings()
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, OSError) as ex:
        logger.warning("Ignoring unreadable settings file %s: %s", path, ex)
        return settings
    if not isinstance(stored, dict):
        logger.warning("Ignoring settings file %s: top level is not an object", path)
        return settings

    fw = stored.get("first_weekday")
    if isinstance(fw, (str, int)) and not isinstance(fw, bool):
        settings["first_weekday"] = fw
    if isinstance(stored.get("timezone"), str):
        settings["timezone"] = stored["timezone"]
    if stored.get("default_mode") in _MODES:
        settings["default_mode"] = stored["default_mode"]
    if isinstance(stored.get("fixed_rows"), bool):
        settings["fixed_rows"] = stored["fixed_rows"]
    size = stored.get("cell_size")
    if isinstance(size, int) and not isinstance(size, bool) and size > 0:
        settings["cell_size"] = size
    if isinstance(stored.get("event_colors"), dict):
        for key, value in stored["event_colors"].items():
            if key in settings["event_colors"] and isinstance(value, str):
                settings["event_colors"][key] = value
    return settings


def save_settings(settings: dict, path: str | None = None) -> None:
    """Persist settings to disk."""
    with open(path or _SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)


# ------------------------------------------------------------------
# Calendar context
# ------------------------------------------------------------------
def is_local_timezone(name: str | None) -> bool:
    return (name or "").strip().lower() in _LOCAL_NAMES


def _local_zone() -> tzinfo:
    """The system timezone as an IANA zone, so its offset follows DST."""
    key = os.environ.get("TZ", "").lstrip(":")
    if key:
        try:
            return ZoneInfo(key)
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug("TZ=%r is not an IANA zone name", key)
    if os.path.exists(_LOCALTIME):
        target = os.path.realpath(_LOCALTIME)
        if "zoneinfo" + os.sep in target:
            try:
                return ZoneInfo(target.split("zoneinfo" + os.sep, 1)[1])
            except (ZoneInfoNotFoundError, ValueError):
                pass
        with open(_LOCALTIME, "rb") as f:
            return ZoneInfo.from_file(f, key="localtime")
    logger.warning("Cannot determine the local IANA zone; using today's UTC offset")
    return datetime.now().astimezone().tzinfo or timezone.utc


def resolve_timezone(name: str | None) -> tzinfo:
    """Resolve "local", "UTC", an IANA zone name or a fixed offset like "+02:00"."""
    s = (name or "local").strip()
    low = s.lower()
    if low in _LOCAL_NAMES:
        return _local_zone()
    if low in ("utc", "z", "gmt"):
        return timezone.utc

    m = _OFFSET_RE.match(s)
    if m:
        sign, hh, mm = m.group(1), int(m.group(2)), int(m.group(3))
        if hh > 23 or mm > 59:
            raise InvalidArgument(f"Invalid timezone offset: {s!r}")
        minutes = hh * 60 + mm
        return timezone(timedelta(minutes=-minutes if sign == "-" else minutes))

    try:
        return ZoneInfo(s)
    except (ZoneInfoNotFoundError, ValueError) as ex:
        raise InvalidArgument(f"Invalid timezone identifier: {s!r}") from ex


def context_from_settings(settings: dict) -> CalendarContext:
    """Build the explicit calendar context the computations run in.

    "local" yields a context that follows the system timezone per timestamp.
    """
    first_weekday = parse_weekday(settings.get("first_weekday", "sunday"))
    name = settings.get("timezone")
    if is_local_timezone(name):
        return CalendarContext(first_weekday=first_weekday, local=True)
    return CalendarContext(tz=resolve_timezone(name), first_weekday=first_weekday)
