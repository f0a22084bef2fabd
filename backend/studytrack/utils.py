from __future__ import annotations

import datetime as dt
from typing import Any, Optional
from zoneinfo import ZoneInfo

TODAY = "today"

WEEKDAY_KEYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

WEEKDAY_NAMES = {
    "mon": "Montag",
    "tue": "Dienstag",
    "wed": "Mittwoch",
    "thu": "Donnerstag",
    "fri": "Freitag",
    "sat": "Samstag",
    "sun": "Sonntag",
}


def normalize_day_key(value: Any) -> Optional[str]:
    """Return a lower-cased, trimmed day key or None for empty input."""
    if value is None:
        return None
    text = str(value).strip().lower()
    return text or None


def today_weekday_name(today: dt.date) -> str:
    return WEEKDAY_NAMES[WEEKDAY_KEYS[today.weekday()]]


def day_display_name(day: str, today: Optional[dt.date] = None) -> str:
    key = normalize_day_key(day)
    if key == TODAY:
        if today is None:
            return "Heute"
        return f"Heute, {today_weekday_name(today)}"
    if key in WEEKDAY_NAMES:
        return WEEKDAY_NAMES[key]
    return day


def local_today(timezone: str) -> dt.date:
    return dt.datetime.now(ZoneInfo(timezone)).date()
