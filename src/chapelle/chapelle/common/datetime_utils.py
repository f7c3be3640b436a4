from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any

FRENCH_WEEKDAYS = ("lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche")
FRENCH_MONTHS = (
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_date(value: Any) -> date:
    """Accept a date, a datetime or an ISO string (with or without time part)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_iso_date(value.strip()[:10])
    raise TypeError(f"Unsupported date value type: {type(value)!r}")


def coerce_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, str):
        # markedAt historique: "2025-10-12T09:31:02.123Z"
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    raise TypeError(f"Unsupported datetime value type: {type(value)!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def upcoming_sunday(today: date) -> date:
    """Today if it is a Sunday, otherwise the next Sunday."""
    return today + timedelta(days=(6 - today.weekday()) % 7)


def first_day_of_month(today: date) -> date:
    return today.replace(day=1)


def format_long_fr(value: date) -> str:
    """12 octobre 2025 -> 'dimanche 12 octobre 2025'."""
    return f"{FRENCH_WEEKDAYS[value.weekday()]} {value.day} {FRENCH_MONTHS[value.month - 1]} {value.year}"
