# src/taskboard/dates.py

"""
Date helpers shared by the store, the commands and the renderers.

Due dates are calendar days (datetime.date). Anything else that arrives here
(datetime, ISO string) is reduced to its local date first.
"""

from __future__ import annotations

import re
from datetime import date, datetime

_ISO_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def parse_date_string(value: str) -> date:
    """Parse "YYYY-MM-DD" into a date. Raises ValueError on anything else."""
    raw = (value or "").strip()
    if not _ISO_DAY_RE.match(raw):
        raise ValueError(f"Invalid date (expected YYYY-MM-DD): {value!r}")
    year, month, day = (int(p) for p in raw.split("-"))
    return date(year, month, day)


def _to_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = str(value).strip()
    if _ISO_DAY_RE.match(raw):
        return parse_date_string(raw)
    return datetime.fromisoformat(raw).date()


def format_date_for_input(value: date | datetime | str) -> str:
    """date/datetime/ISO string -> "YYYY-MM-DD"."""
    return _to_date(value).isoformat()


def format_date_for_display(value: date | datetime | str) -> str:
    """Short display form, month first: "Aug 08"."""
    d = _to_date(value)
    return f"{_MONTHS[d.month - 1]} {d.day:02d}"


def date_from_db(raw: str | None) -> date | None:
    if not raw:
        return None
    try:
        return _to_date(raw)
    except ValueError:
        return None
