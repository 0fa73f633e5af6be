"""Coercion of raw front-matter values into typed Python values."""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Any

_ORG_TIMESTAMP_RE = re.compile(
    r"^[<\[](?P<date>\d{4}-\d{2}-\d{2})(?:\s+(?P<dow>[^\s\d>\]]+))?(?:\s+(?P<time>\d{1,2}:\d{2}))?[^>\]]*[>\]]$"
)
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TRUE = frozenset({"true", "yes", "t", "on"})
_FALSE = frozenset({"false", "no", "nil", "off"})


def coerce_date(value: Any) -> date | datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not raw:
        return None
    match = _ORG_TIMESTAMP_RE.match(raw)
    if match:
        day = _parse_day(match.group("date"))
        if day is None:
            return None
        clock = match.group("time")
        if not clock:
            return day
        try:
            return datetime.combine(day, time.fromisoformat(clock.zfill(5)))
        except ValueError:
            return None
    if _DATE_RE.match(raw):
        return _parse_day(raw)
    candidate = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        return None


def _parse_day(raw: str) -> date | None:
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None


def as_day(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    return None


def to_jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def normalize_title(value: str) -> str:
    return " ".join(value.split()).casefold()
