"""Year and year-range extraction from date-like record fields."""

from __future__ import annotations

import re
from typing import Any, Callable

from .models import PRESENT

YEAR_RE = re.compile(r"\b(19\d{2}|20\d{2})\b", re.ASCII)
YEAR_OR_OPEN_RE = re.compile(r"\b(19\d{2}|20\d{2}|9999)\b", re.ASCII)
OPEN_END = "9999"

START_FIELDS = ("start_date", "from_date", "publication_date", "date", "year", "modified")
END_FIELDS = ("to_date", "end_date")
SORT_FIELDS = ("start_date", "from_date", "date", "publication_date", "year")

Getter = Callable[[Any, str], str]


def year_token(raw: str) -> str:
    """Return "YYYY", "present" for the all-nines open end, or ""."""
    if not raw:
        return ""
    if OPEN_END in raw:
        return PRESENT
    match = YEAR_RE.search(raw)
    return match.group(1) if match else ""


def year_pair(raw: str) -> list[str]:
    """Return up to two distinct year tokens, in order, from one compound value."""
    if not raw:
        return []
    years: list[str] = []
    for match in YEAR_OR_OPEN_RE.finditer(raw):
        token = PRESENT if match.group(1) == OPEN_END else match.group(1)
        if token not in years:
            years.append(token)
        if len(years) >= 2:
            break
    return years


def _first_value(record: Any, fields: tuple[str, ...], get: Getter) -> str:
    for name in fields:
        value = get(record, name)
        if value:
            return value
    return ""


def pick_year_range(record: Any, get: Getter) -> str:
    """Return "", "YYYY", "YYYY-YYYY" or "YYYY-present" for a record."""
    start_raw = _first_value(record, START_FIELDS, get)
    end_raw = _first_value(record, END_FIELDS, get)
    start = year_token(start_raw)
    end = year_token(end_raw)
    if start and end:
        return f"{start}-{end}"
    pair = year_pair(start_raw)
    if len(pair) >= 2:
        return f"{pair[0]}-{pair[1]}"
    return start


def start_year_sort_key(record: Any, get: Getter) -> int:
    """Sort key for recency: "present" ranks highest, missing years lowest."""
    token = year_token(_first_value(record, SORT_FIELDS, get))
    if not token:
        return -1
    if token == PRESENT:
        return 9999
    return int(token)
