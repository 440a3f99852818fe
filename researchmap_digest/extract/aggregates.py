"""Cross-record summaries: current affiliation and highest degree."""

from __future__ import annotations

from typing import Any, Sequence

from ..text_utils import clean_text, join_non_empty
from .categories import CATEGORIES_BY_KEY, RecordExtractor

DOCTORATE = 5
DEGREE_KEYWORDS: tuple[tuple[int, tuple[str, ...]], ...] = (
    (DOCTORATE, ("doctor", "ph.d", "phd")),
    (4, ("master", "m.s", "msc", "m.sc")),
    (3, ("bachelor", "b.s", "ba", "b.a", "b.sc")),
    (2, ("associate",)),
)


def degree_priority(degree: str) -> int:
    """Rank a degree string: doctor 5 > master 4 > bachelor 3 > associate 2 > other 1."""
    lowered = (degree or "").lower()
    if not lowered:
        return 0
    for priority, keywords in DEGREE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return priority
    return 1


def affiliation_summary(records: Sequence[Any], extractor: RecordExtractor) -> str:
    """Title of the research-experience record with the latest start year."""
    if not records:
        return ""
    latest = max(records, key=extractor.start_year)
    return clean_text(extractor.title(CATEGORIES_BY_KEY["research_experience"], latest))


def _degree_line(record: Any, degree: str, extractor: RecordExtractor) -> str:
    school, graduate, faculty, department = extractor.education_units(record)
    primary = graduate or faculty or department
    inside = join_non_empty([primary, school], sep=", ")
    return f"{degree} ({inside})" if inside else degree


def degree_summary(records: Sequence[Any], extractor: RecordExtractor) -> str:
    """Doctorate line for the most recent qualifying education record."""
    best: tuple[int, int] | None = None
    line = ""
    for record in records or ():
        degree = extractor.degree(record)
        priority = degree_priority(degree)
        if priority < DOCTORATE:
            continue
        rank = (priority, extractor.start_year(record))
        if best is None or rank > best:
            best = rank
            line = _degree_line(record, degree, extractor)
    return line or extractor.settings.default_degree_line
