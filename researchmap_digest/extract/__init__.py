"""Heuristic extraction of display fields from researchmap records."""

from __future__ import annotations

__all__ = [
    "AggregateSummary",
    "CATEGORIES",
    "CATEGORIES_BY_KEY",
    "Category",
    "ExtractionResult",
    "ExtractionSettings",
    "RecordExtractor",
    "affiliation_summary",
    "degree_summary",
    "pick_link",
]

from .aggregates import affiliation_summary, degree_summary
from .categories import CATEGORIES, CATEGORIES_BY_KEY, RecordExtractor
from .links import pick_link
from .models import AggregateSummary, Category, ExtractionResult, ExtractionSettings
