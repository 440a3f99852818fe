"""Data models for researchmap retrieval runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..extract.models import AggregateSummary, ExtractionResult


@dataclass(slots=True)
class FetchOutcome:
    """All items for one category, or the error that ended its retrieval."""

    category: str
    items: list[Any] = field(default_factory=list)
    pages: int = 0
    attempts: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class CategoryResult:
    key: str
    label: str
    results: list[ExtractionResult] = field(default_factory=list)
    error: str = ""

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "count": len(self.results),
            "results": [result.to_json_dict() for result in self.results],
            "error": self.error,
        }


@dataclass(slots=True)
class DigestReport:
    permalink: str
    summary: AggregateSummary = field(default_factory=AggregateSummary)
    sections: list[CategoryResult] = field(default_factory=list)

    def summary_lines(self) -> list[str]:
        return [f"{label}: {text}" for label, text in self.summary.lines()]

    def as_lines(self) -> list[str]:
        """Plain-text rendering: summaries first, then every non-empty section."""
        lines = self.summary_lines()
        for section in self.sections:
            if section.error:
                lines.append(f"{section.label} (error)")
                lines.append(f"  {section.error}")
                continue
            if not section.results:
                continue
            lines.append(f"{section.label} ({len(section.results)})")
            lines.extend(f"  - {result.as_text()}" for result in section.results)
        return lines

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "permalink": self.permalink,
            "summary": {
                "affiliation": self.summary.affiliation,
                "degree": self.summary.degree,
            },
            "sections": [section.to_json_dict() for section in self.sections],
        }
