"""Data models for record extraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

# JSON value as returned by the researchmap API.
Record = Union[str, int, float, bool, None, list[Any], dict[str, Any]]

NO_TITLE = "(no title)"
DEFAULT_DEGREE_LINE = "Doctor (Human and Environmental Studies, Kyoto University)"
PRESENT = "present"

JAPANESE_SCRIPT_RANGES: tuple[tuple[int, int], ...] = (
    (0x3040, 0x30FF),  # hiragana, katakana
    (0x3400, 0x4DBF),  # CJK extension A
    (0x4E00, 0x9FFF),  # CJK unified ideographs
)


@dataclass(slots=True, frozen=True)
class ExtractionSettings:
    """Language policy and fixed strings used by the extractors."""

    lang: str = "en"
    fallback_langs: tuple[str, ...] = ("en", "ja")
    disallowed_script_ranges: tuple[tuple[int, int], ...] = JAPANESE_SCRIPT_RANGES
    no_title: str = NO_TITLE
    default_degree_line: str = DEFAULT_DEGREE_LINE
    forbidden_hosts: tuple[str, ...] = ("researchmap.jp",)


@dataclass(slots=True, frozen=True)
class Category:
    key: str
    label: str
    venue_fields: tuple[str, ...] = ()
    has_links: bool = False


@dataclass(slots=True, frozen=True)
class Candidate:
    text: str
    score: int
    order: int

    @property
    def rank(self) -> tuple[int, int]:
        return (self.score, -self.order)


@dataclass(slots=True)
class ExtractionResult:
    title: str = NO_TITLE
    venue: str = ""
    year: str = ""
    link: str = ""

    def as_text(self, venue_sep: str = " - ") -> str:
        line = self.title
        if self.venue:
            line += f"{venue_sep}{self.venue}"
        if self.year:
            line += f" ({self.year})"
        return line

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "venue": self.venue,
            "year": self.year,
            "link": self.link,
        }


@dataclass(slots=True)
class AggregateSummary:
    affiliation: str = ""
    degree: str = ""

    def lines(self) -> list[tuple[str, str]]:
        """Return (label, text) pairs for the summaries computed so far."""
        out: list[tuple[str, str]] = []
        if self.affiliation:
            out.append(("Affiliation", self.affiliation))
        if self.degree:
            out.append(("Degree", self.degree))
        return out


@dataclass(slots=True)
class Leaf:
    path: str
    text: str
