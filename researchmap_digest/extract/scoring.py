"""Heuristic scorers that rank candidate strings found inside a record."""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, Sequence

from .collector import collect_strings
from .models import Candidate

MIN_LENGTH = 2
MAX_LENGTH = 240

BARE_DATE_RE = re.compile(r"^[0-9]{4}([-/][0-9]{1,2}){0,2}$")
URL_RE = re.compile(r"^https?://")
DIGITS_RE = re.compile(r"^[0-9]+$")

PathHints = Sequence[tuple[tuple[str, ...], int]]

PATH_HINTS: PathHints = (
    (("title", "name"), 30),
    (("keyword", "interest", "area"), 20),
    (("course", "subject"), 18),
    (("affiliation", "institution", "organization", "society"), 14),
)
STRICT_PATH_HINTS: PathHints = (
    (("title", "name"), 30),
    (("keyword", "interest"), 20),
)


def is_candidate_text(text: str) -> bool:
    if not MIN_LENGTH <= len(text) <= MAX_LENGTH:
        return False
    return not (BARE_DATE_RE.match(text) or URL_RE.match(text) or DIGITS_RE.match(text))


def length_bonus(text: str) -> int:
    return min(20, len(text) // 12)


def best_candidate(candidates: Iterable[Candidate]) -> str:
    """Highest score wins; equal scores go to the earliest discovered candidate."""
    best: Candidate | None = None
    for candidate in candidates:
        if best is None or candidate.rank > best.rank:
            best = candidate
    return best.text if best else ""


def score_by_path(
    record: Any,
    keywords: Sequence[str],
    *,
    require: Sequence[re.Pattern[str]] = (),
    exclude: Sequence[re.Pattern[str]] = (),
) -> str:
    """Pick the leaf whose path mentions the most `keywords`."""
    candidates: list[Candidate] = []
    for order, leaf in enumerate(collect_strings(record)):
        text = leaf.text
        if not is_candidate_text(text):
            continue
        if any(pattern.search(text) for pattern in exclude):
            continue
        if not all(pattern.search(text) for pattern in require):
            continue
        path = leaf.path.lower()
        hits = sum(1 for keyword in keywords if keyword in path)
        if not hits:
            continue
        candidates.append(Candidate(text, 25 * hits + length_bonus(text), order))
    return best_candidate(candidates)


def score_by_value(
    record: Any,
    include: Sequence[re.Pattern[str]],
    *,
    exclude: Sequence[re.Pattern[str]] = (),
) -> str:
    """Pick the leaf whose own text matches the most `include` patterns."""
    candidates: list[Candidate] = []
    for order, leaf in enumerate(collect_strings(record)):
        text = leaf.text
        if not is_candidate_text(text):
            continue
        if any(pattern.search(text) for pattern in exclude):
            continue
        hits = sum(1 for pattern in include if pattern.search(text))
        if not hits:
            continue
        candidates.append(Candidate(text, 50 * hits + length_bonus(text), order))
    return best_candidate(candidates)


def score_whole_record(
    record: Any,
    hints: PathHints = PATH_HINTS,
    *,
    text_filter: Callable[[str], str] | None = None,
) -> str:
    """Last-resort search over every leaf, weighted by path hints."""
    candidates: list[Candidate] = []
    for order, leaf in enumerate(collect_strings(record)):
        text = text_filter(leaf.text) if text_filter else leaf.text
        if not text or not is_candidate_text(text):
            continue
        path = leaf.path.lower()
        score = length_bonus(text)
        for keywords, bonus in hints:
            if any(keyword in path for keyword in keywords):
                score += bonus
        candidates.append(Candidate(text, score, order))
    return best_candidate(candidates)
