"""Text cleanup helpers shared by the extraction pipeline."""

from __future__ import annotations

import re
from typing import Any, Iterable

TAG_RE = re.compile(r"<[^>]*>")
WHITESPACE_RE = re.compile(r"\s+")
# U+FFFD and literal question marks are mis-decoding artifacts in the source
# data; legitimate interrogative punctuation is lost as well.
ARTIFACT_RE = re.compile(r"[\ufffd?\uff1f]")

TYPO_FIXES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bUniverisity\b"), "University"),
    (re.compile(r"\bUniveristy\b"), "University"),
    (re.compile(r"\bEnviroment\b"), "Environment"),
    (re.compile(r"\bEnvironment Studies\b"), "Environmental Studies"),
)


def scalar_to_text(value: Any) -> str:
    """Render a JSON scalar as text; containers, booleans and None yield ""."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def strip_markup(value: str) -> str:
    return TAG_RE.sub("", value)


def normalize_whitespace(value: str) -> str:
    """Collapse whitespace and strip leading/trailing spacing."""
    return WHITESPACE_RE.sub(" ", value).strip()


def fix_typos(value: str) -> str:
    for pattern, replacement in TYPO_FIXES:
        value = pattern.sub(replacement, value)
    return value


def clean_text(value: Any) -> str:
    """Return display-ready text: no markup, artifacts or known typos.

    Idempotent: ``clean_text(clean_text(x)) == clean_text(x)``.
    """
    text = scalar_to_text(value)
    if not text:
        return ""
    text = strip_markup(text)
    text = ARTIFACT_RE.sub("", text)
    text = fix_typos(normalize_whitespace(text))
    return normalize_whitespace(text)


def join_non_empty(parts: Iterable[str], sep: str = " / ") -> str:
    cleaned = [clean_text(part) for part in parts]
    return sep.join(part for part in cleaned if part)
