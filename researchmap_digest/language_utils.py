"""Language utilities: resolving multi-language researchmap fields."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Sequence

from .text_utils import clean_text

DEFAULT_FALLBACK_LANGS = ("en", "ja")
MAX_DEPTH = 12


@lru_cache(maxsize=32)
def _script_pattern(ranges: tuple[tuple[int, int], ...]) -> re.Pattern[str]:
    body = "".join(f"\\U{start:08x}-\\U{end:08x}" for start, end in ranges)
    return re.compile(f"[{body}]")


def contains_script(text: str, ranges: Sequence[tuple[int, int]]) -> bool:
    """Return True when `text` holds a character from any of `ranges`."""
    if not text or not ranges:
        return False
    return _script_pattern(tuple(tuple(pair) for pair in ranges)).search(text) is not None


def _localized_text(value: Any, key: str) -> str:
    candidate = value.get(key)
    if isinstance(candidate, str) and candidate.strip():
        return clean_text(candidate)
    return ""


def resolve_lang(
    value: Any,
    lang: str = "en",
    fallbacks: Sequence[str] = DEFAULT_FALLBACK_LANGS,
    _depth: int = 0,
) -> str:
    """Return text for the requested language from a researchmap field.

    Scalars are cleaned as-is. Language-keyed mappings are tried for `lang`,
    then each fallback language, then every nested value in insertion order.
    """
    if value is None or _depth > MAX_DEPTH:
        return ""
    if isinstance(value, dict):
        for key in (lang, *fallbacks):
            text = _localized_text(value, key)
            if text:
                return text
        for nested in value.values():
            text = resolve_lang(nested, lang, fallbacks, _depth + 1)
            if text:
                return text
        return ""
    if isinstance(value, list):
        for nested in value:
            text = resolve_lang(nested, lang, fallbacks, _depth + 1)
            if text:
                return text
        return ""
    return clean_text(value)


def resolve_lang_strict(
    value: Any,
    lang: str = "en",
    disallowed: Sequence[tuple[int, int]] = (),
) -> str:
    """Like `resolve_lang` but limited to English keys and free of `disallowed` script."""
    if isinstance(value, dict):
        keys = ("en",) if lang == "en" else ("en", lang)
        for key in keys:
            text = _localized_text(value, key)
            if text and not contains_script(text, disallowed):
                return text
        return ""
    if isinstance(value, (list, bool)) or value is None:
        return ""
    text = clean_text(value)
    if contains_script(text, disallowed):
        return ""
    return text
