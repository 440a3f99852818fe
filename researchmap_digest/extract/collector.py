"""Recursive traversal of nested researchmap records."""

from __future__ import annotations

from typing import Any, Iterator

from ..text_utils import clean_text
from .models import Leaf

MAX_DEPTH = 12
RESERVED_KEYS = frozenset({"@id", "@type"})


def iter_leaves(
    value: Any,
    *,
    skip_keys: frozenset[str] = RESERVED_KEYS,
    path: str = "",
    depth: int = 0,
) -> Iterator[tuple[str, Any]]:
    """Yield ``(path, scalar)`` for every string or number below `value`.

    Paths use dotted keys and bracketed indices (``a.b[0].c``). Traversal stops
    below `MAX_DEPTH` so malformed or self-referencing input terminates.
    """
    if depth > MAX_DEPTH or value is None or isinstance(value, bool):
        return
    if isinstance(value, dict):
        for key, nested in value.items():
            if key in skip_keys:
                continue
            child = f"{path}.{key}" if path else str(key)
            yield from iter_leaves(nested, skip_keys=skip_keys, path=child, depth=depth + 1)
    elif isinstance(value, list):
        for index, nested in enumerate(value):
            yield from iter_leaves(
                nested, skip_keys=skip_keys, path=f"{path}[{index}]", depth=depth + 1
            )
    elif isinstance(value, (str, int, float)):
        yield path, value


def collect_strings(value: Any) -> list[Leaf]:
    """Return cleaned, non-empty leaves of `value` with their structural paths."""
    leaves: list[Leaf] = []
    for path, raw in iter_leaves(value):
        text = clean_text(raw)
        if text:
            leaves.append(Leaf(path=path, text=text))
    return leaves
