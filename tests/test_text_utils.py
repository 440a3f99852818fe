from __future__ import annotations

import pytest

from researchmap_digest.text_utils import clean_text, join_non_empty


def test_clean_text_strips_markup_and_collapses_whitespace() -> None:
    assert clean_text("  <b>Deep</b>\n   learning <i>models</i> ") == "Deep learning models"


def test_clean_text_fixes_known_institution_typos() -> None:
    raw = "Kyoto Univerisity, Graduate School of Human and Enviroment Studies"
    assert clean_text(raw) == "Kyoto University, Graduate School of Human and Environmental Studies"


def test_clean_text_removes_decoding_artifacts() -> None:
    assert clean_text("What is learning?") == "What is learning"
    assert clean_text("データ？解析") == "データ解析"
    assert clean_text("\ufffdAbstract") == "Abstract"


def test_clean_text_renders_scalars() -> None:
    assert clean_text(2015) == "2015"
    assert clean_text(2015.0) == "2015"
    assert clean_text(None) == ""
    assert clean_text(True) == ""


@pytest.mark.parametrize(
    "raw",
    [
        "Enviroment  Studies",
        "Univer?isity of Tokyo",
        "<a<b>>x",
        " tab\tand\u3000ideographic space ",
        "<p>Human and Environment Studies</p>",
        "plain",
        "",
    ],
)
def test_clean_text_is_idempotent(raw: str) -> None:
    once = clean_text(raw)
    assert clean_text(once) == once


def test_join_non_empty_skips_blank_parts() -> None:
    assert join_non_empty(["Kyoto University", "", "  ", " Professor "]) == "Kyoto University / Professor"
    assert join_non_empty(["a", "b"], sep=", ") == "a, b"
