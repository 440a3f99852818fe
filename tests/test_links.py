from __future__ import annotations

import pytest

from researchmap_digest.extract.links import extract_urls, normalize_external_url, pick_link, score_url


def test_doi_beats_generic_links() -> None:
    record = {"doi": "10.1000/xyz123", "url": "https://example.com/a"}
    assert pick_link(record) == "https://doi.org/10.1000/xyz123"


def test_identifier_list_supplies_doi() -> None:
    assert pick_link({"identifiers": {"doi": ["10.1234/abc"]}}) == "https://doi.org/10.1234/abc"


def test_researchmap_links_are_never_returned() -> None:
    record = {
        "url": "https://researchmap.jp/tokuo/published_papers/1",
        "see_also": [{"@id": "https://api.researchmap.jp/tokuo"}],
    }
    assert pick_link(record) == ""


def test_custom_forbidden_hosts() -> None:
    assert pick_link({"url": "https://example.com/a"}, ("example.com",)) == ""


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("https://example.org/x?format=json", ""),
        ("https://example.org/x?id=3&format=html", "https://example.org/x?id=3"),
        ("https://example.org/data.json", ""),
        ("(https://example.org/a).", "https://example.org/a"),
        ("https://example.org/x?a=1&amp;b=2", "https://example.org/x?a=1&b=2"),
        ("http://[invalid", ""),
        ("ftp://example.org/file", ""),
        ("", ""),
    ],
)
def test_normalize_external_url(raw: str, expected: str) -> None:
    assert normalize_external_url(raw) == expected


def test_anchor_markup_yields_single_url() -> None:
    text = '<a href="https://www.jstage.jst.go.jp/article/abc/1/1/_article">J-STAGE</a>'
    assert extract_urls(text) == ["https://www.jstage.jst.go.jp/article/abc/1/1/_article"]


def test_publisher_article_beats_preprint() -> None:
    record = {
        "a": "https://arxiv.org/abs/2101.00001",
        "b": "https://www.sciencedirect.com/science/article/pii/S0001",
    }
    assert pick_link(record) == "https://www.sciencedirect.com/science/article/pii/S0001"


def test_score_url_penalizes_pdf() -> None:
    assert score_url("https://example.org/paper.pdf") == -10
    assert score_url("https://doi.org/10.1/x") == 90


def test_bare_doi_in_text() -> None:
    record = {"description": "See doi:10.5555/12345678."}
    assert pick_link(record) == "https://doi.org/10.5555/12345678"


def test_nothing_to_link() -> None:
    assert pick_link({}) == ""
    assert pick_link("plain text") == ""


def test_exact_hosts_do_not_cover_subdomains() -> None:
    assert score_url("https://www.jstage.jst.go.jp/article/abc/1/1/_article") == 10
    assert score_url("https://jstage.jst.go.jp/article/abc/1/1/_article") == 90
    assert score_url("https://export.arxiv.org/abs/2101.00001") == 10
    assert score_url("https://link.springer.com/article/10.1007/x") == 80


def test_doi_found_next_to_japanese_text() -> None:
    record = {"description": "論文10.5555/12345678を参照"}
    assert pick_link(record) == "https://doi.org/10.5555/12345678"
