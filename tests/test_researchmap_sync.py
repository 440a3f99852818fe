from __future__ import annotations

import json
import logging
from pathlib import Path

import httpx
import pytest

from researchmap_digest.extract import CATEGORIES_BY_KEY, ExtractionResult, RecordExtractor
from researchmap_digest.researchmap.client import ResearchmapClient
from researchmap_digest.researchmap.models import FetchOutcome
from researchmap_digest.researchmap.sync import extract_records, main, run_digest

DEFAULT_DEGREE = "Doctor (Human and Environmental Studies, Kyoto University)"

PAYLOADS = {
    "research_experience": [
        {"affiliation": {"en": "Osaka University"}, "job": {"en": "Lecturer"}, "from_date": "2012-04"},
        {"affiliation": {"en": "Kyoto University"}, "job": {"en": "Professor"}, "from_date": "2016-04"},
    ],
    "education": [
        {
            "degree": {"en": "Ph.D."},
            "graduate_school": {"en": "Graduate School of Informatics"},
            "university": {"en": "Kyoto University"},
            "from_date": "2008-04",
        }
    ],
    "published_papers": [
        {
            "paper_title": {"en": "On Testing"},
            "publication_name": {"en": "Journal of Tests"},
            "publication_date": "2019",
            "doi": "10.1234/abcd.5678",
        }
    ],
}


def _handler(request: httpx.Request) -> httpx.Response:
    category = request.url.path.rsplit("/", 1)[-1]
    if category == "awards":
        return httpx.Response(500)
    return httpx.Response(200, json={"items": PAYLOADS.get(category, [])})


def test_run_digest_processes_categories_in_order(make_client, sleeps: list[float], extractor: RecordExtractor) -> None:
    keys = ("research_experience", "education", "awards", "published_papers")
    updates: list[int] = []

    report = run_digest(
        client=make_client(_handler, max_retries=1),
        extractor=extractor,
        categories=[CATEGORIES_BY_KEY[key] for key in keys],
        category_delay=0.8,
        sleep=sleeps.append,
        on_update=lambda current: updates.append(len(current.sections)),
    )

    assert [section.key for section in report.sections] == list(keys)
    assert updates == [1, 2, 3, 4]
    assert sleeps == [0.8, 0.8, 0.5, 0.8]

    awards = report.sections[2]
    assert awards.error.startswith("Failed to load awards")
    assert awards.results == []

    papers = report.sections[3]
    assert papers.results[0].link == "https://doi.org/10.1234/abcd.5678"
    assert report.summary.affiliation == "Kyoto University / Professor"
    assert report.summary.degree == "Ph.D. (Graduate School of Informatics, Kyoto University)"
    assert report.summary_lines() == [
        "Affiliation: Kyoto University / Professor",
        "Degree: Ph.D. (Graduate School of Informatics, Kyoto University)",
    ]

    lines = report.as_lines()
    assert "Awards (error)" in lines
    assert "  - On Testing - Journal of Tests (2019)" in lines


def _write_config(path: Path, permalink: str = "tokuo") -> Path:
    path.write_text(
        "fetch:\n"
        f"  permalink: {permalink}\n"
        "  page-delay: 0\n"
        "  category-delay: 0\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def fake_fetch(monkeypatch) -> None:
    def fetch_category(self: ResearchmapClient, category: str) -> FetchOutcome:
        items = PAYLOADS["research_experience"][:1] if category == "research_experience" else []
        return FetchOutcome(category=category, items=items)

    monkeypatch.setattr(ResearchmapClient, "fetch_category", fetch_category)


def test_main_writes_json_digest(tmp_path: Path, fake_fetch) -> None:
    config = _write_config(tmp_path / "app.config.yaml")
    output = tmp_path / "out" / "digest.json"

    report = main(["--config", str(config), "--output", str(output)])

    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["permalink"] == "tokuo"
    assert len(data["sections"]) == 17
    assert data["summary"] == {"affiliation": "Osaka University / Lecturer", "degree": DEFAULT_DEGREE}
    assert data["sections"][1]["count"] == 1
    assert report.permalink == "tokuo"


def test_main_text_format_and_overrides(tmp_path: Path, fake_fetch) -> None:
    config = _write_config(tmp_path / "app.config.yaml")
    output = tmp_path / "digest.txt"

    report = main(
        ["--config", str(config), "--permalink", "someone", "--format", "text", "--output", str(output)]
    )

    text = output.read_text(encoding="utf-8")
    assert report.permalink == "someone"
    assert text.startswith("Affiliation: Osaka University / Lecturer\n")
    assert f"Degree: {DEFAULT_DEGREE}" in text
    assert "Research Experience (1)" in text


def test_main_requires_permalink(tmp_path: Path, fake_fetch) -> None:
    config = tmp_path / "app.config.yaml"
    config.write_text("fetch:\n  category-delay: 0\n", encoding="utf-8")
    with pytest.raises(ValueError):
        main(["--config", str(config)])


def test_extract_records_isolates_failing_record(monkeypatch, caplog, extractor: RecordExtractor) -> None:
    extract = RecordExtractor.extract

    def flaky_extract(self: RecordExtractor, category, record):
        if record.get("broken"):
            raise KeyError("broken")
        return extract(self, category, record)

    monkeypatch.setattr(RecordExtractor, "extract", flaky_extract)
    items = [{"title": "First"}, {"broken": True}, {"title": "Third"}]

    with caplog.at_level(logging.WARNING, logger="researchmap.sync"):
        results = extract_records(CATEGORIES_BY_KEY["works"], items, extractor)

    assert [result.title for result in results] == ["First", "(no title)", "Third"]
    assert results[1] == ExtractionResult(title="(no title)")
    assert "Skipping fields for works item 1" in caplog.text
