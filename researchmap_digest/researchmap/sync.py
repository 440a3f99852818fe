"""Command-line interface for building a researchmap achievement digest."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Callable, Sequence

from ..config_loader import client_config_from, extraction_settings_from, load_app_config
from ..extract import (
    CATEGORIES,
    Category,
    ExtractionResult,
    RecordExtractor,
    affiliation_summary,
    degree_summary,
)
from .client import ResearchmapClient
from .models import CategoryResult, DigestReport

LOGGER = logging.getLogger("researchmap.sync")

AFFILIATION_SOURCE = "research_experience"
DEGREE_SOURCE = "education"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fetch researchmap achievements for one researcher and extract display fields."
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to app.config.yaml (defaults to data/app.config.yaml).",
    )
    parser.add_argument(
        "--permalink",
        default=None,
        help="researchmap permalink of the researcher (overrides the config file).",
    )
    parser.add_argument(
        "--lang",
        default=None,
        help="Two-letter language code to request and prefer (overrides the config file).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="File to write the digest to. Writes to stdout when omitted.",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        default="json",
        choices=("json", "text"),
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity.",
    )
    return parser


def extract_records(
    category: Category, items: Sequence[Any], extractor: RecordExtractor
) -> list[ExtractionResult]:
    results: list[ExtractionResult] = []
    for index, item in enumerate(items):
        try:
            results.append(extractor.extract(category, item))
        except Exception as exc:
            LOGGER.warning("Skipping fields for %s item %s due to extraction error: %s", category.key, index, exc)
            results.append(ExtractionResult(title=extractor.settings.no_title))
    return results


def run_digest(
    *,
    client: ResearchmapClient,
    extractor: RecordExtractor,
    categories: Sequence[Category] = CATEGORIES,
    category_delay: float = 0.8,
    sleep: Callable[[float], None] = time.sleep,
    on_update: Callable[[DigestReport], None] | None = None,
) -> DigestReport:
    """Fetch and extract every category in order, one at a time.

    `on_update` receives the report after each category completes, whether it
    succeeded or failed.
    """
    report = DigestReport(permalink=client.config.permalink)
    for position, category in enumerate(categories):
        outcome = client.fetch_category(category.key)
        if outcome.ok:
            results = extract_records(category, outcome.items, extractor)
            report.sections.append(CategoryResult(key=category.key, label=category.label, results=results))
            if category.key == AFFILIATION_SOURCE:
                report.summary.affiliation = affiliation_summary(outcome.items, extractor)
            elif category.key == DEGREE_SOURCE:
                report.summary.degree = degree_summary(outcome.items, extractor)
        else:
            report.sections.append(
                CategoryResult(key=category.key, label=category.label, error=outcome.error or "")
            )

        if on_update is not None:
            on_update(report)
        if position + 1 < len(categories):
            sleep(category_delay)
    return report


def write_report(report: DigestReport, output: Path | None, output_format: str) -> None:
    if output_format == "text":
        content = "\n".join(report.as_lines()) + "\n"
    else:
        content = json.dumps(report.to_json_dict(), ensure_ascii=False, indent=2) + "\n"
    if output is None:
        sys.stdout.write(content)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")


def main(argv: list[str] | None = None) -> DigestReport:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    app_config = load_app_config(args.config)
    if args.permalink:
        app_config.fetch.permalink = args.permalink
    if args.lang:
        app_config.fetch.lang = args.lang
        app_config.language.lang = args.lang

    client_config = client_config_from(app_config)
    extractor = RecordExtractor(extraction_settings_from(app_config))

    with ResearchmapClient(config=client_config) as client:
        report = run_digest(
            client=client,
            extractor=extractor,
            category_delay=app_config.fetch.category_delay,
        )

    write_report(report, args.output, args.output_format)

    failed = [section.key for section in report.sections if section.error]
    LOGGER.info(
        "Processed %s categories (%s failed) for %s",
        len(report.sections),
        len(failed),
        report.permalink,
    )
    return report


if __name__ == "__main__":
    main()
