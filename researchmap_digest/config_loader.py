"""Utilities for loading project configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from .extract.models import DEFAULT_DEGREE_LINE, JAPANESE_SCRIPT_RANGES, NO_TITLE, ExtractionSettings
from .researchmap.client import ResearchmapClientConfig

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class FetchConfig(BaseModel):
    base_url: str = Field(alias="base-url", default="https://api.researchmap.jp")
    permalink: str = ""
    lang: str = "en"
    page_size: int = Field(alias="page-size", default=200)
    request_timeout: float = Field(alias="request-timeout", default=30.0)
    max_retries: int = Field(alias="max-retries", default=5)
    initial_backoff: float = Field(alias="initial-backoff", default=0.5)
    max_backoff: float = Field(alias="max-backoff", default=12.0)
    retry_after_cap: float = Field(alias="retry-after-cap", default=60.0)
    page_delay: float = Field(alias="page-delay", default=0.25)
    category_delay: float = Field(alias="category-delay", default=0.8)


class LanguageConfig(BaseModel):
    lang: str = "en"
    fallback_languages: list[str] = Field(alias="fallback-languages", default_factory=lambda: ["en", "ja"])
    disallowed_script_ranges: list[tuple[int, int]] = Field(
        alias="disallowed-script-ranges",
        default_factory=lambda: [tuple(pair) for pair in JAPANESE_SCRIPT_RANGES],
    )


class ExtractionConfig(BaseModel):
    no_title: str = Field(alias="no-title", default=NO_TITLE)
    default_degree_line: str = Field(alias="default-degree-line", default=DEFAULT_DEGREE_LINE)
    forbidden_link_hosts: list[str] = Field(alias="forbidden-link-hosts", default_factory=lambda: ["researchmap.jp"])


class AppConfig(BaseModel):
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    language: LanguageConfig = Field(default_factory=LanguageConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)


def _load_yaml(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_app_config(path: Path | None = None) -> AppConfig:
    """Return application config from `app.config.yaml`."""
    target = path or DATA_DIR / "app.config.yaml"
    return AppConfig.model_validate(_load_yaml(target))


def client_config_from(app_config: AppConfig) -> ResearchmapClientConfig:
    fetch = app_config.fetch
    if not fetch.permalink.strip():
        raise ValueError("fetch.permalink must name a researchmap researcher.")
    return ResearchmapClientConfig(
        base_url=fetch.base_url,
        permalink=fetch.permalink.strip(),
        lang=fetch.lang,
        page_size=fetch.page_size,
        request_timeout=fetch.request_timeout,
        max_retries=fetch.max_retries,
        initial_backoff=fetch.initial_backoff,
        max_backoff=fetch.max_backoff,
        retry_after_cap=fetch.retry_after_cap,
        page_delay=fetch.page_delay,
    )


def extraction_settings_from(app_config: AppConfig) -> ExtractionSettings:
    language = app_config.language
    extraction = app_config.extraction
    return ExtractionSettings(
        lang=language.lang,
        fallback_langs=tuple(language.fallback_languages),
        disallowed_script_ranges=tuple((int(start), int(end)) for start, end in language.disallowed_script_ranges),
        no_title=extraction.no_title,
        default_degree_line=extraction.default_degree_line,
        forbidden_hosts=tuple(host.lower() for host in extraction.forbidden_link_hosts),
    )
