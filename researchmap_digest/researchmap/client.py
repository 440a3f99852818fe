"""HTTP client wrapper for the researchmap REST API."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import quote, urljoin

import httpx

from .models import FetchOutcome

LOGGER = logging.getLogger("researchmap.client")

RETRY_AFTER_STATUS = 429


@dataclass(slots=True)
class ResearchmapClientConfig:
    base_url: str = "https://api.researchmap.jp"
    permalink: str = ""
    lang: str = "en"
    page_size: int = 200
    request_timeout: float = 30.0
    max_retries: int = 5
    initial_backoff: float = 0.5
    max_backoff: float = 12.0
    retry_after_cap: float = 60.0
    page_delay: float = 0.25


class RetryExhaustedError(RuntimeError):
    """Raised when a page could not be fetched within the allowed retries."""

    def __init__(self, message: str, *, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class ResearchmapClient:
    """Paginated, rate-limit aware retrieval of researchmap achievement lists."""

    def __init__(
        self,
        *,
        config: ResearchmapClientConfig | None = None,
        session: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or ResearchmapClientConfig()
        self._session = session
        self._owns_session = session is None
        self._sleep = sleep

    @property
    def session(self) -> httpx.Client:
        if self._session is None:
            timeout = httpx.Timeout(self.config.request_timeout)
            self._session = httpx.Client(timeout=timeout)
        return self._session

    def close(self) -> None:
        if self._owns_session and self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "ResearchmapClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.close()

    # -- Public API -----------------------------------------------------

    def fetch_category(self, category: str) -> FetchOutcome:
        """Retrieve every item of one category, following `start` pagination.

        Never raises for retrieval failures; an exhausted page is reported via
        ``FetchOutcome.error`` so that other categories can still be fetched.
        """
        outcome = FetchOutcome(category=category)
        url = self._build_url(category)
        start = 1
        while True:
            params = {
                "format": "json",
                "lang": self.config.lang,
                "limit": self.config.page_size,
                "start": start,
            }
            try:
                payload, attempts = self._request_json(url, params)
            except RetryExhaustedError as exc:
                outcome.attempts += exc.attempts
                outcome.error = f"Failed to load {category}: {exc}"
                LOGGER.error("%s after %s attempts", outcome.error, exc.attempts)
                return outcome
            outcome.attempts += attempts
            outcome.pages += 1

            items = payload.get("items") if isinstance(payload, dict) else None
            if not isinstance(items, list):
                LOGGER.warning("Unexpected payload for %s (start=%s): %s", category, start, type(payload))
                items = []
            outcome.items.extend(items)
            if len(items) < self.config.page_size or not items:
                break
            start += len(items)
            self._sleep(self.config.page_delay)

        LOGGER.info("Fetched %s items for %s in %s page(s)", len(outcome.items), category, outcome.pages)
        return outcome

    # -- Internal helpers ------------------------------------------------

    def _build_url(self, category: str) -> str:
        if not self.config.permalink:
            raise ValueError("A researchmap permalink is required")
        base = self.config.base_url.rstrip("/") + "/"
        path = f"{quote(self.config.permalink, safe='')}/{quote(category, safe='')}"
        return urljoin(base, path)

    def _backoff(self, attempt: int) -> float:
        return min(self.config.max_backoff, self.config.initial_backoff * (2**attempt))

    def _retry_after(self, response: httpx.Response, attempt: int) -> float:
        header = (response.headers.get("Retry-After") or "").strip()
        if header.isdigit():
            return min(self.config.retry_after_cap, float(header))
        return self._backoff(attempt)

    def _request_json(self, url: str, params: dict[str, Any]) -> tuple[Any, int]:
        """Return ``(payload, attempts)`` or raise `RetryExhaustedError`."""
        total = self.config.max_retries + 1
        last_exc: Exception | None = None
        for attempt in range(total):
            try:
                response = self.session.get(url, params=params, headers={"Accept": "application/json"})
                if response.status_code == RETRY_AFTER_STATUS:
                    sleep_for = self._retry_after(response, attempt)
                    last_exc = httpx.HTTPStatusError(
                        "HTTP 429 Too Many Requests", request=response.request, response=response
                    )
                else:
                    response.raise_for_status()
                    return response.json(), attempt + 1
            except (httpx.HTTPError, ValueError) as exc:
                last_exc = exc
                sleep_for = self._backoff(attempt)
            if attempt + 1 >= total:
                break
            LOGGER.warning(
                "Request failure (%s), attempt %s/%s, sleeping %.2fs",
                last_exc,
                attempt + 1,
                total,
                sleep_for,
            )
            self._sleep(sleep_for)
        raise RetryExhaustedError(str(last_exc), attempts=total) from last_exc
