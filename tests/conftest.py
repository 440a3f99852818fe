from __future__ import annotations

from typing import Callable

import httpx
import pytest

from researchmap_digest.extract import RecordExtractor
from researchmap_digest.researchmap.client import ResearchmapClient, ResearchmapClientConfig


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def extractor() -> RecordExtractor:
    return RecordExtractor()


@pytest.fixture
def make_client(sleeps: list[float]) -> Callable[..., ResearchmapClient]:
    def factory(handler, **overrides) -> ResearchmapClient:
        config = ResearchmapClientConfig(permalink="tokuo", **overrides)
        session = httpx.Client(transport=httpx.MockTransport(handler), base_url=config.base_url)
        return ResearchmapClient(config=config, session=session, sleep=sleeps.append)

    return factory
