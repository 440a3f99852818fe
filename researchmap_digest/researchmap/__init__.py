"""researchmap API retrieval and digest runs."""

from __future__ import annotations

__all__ = [
    "CategoryResult",
    "DigestReport",
    "FetchOutcome",
    "ResearchmapClient",
    "ResearchmapClientConfig",
    "RetryExhaustedError",
]

from .client import ResearchmapClient, ResearchmapClientConfig, RetryExhaustedError
from .models import CategoryResult, DigestReport, FetchOutcome
