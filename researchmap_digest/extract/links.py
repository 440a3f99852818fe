"""Discovery and ranking of external links for publication records.

Candidates come from an explicit DOI field first, then from every string in
the record (anchor targets, bare URLs, bare DOIs). Each candidate is cleaned
and filtered; links back to researchmap itself or to raw JSON exports are
dropped. The survivor with the best host/path reputation wins.
"""

from __future__ import annotations

import html
import re
from typing import Any, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from bs4 import BeautifulSoup

from ..language_utils import resolve_lang
from .collector import iter_leaves
from .models import Candidate
from .scoring import best_candidate

DOI_RESOLVER = "https://doi.org/"
DEFAULT_FORBIDDEN_HOSTS = ("researchmap.jp",)
LINK_SKIP_KEYS = frozenset({"@type"})

DOI_RE = re.compile(r"\b10\.\d{4,9}/[-._;()/:A-Z0-9]+\b", re.IGNORECASE | re.ASCII)
PLAIN_URL_RE = re.compile(r"https?://[^\s\"'<>()]+")
SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
TRAILING_PUNCT_RE = re.compile(r"[)\],.;:!?]+$")
LEADING_BRACKET_RE = re.compile(r"^[(\[]+")
JSON_FORMAT_RE = re.compile(r"format=json", re.IGNORECASE)
JSON_SUFFIX_RE = re.compile(r"\.json([?#]|$)", re.IGNORECASE)

HOST_SCORES: tuple[tuple[str, int], ...] = (
    ("doi.org", 90),
    ("jstage.jst.go.jp", 80),
    ("springer.com", 70),
    ("sciencedirect.com", 70),
    ("wiley.com", 70),
    ("tandfonline.com", 70),
    ("nature.com", 65),
    ("aps.org", 65),
    ("cambridge.org", 65),
    ("oup.com", 65),
    ("oxfordjournals.org", 65),
    ("projecteuclid.org", 60),
    ("acm.org", 60),
    ("ieee.org", 60),
    ("arxiv.org", 55),
)
# Scored only on an exact hostname; the rest also cover subdomains.
EXACT_HOSTS = frozenset({"doi.org", "jstage.jst.go.jp", "projecteuclid.org", "arxiv.org"})
ARTICLE_PATH_RE = re.compile(r"/(article|abs|doi|document)/")
ARTICLE_PATH_BONUS = 10
PDF_PENALTY = 10


def _host_matches(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)


def is_forbidden_host(host: str, forbidden_hosts: Sequence[str]) -> bool:
    return any(_host_matches(host, domain) for domain in forbidden_hosts)


def clean_url_token(raw: str) -> str:
    text = html.unescape((raw or "").strip())
    text = TRAILING_PUNCT_RE.sub("", text)
    text = LEADING_BRACKET_RE.sub("", text)
    return text.strip()


def normalize_external_url(
    raw: str, forbidden_hosts: Sequence[str] = DEFAULT_FORBIDDEN_HOSTS
) -> str:
    """Return a cleaned external URL, or "" if the candidate must be dropped."""
    token = clean_url_token(raw)
    if not token or not SCHEME_RE.match(token):
        return ""
    try:
        parts = urlsplit(token)
        host = (parts.hostname or "").lower()
    except ValueError:
        return ""
    if not host or is_forbidden_host(host, forbidden_hosts):
        return ""

    query = parse_qsl(parts.query, keep_blank_values=True)
    if any(key == "format" for key, _ in query):
        if any(key == "format" and value.lower() == "json" for key, value in query):
            return ""
        kept = [(key, value) for key, value in query if key != "format"]
        token = urlunsplit(parts._replace(query=urlencode(kept)))

    if JSON_FORMAT_RE.search(token) or JSON_SUFFIX_RE.search(token):
        return ""
    return token


def extract_urls(text: str, forbidden_hosts: Sequence[str] = DEFAULT_FORBIDDEN_HOSTS) -> list[str]:
    """Return normalized URLs found in markup or plain text, in discovery order."""
    if not text:
        return []
    raw_candidates: list[str] = []
    if "<" in text and "href" in text.lower():
        soup = BeautifulSoup(text, "html.parser")
        raw_candidates.extend(str(anchor["href"]) for anchor in soup.find_all("a", href=True))
    raw_candidates.extend(PLAIN_URL_RE.findall(text))
    raw_candidates.extend(DOI_RESOLVER + doi for doi in DOI_RE.findall(text))

    urls: list[str] = []
    for candidate in raw_candidates:
        url = normalize_external_url(candidate, forbidden_hosts)
        if url and url not in urls:
            urls.append(url)
    return urls


def collect_url_candidates(
    record: Any, forbidden_hosts: Sequence[str] = DEFAULT_FORBIDDEN_HOSTS
) -> list[str]:
    urls: list[str] = []
    for _, value in iter_leaves(record, skip_keys=LINK_SKIP_KEYS):
        if not isinstance(value, str):
            continue
        for url in extract_urls(value, forbidden_hosts):
            if url not in urls:
                urls.append(url)
    return urls


def score_url(url: str) -> int:
    try:
        parts = urlsplit(url)
        host = (parts.hostname or "").lower()
    except ValueError:
        return 0
    path = parts.path.lower()
    score = 0
    for domain, weight in HOST_SCORES:
        matched = host == domain if domain in EXACT_HOSTS else _host_matches(host, domain)
        if matched:
            score += weight
            break
    if ARTICLE_PATH_RE.search(path):
        score += ARTICLE_PATH_BONUS
    if path.endswith(".pdf"):
        score -= PDF_PENALTY
    return score


def doi_from_identifiers(record: Any) -> str:
    if not isinstance(record, dict):
        return ""
    sources: list[Any] = []
    identifiers = record.get("identifiers")
    if isinstance(identifiers, dict):
        dois = identifiers.get("doi")
        if isinstance(dois, list) and dois:
            sources.append(dois[0])
        elif dois is not None:
            sources.append(dois)
    sources.append(record.get("doi"))
    for source in sources:
        match = DOI_RE.search(resolve_lang(source))
        if match:
            return match.group(0)
    return ""


def pick_link(record: Any, forbidden_hosts: Sequence[str] = DEFAULT_FORBIDDEN_HOSTS) -> str:
    """Return the best external link for a publication record, or ""."""
    candidates: list[str] = []
    doi = doi_from_identifiers(record)
    if doi:
        url = normalize_external_url(DOI_RESOLVER + doi, forbidden_hosts)
        if url:
            candidates.append(url)
    for url in collect_url_candidates(record, forbidden_hosts):
        if url not in candidates:
            candidates.append(url)

    return best_candidate(
        Candidate(url, score_url(url), order) for order, url in enumerate(candidates)
    )
