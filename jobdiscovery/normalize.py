import re
from typing import Tuple
from urllib.parse import urljoin, urlparse

from .vocabulary import LEGAL_SUFFIXES, REMOTE_MARKERS, SENIORITY_TERMS

_PUNCT_RE = re.compile(r"[^\w\s]")


def normalize_text(s: str | None) -> str:
    return " ".join((s or "").strip().lower().split())


def normalize_title(title: str | None) -> str:
    return normalize_text(title)


def strip_seniority(title: str | None) -> str:
    """Drop sr./senior/jr./junior qualifiers from a title."""
    words = [w for w in normalize_text(title).split() if w not in SENIORITY_TERMS]
    return " ".join(words)


def normalize_company(company: str | None) -> str:
    """Lower-case, drop punctuation and trailing legal suffixes (inc, corp, ...)."""
    words = _PUNCT_RE.sub(" ", normalize_text(company)).split()
    while words and words[-1] in LEGAL_SUFFIXES:
        words.pop()
    return " ".join(words)


def is_remote(location: str | None) -> bool:
    loc = normalize_text(location)
    return any(marker in loc for marker in REMOTE_MARKERS)


def city_of(location: str | None) -> str:
    """Text before the first comma, normalized."""
    return normalize_text((location or "").split(",")[0])


def canonical_url(url: str | None) -> str:
    parsed = urlparse(url or "")
    path = parsed.path.rstrip("/")
    # Drop query and fragment to avoid source-specific tracking
    return f"{parsed.scheme}://{parsed.netloc}{path}" if parsed.scheme and parsed.netloc else path


def absolute_url(href: str | None, page_url: str) -> str:
    """Resolve a possibly relative href against the page's origin."""
    if not href:
        return ""
    href = href.strip()
    if href.startswith("http://") or href.startswith("https://"):
        return href
    parsed = urlparse(page_url)
    origin = f"{parsed.scheme}://{parsed.netloc}"
    return urljoin(origin + "/", href)


def dedupe_key(title: str | None, company: str | None, url: str | None = None) -> Tuple[str, str, str]:
    """Identity of a candidate for de-duplication.

    Title and company decide it; the canonical URL only joins in when the
    title is missing, so untitled cards from one company stay distinct.
    """
    norm_title = normalize_title(title)
    return (norm_title, normalize_company(company), "" if norm_title else canonical_url(url))
