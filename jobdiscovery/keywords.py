"""
Keyword extraction and set-overlap utilities.

Pure functions over text; no I/O. Ordered helpers keep first-seen order so
search queries built from them are reproducible.
"""

import re
from typing import Iterable, List, Optional, Set

from .normalize import normalize_company, strip_seniority
from .vocabulary import (
    EXPERIENCE_LEVEL_TERMS,
    JOB_TYPE_TERMS,
    ROLE_TERMS,
    STOP_WORDS,
    TECHNICAL_TERMS,
)

MAX_SEARCH_KEYWORDS = 10
_NON_LETTERS_RE = re.compile(r"[^a-z]")


def _ordered_unique(items: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def keyword_list(text: Optional[str]) -> List[str]:
    """Keywords of text in first-seen order."""
    tokens = []
    for raw in (text or "").lower().split():
        token = _NON_LETTERS_RE.sub("", raw)
        if len(token) > 2 and token not in STOP_WORDS:
            tokens.append(token)
    return _ordered_unique(tokens)


def extract_keywords(text: Optional[str]) -> Set[str]:
    return set(keyword_list(text))


def technical_keyword_list(text: Optional[str]) -> List[str]:
    lowered = (text or "").lower()
    return [term for term in TECHNICAL_TERMS if term in lowered]


def extract_technical_keywords(text: Optional[str]) -> Set[str]:
    return set(technical_keyword_list(text))


def extract_search_keywords(job) -> List[str]:
    """Build the capped keyword list used for external search queries.

    Order: title keywords, description keywords, technical terms from the
    description, then the normalized company name as one entry.
    """
    candidates: List[str] = []
    candidates.extend(keyword_list(job.title))
    candidates.extend(keyword_list(job.description))
    candidates.extend(technical_keyword_list(job.description))
    company = normalize_company(job.company)
    if company:
        candidates.append(company)

    keywords = [k for k in _ordered_unique(candidates) if k and k not in STOP_WORDS]
    return keywords[:MAX_SEARCH_KEYWORDS]


def jaccard(set_a: Iterable[str], set_b: Iterable[str]) -> float:
    """Case-insensitive |A∩B| / |A∪B| over tokens longer than two characters."""
    a = {s.lower() for s in set_a if s and len(s) > 2}
    b = {s.lower() for s in set_b if s and len(s) > 2}
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def detect_role(title: Optional[str]) -> Optional[str]:
    """Return the first role term that appears as a word of the title."""
    words = set(_NON_LETTERS_RE.sub(" ", strip_seniority(title)).split())
    for role in ROLE_TERMS:
        if role in words:
            return role
    return None


def _first_match(text: str, table) -> Optional[str]:
    for value, phrases in table:
        if any(phrase in text for phrase in phrases):
            return value
    return None


def infer_job_type(title: Optional[str], description: Optional[str]) -> Optional[str]:
    return _first_match(f"{title or ''} {description or ''}".lower(), JOB_TYPE_TERMS)


def infer_experience_level(title: Optional[str], description: Optional[str]) -> Optional[str]:
    return _first_match(f"{title or ''} {description or ''}".lower(), EXPERIENCE_LEVEL_TERMS)
