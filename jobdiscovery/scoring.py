"""
Similarity scoring of candidate jobs against a reference job.

Two policies exist and are chosen by where a candidate came from:

- catalog: structured postings, weighted title/company/description/location/skills
- web: freshly scraped cards without structured skills, scored against the
  reference's search keywords with company and remote bonuses, and dropped
  unless they beat WEB_MIN_SCORE
"""

import re
from typing import Iterable, List, Optional, Sequence

from .keywords import detect_role, extract_technical_keywords, jaccard, keyword_list
from .location import LocationScorer
from .models import CandidateJob, ReferenceJob, SimilarityBreakdown
from .normalize import is_remote, normalize_company, normalize_title, strip_seniority

CATALOG_POLICY = "catalog"
WEB_POLICY = "web"

CATALOG_WEIGHTS = {
    "title": 0.40,
    "company": 0.20,
    "description": 0.20,
    "location": 0.20,
    "skills": 0.10,
}
CATALOG_MIN_SCORE = 0.0

WEB_TITLE_WEIGHT = 0.4
WEB_DESCRIPTION_WEIGHT = 0.3
WEB_COMPANY_BONUS = 0.2
WEB_REMOTE_BONUS = 0.1
WEB_MIN_SCORE = 0.2

ROLE_MATCH_SCORE = 0.8

TITLE_REASON_THRESHOLD = 0.7
COMPANY_REASON_THRESHOLD = 0.8
LOCATION_REASON_THRESHOLD = 0.7

_WORD_RE = re.compile(r"[a-z]+")


def clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def title_similarity(title_a: Optional[str], title_b: Optional[str]) -> float:
    norm_a, norm_b = normalize_title(title_a), normalize_title(title_b)
    if not norm_a or not norm_b:
        return 0.0
    if norm_a == norm_b:
        return 1.0
    role_a, role_b = detect_role(norm_a), detect_role(norm_b)
    if role_a is not None and role_a == role_b:
        return ROLE_MATCH_SCORE
    return jaccard(strip_seniority(norm_a).split(), strip_seniority(norm_b).split())


def company_similarity(company_a: Optional[str], company_b: Optional[str]) -> float:
    norm_a, norm_b = normalize_company(company_a), normalize_company(company_b)
    if norm_a and norm_a == norm_b:
        return 1.0
    return 0.0


def description_similarity(desc_a: Optional[str], desc_b: Optional[str]) -> float:
    return jaccard(extract_technical_keywords(desc_a), extract_technical_keywords(desc_b))


def skills_similarity(skills_a: Optional[Iterable[str]], skills_b: Optional[Iterable[str]]) -> float:
    return jaccard([s.lower() for s in skills_a or ()], [s.lower() for s in skills_b or ()])


def _match(value_a: Optional[str], value_b: Optional[str]) -> float:
    return 1.0 if value_a and value_a == value_b else 0.0


def _reasons(breakdown: SimilarityBreakdown) -> List[str]:
    reasons = []
    if breakdown.title > TITLE_REASON_THRESHOLD:
        reasons.append("Similar job title")
    if breakdown.company > COMPANY_REASON_THRESHOLD:
        reasons.append("Same company")
    if breakdown.location > LOCATION_REASON_THRESHOLD:
        reasons.append("Nearby location")
    if breakdown.job_type:
        reasons.append("Same job type")
    if breakdown.experience_level:
        reasons.append("Same experience level")
    return reasons


class SimilarityScorer:
    def __init__(self, location_scorer: LocationScorer):
        self.location_scorer = location_scorer

    def score(
        self,
        reference: ReferenceJob,
        candidate: CandidateJob,
        search_keywords: Sequence[str] = (),
    ) -> SimilarityBreakdown:
        """Pick the policy from the candidate's source and score it."""
        if candidate.is_catalog:
            return self.score_catalog(reference, candidate)
        return self.score_web(reference, candidate, search_keywords)

    def score_catalog(self, reference: ReferenceJob, candidate: CandidateJob) -> SimilarityBreakdown:
        b = SimilarityBreakdown(policy=CATALOG_POLICY)
        b.title = title_similarity(reference.title, candidate.title)
        b.company = company_similarity(reference.company, candidate.company)
        b.description = description_similarity(reference.description, candidate.description)
        b.location = self.location_scorer.similarity(reference.location, candidate.location)
        b.skills = skills_similarity(reference.skills, candidate.skills)
        b.job_type = _match(reference.job_type, candidate.job_type)
        b.experience_level = _match(reference.experience_level, candidate.experience_level)

        total = sum(weight * getattr(b, name) for name, weight in CATALOG_WEIGHTS.items())
        b.score = round(clamp(total), 2)
        b.reasons = _reasons(b)
        return b

    def score_web(
        self,
        reference: ReferenceJob,
        candidate: CandidateJob,
        search_keywords: Sequence[str],
    ) -> SimilarityBreakdown:
        """
        Keyword-coverage score for scraped cards.

        title: share of the candidate's title words that are search keywords.
        description: share of search keywords found in the candidate's description.
        Company match and a remote location add flat bonuses.
        """
        keywords = [k.lower() for k in search_keywords if k]
        b = SimilarityBreakdown(policy=WEB_POLICY)

        title_words = keyword_list(candidate.title)
        if title_words and keywords:
            b.title = sum(1 for w in title_words if w in keywords) / len(title_words)

        if keywords:
            description = (candidate.description or "").lower()
            description_words = set(_WORD_RE.findall(description))
            found = sum(
                1 for k in keywords
                if (k in description if " " in k or "/" in k else k in description_words)
            )
            b.description = found / len(keywords)

        b.company = company_similarity(reference.company, candidate.company)
        b.location = 1.0 if is_remote(candidate.location) else 0.0
        b.job_type = _match(reference.job_type, candidate.job_type)
        b.experience_level = _match(reference.experience_level, candidate.experience_level)

        total = (
            WEB_TITLE_WEIGHT * b.title
            + WEB_DESCRIPTION_WEIGHT * b.description
            + WEB_COMPANY_BONUS * b.company
            + WEB_REMOTE_BONUS * b.location
        )
        b.score = round(clamp(total), 2)
        b.reasons = _reasons(b)
        return b


def passes_minimum(breakdown: SimilarityBreakdown) -> bool:
    if breakdown.policy == WEB_POLICY:
        return breakdown.score > WEB_MIN_SCORE
    return breakdown.score >= CATALOG_MIN_SCORE
