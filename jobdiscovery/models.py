"""Data models for reference jobs, candidates and scrape outcomes."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional, Tuple

CATALOG_SOURCE = "catalog"


@dataclass(frozen=True)
class ReferenceJob:
    """The saved posting a discovery request is anchored to."""

    title: str
    company: str
    description: str = ""
    location: Optional[str] = None
    job_type: Optional[str] = None
    experience_level: Optional[str] = None
    skills: Tuple[str, ...] = ()
    id: Optional[str] = None


@dataclass
class CandidateJob:
    title: str
    company: str
    description: str
    location: str
    url: str
    source: str
    salary: Optional[str] = None
    job_type: Optional[str] = None
    experience_level: Optional[str] = None
    posted_date: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    catalog_id: Optional[int] = None
    score: float = 0.0

    @property
    def is_catalog(self) -> bool:
        return self.source == CATALOG_SOURCE

    def with_score(self, score: float) -> "CandidateJob":
        return replace(self, score=score)


@dataclass(frozen=True)
class RawExtractedJob:
    """One job card as pulled off a results page, before post-processing.

    Every field other than source is optional; schema.validate_raw_job decides
    whether the record is usable.
    """

    source: str
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    salary: Optional[str] = None
    posted_date: Optional[str] = None


@dataclass(frozen=True)
class SearchQuery:
    title: str
    location: Optional[str] = None
    remote: bool = True
    keywords: Tuple[str, ...] = ()


@dataclass
class ScrapeResult:
    source: str
    jobs: List[CandidateJob] = field(default_factory=list)
    has_more: bool = False
    error: Optional[str] = None
    error_kind: Optional[str] = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, source: str, error: str, kind: str, elapsed: float = 0.0) -> "ScrapeResult":
        return cls(source=source, jobs=[], has_more=False, error=error, error_kind=kind, elapsed=elapsed)


@dataclass
class SimilarityBreakdown:
    policy: str
    title: float = 0.0
    company: float = 0.0
    description: float = 0.0
    location: float = 0.0
    skills: float = 0.0
    job_type: float = 0.0
    experience_level: float = 0.0
    score: float = 0.0
    reasons: List[str] = field(default_factory=list)


@dataclass
class ScoredCandidate:
    job: CandidateJob
    breakdown: SimilarityBreakdown


@dataclass
class DiscoveryResult:
    jobs: List[CandidateJob]
    scored: List[ScoredCandidate] = field(default_factory=list)
    source_reports: List[ScrapeResult] = field(default_factory=list)
    finished_at: datetime = field(default_factory=datetime.now)

    @property
    def is_empty(self) -> bool:
        return not self.jobs

    @property
    def failed_sources(self) -> List[str]:
        return [r.source for r in self.source_reports if not r.ok]
