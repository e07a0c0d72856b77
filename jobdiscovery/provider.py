"""Candidate lookup against the internal catalog."""

from typing import List, Optional

from .concurrency import Task, settle_all
from .keywords import keyword_list
from .logger import get_logger
from .models import CandidateJob, ReferenceJob
from .normalize import city_of, is_remote, normalize_company, strip_seniority

logger = get_logger()

TITLE_TERMS = 3


def title_search_terms(title: Optional[str]) -> str:
    """The first three significant words of a title, seniority removed."""
    return " ".join(keyword_list(strip_seniority(title))[:TITLE_TERMS])


def location_search_term(location: Optional[str]) -> str:
    if not location or not location.strip():
        return ""
    if is_remote(location):
        return "remote"
    return city_of(location)


class DatabaseCandidateProvider:
    """Runs title, company and location catalog queries in parallel and merges them."""

    def __init__(self, store, query_limit: int = 20, timeout: Optional[float] = 10.0):
        self.store = store
        self.query_limit = query_limit
        self.timeout = timeout

    def fetch_candidates(self, reference: ReferenceJob) -> List[CandidateJob]:
        title = title_search_terms(reference.title)
        company = normalize_company(reference.company)
        location = location_search_term(reference.location)

        tasks = []
        if title:
            tasks.append(Task("title", lambda: self.store.search_jobs(title=title, limit=self.query_limit), self.timeout))
        if company:
            tasks.append(Task("company", lambda: self.store.search_jobs(company=company, limit=self.query_limit), self.timeout))
        if location:
            tasks.append(Task("location", lambda: self.store.search_jobs(location=location, limit=self.query_limit), self.timeout))

        merged: List[CandidateJob] = []
        seen_ids = set()
        for outcome in settle_all(tasks):
            if not outcome.ok:
                logger.warning(
                    "Catalog query failed",
                    query=outcome.name,
                    timed_out=outcome.timed_out,
                    error=str(outcome.error) if outcome.error else None,
                )
                continue
            for job in outcome.value or []:
                if job.catalog_id in seen_ids:
                    continue
                seen_ids.add(job.catalog_id)
                merged.append(job)

        logger.debug("Catalog candidates fetched", count=len(merged), title=title, company=company, location=location)
        return merged
