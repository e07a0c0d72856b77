"""
Job discovery orchestrator.

Gathers candidates from the internal catalog and the configured external
sources, drops duplicates, scores them against the reference job and returns
the best few. A failing or slow source only shrinks the result set; the one
hard failure callers see is ReferenceNotFoundError.
"""

import time
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from .catalog import CatalogStore
from .concurrency import Task, settle_all
from .config import Settings, load_env
from .errors import ReferenceNotFoundError, SourceUnavailableError
from .geocoding import NominatimGeocoder
from .keywords import extract_search_keywords
from .location import LocationScorer
from .logger import get_logger
from .models import (
    CATALOG_SOURCE,
    CandidateJob,
    DiscoveryResult,
    ReferenceJob,
    ScoredCandidate,
    ScrapeResult,
    SearchQuery,
)
from .normalize import dedupe_key
from .provider import DatabaseCandidateProvider
from .scoring import SimilarityScorer, passes_minimum
from .scrapers.common import BrowserPageFetcher, HttpPageFetcher
from .scrapers.extractor import SourceExtractor
from .scrapers.sources import BROWSER, HTTP, get_source

logger = get_logger()


def build_query(reference: ReferenceJob) -> SearchQuery:
    """Search parameters for the external sources, remote postings included."""
    return SearchQuery(
        title=reference.title,
        location=reference.location,
        remote=True,
        keywords=tuple(extract_search_keywords(reference)),
    )


class JobDiscovery:
    """
    Runs one discovery request end to end.

    Args:
        provider: object with fetch_candidates(reference) -> List[CandidateJob]
        scorer: SimilarityScorer
        extractors: source name -> object with .scrape(query) -> ScrapeResult
        settings: Settings (limit, timeouts, catalog-first policy)
        job_lookup: object with get_job_by_id(job_id, owner_id); needed only
            for discover_similar_jobs
    """

    def __init__(
        self,
        provider,
        scorer: SimilarityScorer,
        extractors: Optional[Dict[str, object]] = None,
        settings: Optional[Settings] = None,
        job_lookup=None,
    ):
        self.provider = provider
        self.scorer = scorer
        self.extractors = dict(extractors or {})
        self.settings = settings or Settings()
        self.job_lookup = job_lookup

    def discover_similar_jobs(self, reference_job_id, requester_id, limit: Optional[int] = None) -> List[CandidateJob]:
        """Resolve the requester's saved job, then discover postings like it."""
        if self.job_lookup is None:
            raise ReferenceNotFoundError(reference_job_id, requester_id)
        reference = self.job_lookup.get_job_by_id(reference_job_id, requester_id)
        if reference is None:
            logger.warning("Reference job not found", job_id=reference_job_id, owner_id=requester_id)
            raise ReferenceNotFoundError(reference_job_id, requester_id)
        return self.discover(reference, limit=limit)

    def discover(
        self,
        reference: ReferenceJob,
        limit: Optional[int] = None,
        sources: Optional[Sequence[str]] = None,
    ) -> List[CandidateJob]:
        return self.discover_detailed(reference, limit=limit, sources=sources).jobs

    def discover_detailed(
        self,
        reference: ReferenceJob,
        limit: Optional[int] = None,
        sources: Optional[Sequence[str]] = None,
    ) -> DiscoveryResult:
        """Like discover(), but also returns score breakdowns and per-source reports."""
        limit = self.settings.limit if limit is None else limit
        source_names = list(self.settings.sources if sources is None else sources)
        started = time.monotonic()
        logger.info(f"Discovering jobs similar to {reference.title} at {reference.company}",
                    limit=limit, sources=source_names)

        if self.settings.catalog_first:
            report = self._run([self._catalog_task(reference)])[0]
            ranked = self._rank(reference, report.jobs, limit)
            if ranked:
                logger.info("Catalog produced results; skipping external sources", count=len(ranked))
                return self._finish(ranked, [report], started)
            logger.info("No catalog matches, falling back to external sources")
            tasks = self._source_tasks(source_names, build_query(reference))
            reports = [report] + self._run(tasks)
        else:
            tasks = [self._catalog_task(reference)]
            tasks += self._source_tasks(source_names, build_query(reference))
            reports = self._run(tasks)

        candidates: List[CandidateJob] = []
        for report in reports:
            candidates.extend(report.jobs)
        ranked = self._rank(reference, candidates, limit)
        return self._finish(ranked, reports, started)

    def _catalog_task(self, reference: ReferenceJob) -> Task:
        return Task(CATALOG_SOURCE, lambda: self.provider.fetch_candidates(reference), self.settings.catalog_timeout)

    def _source_tasks(self, names: Sequence[str], query: SearchQuery) -> List[Task]:
        tasks = []
        for name in names:
            extractor = self.extractors.get(name)
            if extractor is None:
                logger.warning("No extractor configured for source", source=name)
                continue
            tasks.append(Task(name, lambda e=extractor: e.scrape(query), getattr(extractor, "timeout", None)))
        return tasks

    def _run(self, tasks: List[Task]) -> List[ScrapeResult]:
        """Settle all tasks and turn each outcome into a ScrapeResult, in task order."""
        for task in tasks:
            logger.record_source_attempt(task.name)

        reports = []
        for outcome in settle_all(tasks):
            if outcome.timed_out:
                report = ScrapeResult.failed(outcome.name, "timed out", SourceUnavailableError.TIMEOUT, outcome.elapsed)
            elif outcome.error is not None:
                report = ScrapeResult.failed(outcome.name, repr(outcome.error), SourceUnavailableError.UNKNOWN,
                                             outcome.elapsed)
            elif isinstance(outcome.value, ScrapeResult):
                report = outcome.value
            else:
                report = ScrapeResult(source=outcome.name, jobs=list(outcome.value or []), elapsed=outcome.elapsed)

            if report.ok:
                logger.record_source_success(report.source)
            else:
                logger.warning(f"Source {report.source} degraded to no results",
                               kind=report.error_kind, error=report.error)
                logger.record_source_failure(report.source, report.error_kind or SourceUnavailableError.UNKNOWN)
            reports.append(report)
        return reports

    def _rank(self, reference: ReferenceJob, candidates: List[CandidateJob], limit: int) -> List[ScoredCandidate]:
        unique: List[CandidateJob] = []
        seen = set()
        for job in candidates:
            key = dedupe_key(job.title, job.company, job.url)
            if key in seen:
                continue
            seen.add(key)
            unique.append(job)

        search_keywords = extract_search_keywords(reference)
        scored = []
        for job in unique:
            breakdown = self.scorer.score(reference, job, search_keywords)
            if passes_minimum(breakdown):
                scored.append(ScoredCandidate(job.with_score(breakdown.score), breakdown))

        # sorted() is stable, so ties keep first-seen order
        scored = sorted(scored, key=lambda s: s.breakdown.score, reverse=True)
        logger.debug("Ranked candidates", candidates=len(candidates), unique=len(unique), kept=len(scored))
        return scored[:max(0, limit)]

    def _finish(self, ranked: List[ScoredCandidate], reports: List[ScrapeResult], started: float) -> DiscoveryResult:
        logger.record_discovery()
        result = DiscoveryResult(
            jobs=[s.job for s in ranked],
            scored=ranked,
            source_reports=reports,
            finished_at=datetime.now(),
        )
        if result.is_empty:
            logger.info("Discovery found no similar jobs", failed_sources=result.failed_sources)
        else:
            logger.info(f"Discovery returned {len(result.jobs)} jobs",
                        elapsed=round(time.monotonic() - started, 2), failed_sources=result.failed_sources)
        return result


def create_discovery(settings: Optional[Settings] = None, store: Optional[CatalogStore] = None) -> JobDiscovery:
    """Wire the production collaborators from settings (read from .env and the environment if omitted)."""
    if settings is None:
        load_env()
        settings = Settings.from_env()
    logger.configure(level=settings.log_level, log_dir=settings.log_dir)
    store = store or CatalogStore(settings.db_path)

    geocoder = NominatimGeocoder(url=settings.geocoder_url, user_agent=settings.geocoder_user_agent)
    scorer = SimilarityScorer(LocationScorer(geocoder))
    provider = DatabaseCandidateProvider(store, query_limit=settings.catalog_query_limit,
                                         timeout=settings.catalog_timeout)

    fetchers = {BROWSER: BrowserPageFetcher(), HTTP: HttpPageFetcher()}
    extractors = {}
    for name in settings.sources:
        config = get_source(name)
        extractors[name] = SourceExtractor(config, fetchers[config.renderer], settings)

    return JobDiscovery(provider, scorer, extractors=extractors, settings=settings, job_lookup=store)
