"""
Generic search-results extractor driven by a SourceConfig.

SourceExtractor.scrape() never raises: fetch failures, parse failures and
timeouts all come back as an empty ScrapeResult with error set.
"""

import time
from typing import Callable, List, Optional, Sequence, Tuple
from urllib.parse import urlencode

from bs4 import BeautifulSoup

from ..concurrency import run_with_timeout
from ..config import Settings
from ..errors import FetchError, MalformedExtractionError, SourceUnavailableError
from ..keywords import infer_experience_level, infer_job_type
from ..logger import get_logger
from ..models import CandidateJob, RawExtractedJob, ScrapeResult, SearchQuery
from ..normalize import absolute_url
from ..retry import is_transient_error
from ..schema import validate_raw_job
from .sources import BROWSER, SourceConfig

logger = get_logger()


def build_search_url(config: SourceConfig, query: SearchQuery) -> str:
    """Merge the query into the source's URL scheme."""
    keyword = query.title
    if config.use_search_keyword and query.keywords:
        keyword = query.keywords[0]

    params = {config.keyword_param: keyword}
    if query.location and config.location_param:
        params[config.location_param] = query.location
        params.update(config.location_extra_params)
    if query.remote:
        params.update(config.remote_params)
    return f"{config.base_url}{config.search_path}?{urlencode(params)}"


def _text(el) -> Optional[str]:
    text = " ".join(el.get_text(" ", strip=True).split())
    return text or None


def _href(el) -> Optional[str]:
    if el.get("href"):
        return el["href"]
    link = el.find("a", href=True) or el.find_parent("a", href=True)
    return link["href"] if link else None


def first_match(node, selectors: Sequence[str], extract: Callable = _text) -> Optional[str]:
    """Try each selector in order; return the first non-empty extracted value."""
    for selector in selectors:
        el = node.select_one(selector)
        if el is None:
            continue
        value = extract(el)
        if value:
            return value
    return None


def parse_results_page(html: str, config: SourceConfig, page_url: str) -> Tuple[List[RawExtractedJob], Optional[str]]:
    """Extract job cards and the next-page link from one results page."""
    soup = BeautifulSoup(html, "html.parser")
    selectors = config.selectors

    cards = []
    for selector in selectors.job_card:
        cards = soup.select(selector)
        if cards:
            break
    if not cards:
        logger.warning("No job cards found", source=config.name, url=page_url)

    jobs: List[RawExtractedJob] = []
    for card in cards:
        href = first_match(card, selectors.url, _href)
        jobs.append(RawExtractedJob(
            source=config.name,
            title=first_match(card, selectors.title),
            company=first_match(card, selectors.company),
            location=first_match(card, selectors.location),
            description=first_match(card, selectors.description),
            url=absolute_url(href, page_url) or None,
            salary=first_match(card, selectors.salary),
            posted_date=first_match(card, selectors.posted_date),
        ))

    next_url = None
    if config.pagination:
        next_href = first_match(soup, config.pagination.next_link, _href)
        if next_href:
            next_url = absolute_url(next_href, page_url)
    return jobs, next_url


def to_candidate(raw: RawExtractedJob) -> Optional[CandidateJob]:
    """Validate and enrich a raw card; None if the card is unusable."""
    errors = validate_raw_job(raw)
    if errors:
        logger.debug("Skipping job card", source=raw.source, errors=errors)
        return None

    title = " ".join((raw.title or "").split())
    company = " ".join((raw.company or "").split())
    description = " ".join((raw.description or "").split())
    return CandidateJob(
        title=title,
        company=company,
        description=description,
        location=(raw.location or "").strip(),
        url=raw.url or "",
        source=raw.source,
        salary=raw.salary,
        job_type=infer_job_type(title, description),
        experience_level=infer_experience_level(title, description),
        posted_date=raw.posted_date,
    )


class SourceExtractor:
    """Searches one external source and returns a ScrapeResult."""

    def __init__(self, config: SourceConfig, fetcher, settings: Optional[Settings] = None,
                 timeout: Optional[float] = None):
        self.config = config
        self.fetcher = fetcher
        self.settings = settings or Settings()
        if timeout is None:
            override = (
                self.settings.browser_source_timeout
                if config.renderer == BROWSER
                else self.settings.http_source_timeout
            )
            timeout = config.timeout if override is None else override
        self.timeout = timeout

    @property
    def name(self) -> str:
        return self.config.name

    def scrape(self, query: SearchQuery) -> ScrapeResult:
        started = time.monotonic()
        try:
            jobs, has_more = run_with_timeout(self._scrape_pages, self.timeout, query)
        except TimeoutError:
            return self._failed(f"timed out after {self.timeout:g}s", SourceUnavailableError.TIMEOUT, started)
        except FetchError as e:
            return self._failed(str(e), e.kind, started)
        except MalformedExtractionError as e:
            return self._failed(str(e), SourceUnavailableError.PARSE, started)
        except Exception as e:
            # Boundary of the source: anything unexpected degrades to no results
            logger.error("Unexpected scraper failure", source=self.name, error=repr(e), transient=is_transient_error(e))
            return self._failed(repr(e), SourceUnavailableError.UNKNOWN, started)

        elapsed = time.monotonic() - started
        logger.info(f"Scraped {len(jobs)} jobs from {self.name}", elapsed=round(elapsed, 2))
        return ScrapeResult(source=self.name, jobs=jobs, has_more=has_more, elapsed=elapsed)

    def _failed(self, message: str, kind: str, started: float) -> ScrapeResult:
        logger.warning(f"Source {self.name} unavailable", kind=kind, error=message)
        return ScrapeResult.failed(self.name, message, kind, elapsed=time.monotonic() - started)

    def _scrape_pages(self, query: SearchQuery) -> Tuple[List[CandidateJob], bool]:
        url = build_search_url(self.config, query)
        max_pages = 1
        if self.config.pagination:
            max_pages = self.config.pagination.max_pages
            if self.settings.max_pages is not None:
                max_pages = min(max_pages, self.settings.max_pages)
            max_pages = max(1, max_pages)
        wait_for = self.config.selectors.job_card[0] if self.config.selectors else None

        jobs: List[CandidateJob] = []
        next_url = None
        for page in range(max_pages):
            logger.debug(f"Fetching {self.name} page", page=page + 1, url=url)
            html = self.fetcher.fetch(
                url,
                timeout_ms=self.settings.page_load_timeout_ms,
                user_agent=self.settings.user_agent,
                wait_for=wait_for,
                settle_delay=self.settings.settle_delay if self.config.renderer == BROWSER else 0.0,
            )
            if self.config.parser is not None:
                raw_jobs, next_url = self.config.parser(html, self.name), None
            else:
                raw_jobs, next_url = parse_results_page(html, self.config, url)

            for raw in raw_jobs:
                candidate = to_candidate(raw)
                if candidate is not None:
                    jobs.append(candidate)
            if not next_url:
                break
            url = next_url
        return jobs, next_url is not None
