"""
Details for a single posting URL.

Resolution runs in tiers: known selectors, then generic page structure,
then guesses from the URL shape of a few applicant-tracking hosts.
"""

from typing import Optional, Tuple
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from ..config import Settings
from ..errors import FetchError
from ..keywords import infer_experience_level, infer_job_type
from ..logger import get_logger
from ..models import CandidateJob
from .common import HttpPageFetcher
from .extractor import first_match

logger = get_logger()

DETAILS_TIMEOUT_MS = 10_000

TITLE_SELECTORS = (
    "h1[data-testid='job-title']", "h1.job-title", "h1.jobTitle", ".job-title h1",
    "[data-testid='job-title']", ".jobsearch-JobInfoHeader-title", ".job-details h1",
    ".job-header h1", ".job-title", ".jobTitle",
)
COMPANY_SELECTORS = (
    ".company-name", ".companyName", ".employer", "[data-testid='company-name']",
    ".jobsearch-CompanyInfoContainer", ".company", ".employer-name", ".job-company",
    ".company-info",
)
LOCATION_SELECTORS = (
    ".location", ".job-location", ".companyLocation", "[data-testid='job-location']",
    ".jobsearch-JobInfoHeader-subtitle", ".job-details .location", ".workplace",
)
DESCRIPTION_SELECTORS = (
    ".job-description", ".jobDescription", ".description", "[data-testid='job-description']",
    ".jobsearch-jobDescriptionText", ".job-description-content", ".job-details",
    ".job-content", ".description-content",
)
SALARY_SELECTORS = (
    ".salary", ".salaryText", ".compensation", "[data-testid='salary']",
    ".jobsearch-JobMetadataHeader-item", ".salary-range", ".pay", ".wage",
)
COMPANY_META = ("meta[property='og:site_name']", "meta[name='application-name']")

# host fragment -> (platform, index of the id path segment); the company slug is always first
ATS_HOSTS = (
    ("greenhouse.io", "greenhouse", 2),
    ("jobs.lever.co", "lever", 1),
    ("jobs.ashbyhq.com", "ashby", 1),
    ("workable.com", "workable", 2),
)


def _meta_content(el) -> Optional[str]:
    return (el.get("content") or "").strip() or None


def _generic_title(soup) -> Optional[str]:
    for tag in ("h1", "h2", "title"):
        el = soup.find(tag)
        if el and el.get_text(strip=True):
            title = el.get_text(" ", strip=True)
            # Page titles often carry a " - Company" suffix
            if " - " in title:
                title = title.split(" - ")[0].strip()
            return title
    return None


def guess_from_url(url: str) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """Return (platform, company, posting id) guessed from an ATS URL."""
    p = urlparse(url)
    parts = [x for x in p.path.split("/") if x]
    for fragment, platform, id_index in ATS_HOSTS:
        if fragment in p.netloc and parts:
            company = parts[0].replace("-", " ").replace("_", " ").title()
            posting_id = parts[id_index] if len(parts) > id_index else None
            return platform, company, posting_id
    return None, None, None


def parse_job_details(html: str, url: str) -> Optional[CandidateJob]:
    soup = BeautifulSoup(html, "html.parser")

    title = first_match(soup, TITLE_SELECTORS) or _generic_title(soup)
    company = first_match(soup, COMPANY_SELECTORS) or first_match(soup, COMPANY_META, _meta_content)
    platform, url_company, _ = guess_from_url(url)
    if not company:
        company = url_company

    if not title and not company:
        logger.warning("Insufficient job details extracted", url=url)
        return None

    title = title or ""
    company = company or ""
    description = first_match(soup, DESCRIPTION_SELECTORS) or ""
    return CandidateJob(
        title=title,
        company=company,
        description=description,
        location=first_match(soup, LOCATION_SELECTORS) or "",
        url=url,
        source=platform or "other",
        salary=first_match(soup, SALARY_SELECTORS),
        job_type=infer_job_type(title, description),
        experience_level=infer_experience_level(title, description),
    )


def scrape_job_details(url: str, fetcher=None, settings: Optional[Settings] = None) -> Optional[CandidateJob]:
    """Fetch one posting page and extract its fields; None if nothing usable."""
    settings = settings or Settings()
    fetcher = fetcher or HttpPageFetcher()
    try:
        html = fetcher.fetch(url, timeout_ms=DETAILS_TIMEOUT_MS, user_agent=settings.user_agent)
    except FetchError as e:
        logger.error("Error scraping job details", url=url, error=str(e))
        return None

    job = parse_job_details(html, url)
    if job is not None:
        logger.info(f"Scraped details: {job.title} at {job.company}", url=url)
    return job
