"""
Pytest configuration and shared fixtures.
"""

import json
import time
from typing import Dict, List, Optional

import pytest
import requests

from jobdiscovery.logger import get_logger

# Create the shared logger before any module grabs it, so tests write no log files
get_logger(enable_file=False)

from jobdiscovery.catalog import CatalogStore  # noqa: E402
from jobdiscovery.geocoding import Coordinates  # noqa: E402
from jobdiscovery.location import LocationScorer  # noqa: E402
from jobdiscovery.models import CandidateJob, ReferenceJob, ScrapeResult  # noqa: E402
from jobdiscovery.scoring import SimilarityScorer  # noqa: E402


class FakeGeocoder:
    """Geocoder answering from a fixed table; unknown addresses return None."""

    def __init__(self, table: Optional[Dict[str, Coordinates]] = None):
        self.table = table or {}
        self.calls: List[str] = []

    def geocode(self, address):
        self.calls.append(address)
        return self.table.get(address)


class RaisingGeocoder:
    """Geocoder whose every lookup raises the given error."""

    def __init__(self, error: Exception):
        self.error = error

    def geocode(self, address):
        raise self.error


class FakeResponse:
    def __init__(self, payload=None, status=200, text=""):
        self.payload = payload
        self.status_code = status
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        return self.payload


class FakeSession:
    """requests.Session stand-in replaying responses; the last one repeats."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append(params)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item


class FakeFetcher:
    """Page fetcher serving canned pages by URL prefix, in registration order."""

    def __init__(self, pages: Optional[Dict[str, str]] = None, error: Optional[Exception] = None,
                 delay: float = 0.0):
        self.pages = pages or {}
        self.error = error
        self.delay = delay
        self.urls: List[str] = []

    def fetch(self, url, timeout_ms, user_agent, wait_for=None, settle_delay=0.0):
        self.urls.append(url)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        for prefix, body in self.pages.items():
            if url.startswith(prefix):
                return body
        return "<html><body></body></html>"


class StubExtractor:
    """Source extractor returning fixed jobs, optionally slowly or by raising."""

    def __init__(self, name: str, jobs=None, delay: float = 0.0, error: Optional[Exception] = None,
                 timeout: Optional[float] = None):
        self.name = name
        self.jobs = jobs or []
        self.delay = delay
        self.error = error
        self.timeout = timeout
        self.queries = []

    def scrape(self, query):
        self.queries.append(query)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return ScrapeResult(source=self.name, jobs=list(self.jobs))


class StubProvider:
    """Catalog provider returning fixed candidates."""

    def __init__(self, jobs=None, error: Optional[Exception] = None):
        self.jobs = jobs or []
        self.error = error
        self.calls = 0

    def fetch_candidates(self, reference):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.jobs)


def make_candidate(title, company, source="catalog", description="", location="Remote", **extra) -> CandidateJob:
    return CandidateJob(
        title=title,
        company=company,
        description=description,
        location=location,
        url=extra.pop("url", f"https://jobs.example.com/{title.lower().replace(' ', '-')}"),
        source=source,
        **extra,
    )


@pytest.fixture
def fake_geocoder() -> FakeGeocoder:
    return FakeGeocoder({
        "San Francisco, CA": Coordinates(37.7749, -122.4194),
        "Oakland, CA": Coordinates(37.8044, -122.2712),
        "San Jose, CA": Coordinates(37.3382, -121.8863),
        "New York, NY": Coordinates(40.7128, -74.0060),
    })


@pytest.fixture
def scorer(fake_geocoder) -> SimilarityScorer:
    return SimilarityScorer(LocationScorer(fake_geocoder))


@pytest.fixture
def reference_job() -> ReferenceJob:
    """Software engineer reference posting."""
    return ReferenceJob(
        id="1",
        title="Software Engineer",
        company="Acme",
        description="Python and Django services on AWS with Docker",
        location="Remote",
        job_type="full-time",
        experience_level="mid",
        skills=("Python", "Django", "AWS"),
    )


@pytest.fixture
def catalog(tmp_path) -> CatalogStore:
    """Empty SQLite catalog in a temp directory."""
    return CatalogStore(tmp_path / "catalog.db")


@pytest.fixture
def sample_indeed_html() -> str:
    """Indeed results page with three cards, one of them empty, and a next link."""
    return """
    <html>
    <body>
        <ul class="jobsearch-ResultsList">
            <li>
                <div class="job_seen_beacon">
                    <h2 class="jobTitle"><a href="/rc/clk?jk=abc123"><span title="Backend Engineer">Backend Engineer</span></a></h2>
                    <span class="companyName">Globex Corp</span>
                    <div class="companyLocation">Remote</div>
                    <div class="job-snippet">Build   Python APIs
                        on AWS. Full-time role.</div>
                    <div class="salary-snippet">$120,000 - $150,000 a year</div>
                    <span class="date">Posted 3 days ago</span>
                </div>
            </li>
            <li>
                <div class="job_seen_beacon">
                    <h2 class="jobTitle"><a href="https://www.indeed.com/viewjob?jk=def456"><span title="Senior Python Developer">Senior Python Developer</span></a></h2>
                    <span class="companyName">Initech</span>
                    <div class="companyLocation">Austin, TX</div>
                    <div class="job-snippet">Django and PostgreSQL</div>
                </div>
            </li>
            <li>
                <div class="job_seen_beacon">
                    <div class="companyLocation">Nowhere</div>
                </div>
            </li>
        </ul>
        <nav><a aria-label="Next Page" href="/jobs?q=engineer&amp;start=10">Next</a></nav>
    </body>
    </html>
    """


@pytest.fixture
def sample_linkedin_html() -> str:
    """LinkedIn guest results page using the base-search-card markup."""
    return """
    <html>
    <body>
        <ul class="jobs-search__results-list">
            <li>
                <div class="base-search-card">
                    <a class="base-card__full-link" href="https://www.linkedin.com/jobs/view/111"></a>
                    <h3 class="base-search-card__title">Platform Engineer</h3>
                    <h4 class="base-search-card__subtitle"><a href="/company/hooli">Hooli</a></h4>
                    <span class="job-search-card__location">San Francisco, CA</span>
                    <time datetime="2024-05-01">1 week ago</time>
                </div>
            </li>
        </ul>
    </body>
    </html>
    """


@pytest.fixture
def sample_glassdoor_html() -> str:
    """Glassdoor results page with a card missing its company."""
    return """
    <html>
    <body>
        <ul>
            <li data-test="jobListing">
                <a data-test="job-title" href="/partner/jobListing.htm?id=9">Data Analyst</a>
                <span data-test="emp-location">New York, NY</span>
            </li>
        </ul>
    </body>
    </html>
    """


@pytest.fixture
def sample_remoteok_json() -> str:
    """RemoteOK feed: legal notice first, then two jobs."""
    return json.dumps([
        {"legal": "API Terms of Service"},
        {
            "id": "1",
            "position": "Senior Backend Engineer",
            "company": "Umbrella",
            "location": "",
            "description": "<p>Work with <b>Python</b> and Kubernetes</p>",
            "tags": ["python", "kubernetes"],
            "url": "https://remoteok.com/remote-jobs/1",
            "salary_min": 100000,
            "salary_max": 140000,
            "date": "2024-05-01T00:00:00+00:00",
        },
        {
            "id": "2",
            "position": "Frontend Developer",
            "company": "Stark",
            "location": "Worldwide",
            "description": "",
            "url": "https://remoteok.com/remote-jobs/2",
        },
    ])


@pytest.fixture
def sample_details_html() -> str:
    """Single posting page with explicit selectors."""
    return """
    <html>
    <head><title>Staff Engineer - Wayne Enterprises</title></head>
    <body>
        <div class="job-header">
            <h1 class="job-title">Staff Engineer</h1>
            <div class="company-name">Wayne Enterprises</div>
            <div class="job-location">Gotham, NJ</div>
        </div>
        <div class="job-description">
            Lead   the platform team.
            Contract position.
        </div>
        <div class="salary">$200k</div>
    </body>
    </html>
    """
