"""
Declarative per-source configuration.

Every field selector is an ordered tuple of CSS alternatives; the extractor
tries them in turn and keeps the first non-empty match.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from .remoteok import parse_remoteok

BROWSER = "browser"
HTTP = "http"


@dataclass(frozen=True)
class SelectorSet:
    job_card: Tuple[str, ...]
    title: Tuple[str, ...]
    company: Tuple[str, ...]
    location: Tuple[str, ...] = ()
    description: Tuple[str, ...] = ()
    url: Tuple[str, ...] = ()
    salary: Tuple[str, ...] = ()
    posted_date: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Pagination:
    next_link: Tuple[str, ...]
    max_pages: int = 1


@dataclass(frozen=True)
class SourceConfig:
    """
    How to search one external site.

    keyword_param / location_param name the query-string keys; remote_params
    are added when the query asks for remote roles, location_extra_params
    whenever a location is given. A parser overrides HTML card extraction
    for API-style sources; use_search_keyword sends the first search keyword
    instead of the title, for tag-based APIs.
    """

    name: str
    base_url: str
    search_path: str
    keyword_param: str
    selectors: Optional[SelectorSet] = None
    location_param: Optional[str] = None
    remote_params: Dict[str, str] = field(default_factory=dict)
    location_extra_params: Dict[str, str] = field(default_factory=dict)
    pagination: Optional[Pagination] = None
    renderer: str = BROWSER
    timeout: float = 30.0
    parser: Optional[Callable] = None
    use_search_keyword: bool = False


INDEED = SourceConfig(
    name="indeed",
    base_url="https://www.indeed.com",
    search_path="/jobs",
    keyword_param="q",
    location_param="l",
    remote_params={"sc": "0kf:attr(DSQF7);"},
    selectors=SelectorSet(
        job_card=(".job_seen_beacon", ".jobsearch-ResultsList > li", "div.cardOutline"),
        title=("h2.jobTitle a span[title]", "h2.jobTitle span", "h2.jobTitle"),
        company=(".companyName", "[data-testid='company-name']"),
        location=(".companyLocation", "[data-testid='text-location']"),
        description=(".job-snippet", "[data-testid='jobsnippet_footer']"),
        url=("h2.jobTitle a", "a.jcs-JobTitle"),
        salary=(".salary-snippet", ".salary-snippet-container", "[data-testid='attribute_snippet_testid']"),
        posted_date=(".date", "[data-testid='myJobsStateDate']"),
    ),
    pagination=Pagination(next_link=("a[aria-label='Next Page']", "a[data-testid='pagination-page-next']"), max_pages=5),
    renderer=BROWSER,
    timeout=30.0,
)

LINKEDIN = SourceConfig(
    name="linkedin",
    base_url="https://www.linkedin.com",
    search_path="/jobs/search",
    keyword_param="keywords",
    location_param="location",
    remote_params={"f_WT": "2"},
    selectors=SelectorSet(
        job_card=(".jobs-search-results__list-item", "ul.jobs-search__results-list > li", "div.base-search-card"),
        title=(".job-search-card__title a", ".base-search-card__title", "h3"),
        company=(".job-search-card__subtitle-link", ".base-search-card__subtitle a", "h4"),
        location=(".job-search-card__location",),
        description=(".job-search-card__snippet",),
        url=(".job-search-card__title a", "a.base-card__full-link"),
        salary=(".job-search-card__salary", ".job-search-card__salary-info"),
        posted_date=("time",),
    ),
    pagination=Pagination(next_link=("button[aria-label='Next']",), max_pages=3),
    renderer=BROWSER,
    timeout=30.0,
)

GLASSDOOR = SourceConfig(
    name="glassdoor",
    base_url="https://www.glassdoor.com",
    search_path="/Job/jobs.htm",
    keyword_param="sc.keyword",
    location_param="locId",
    location_extra_params={"locT": "C"},
    selectors=SelectorSet(
        job_card=(".react-job-listing", "li[data-test='jobListing']"),
        title=(".jobLink", "[data-test='job-title']"),
        company=(".jobInfoItem .employerName", "[data-test='employer-name']"),
        location=(".jobInfoItem .loc", "[data-test='emp-location']"),
        description=(".jobDescriptionContent", "[data-test='descSnippet']"),
        url=(".jobLink", "a[data-test='job-link']"),
        salary=(".salaryText", "[data-test='detailSalary']"),
        posted_date=(".jobAge", "[data-test='job-age']"),
    ),
    pagination=Pagination(next_link=(".nextButton", "button[data-test='pagination-next']"), max_pages=3),
    renderer=BROWSER,
    timeout=30.0,
)


REMOTEOK = SourceConfig(
    name="remoteok",
    base_url="https://remoteok.com",
    search_path="/api",
    keyword_param="tag",
    renderer=HTTP,
    timeout=15.0,
    parser=parse_remoteok,
    use_search_keyword=True,
)


def source_registry() -> Dict[str, SourceConfig]:
    return {
        INDEED.name: INDEED,
        LINKEDIN.name: LINKEDIN,
        GLASSDOOR.name: GLASSDOOR,
        REMOTEOK.name: REMOTEOK,
    }


def get_source(name: str) -> SourceConfig:
    registry = source_registry()
    try:
        return registry[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown job source: {name}. Known sources: {', '.join(registry)}")
