"""Page-fetch collaborators shared by all sources.

Both fetchers return raw HTML (or JSON text) and raise FetchError on failure.
"""

import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from ..errors import FetchError
from ..logger import get_logger
from ..retry import RetryError, exponential_backoff, should_retry_http_status

logger = get_logger()

SELECTOR_WAIT_MS = 10_000


def _log_retry(attempt, exc, delay):
    logger.debug("Retrying fetch", attempt=attempt, error=str(exc), delay=delay)


@exponential_backoff(
    max_retries=2,
    base_delay=1.0,
    exceptions=(requests.exceptions.Timeout, requests.exceptions.ConnectionError, requests.exceptions.HTTPError),
    on_retry=_log_retry,
)
def _get_with_retry(session: requests.Session, url: str, timeout: float, user_agent: str):
    """GET with automatic retry on transient errors and retryable statuses (429, 5xx)."""
    resp = session.get(url, timeout=timeout, headers={"User-Agent": user_agent})
    if should_retry_http_status(resp.status_code):
        resp.raise_for_status()
    return resp


class HttpPageFetcher:
    """Plain HTTP GET for sources that serve usable HTML or JSON without a browser."""

    def __init__(self, session: requests.Session | None = None):
        self.session = session or requests.Session()

    def fetch(self, url: str, timeout_ms: int, user_agent: str, wait_for: str | None = None,
              settle_delay: float = 0.0) -> str:
        try:
            resp = _get_with_retry(self.session, url, timeout_ms / 1000, user_agent)
            resp.raise_for_status()
            return resp.text
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.warning("Request failed", url=url, status=status)
            raise FetchError(f"Request failed ({status}): {url}", kind="http", status=status) from e
        except RetryError as e:
            cause = e.__cause__
            status = None
            if isinstance(cause, requests.exceptions.HTTPError):
                kind = "http"
                status = cause.response.status_code if cause.response is not None else None
            elif isinstance(cause, requests.exceptions.Timeout):
                kind = "timeout"
            else:
                kind = "network"
            logger.warning("Request gave up after retries", url=url, error=str(cause))
            raise FetchError(f"Request to {url} failed: {cause}", kind=kind, status=status) from e
        except requests.exceptions.RequestException as e:
            logger.error("Request error", url=url, error=str(e))
            raise FetchError(f"Request error: {e}", kind="network") from e


class BrowserPageFetcher:
    """
    Headless Chromium via Playwright for script-rendered result pages.

    Each fetch launches and tears down its own browser, so concurrent
    sources never share a session.
    """

    def __init__(self, headless: bool = True):
        self.headless = headless

    def fetch(self, url: str, timeout_ms: int, user_agent: str, wait_for: str | None = None,
              settle_delay: float = 0.0) -> str:
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(
                    headless=self.headless,
                    args=["--no-sandbox", "--disable-setuid-sandbox"],
                )
                try:
                    context = browser.new_context(user_agent=user_agent)
                    page = context.new_page()
                    page.goto(url, wait_until="networkidle", timeout=timeout_ms)
                    if wait_for:
                        try:
                            page.wait_for_selector(wait_for, timeout=min(SELECTOR_WAIT_MS, timeout_ms))
                        except PlaywrightTimeoutError:
                            logger.warning("Expected element never appeared", url=url, selector=wait_for)
                    if settle_delay > 0:
                        page.wait_for_timeout(settle_delay * 1000)
                    return page.content()
                finally:
                    browser.close()
        except PlaywrightTimeoutError as e:
            logger.warning("Page load timed out", url=url)
            raise FetchError(f"Page load timed out: {url}", kind="timeout") from e
        except PlaywrightError as e:
            logger.error("Browser error", url=url, error=str(e))
            raise FetchError(f"Browser error: {e}", kind="network") from e
