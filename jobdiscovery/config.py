"""Environment-driven settings for discovery runs."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_SOURCES = ("indeed", "linkedin", "glassdoor", "remoteok")
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
DEFAULT_GEOCODER_URL = "https://nominatim.openstreetmap.org/search"


def load_env() -> None:
    """Load .env from the working directory if present."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)


def _int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def _float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


def _bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return tuple(s.strip().lower() for s in raw.split(",") if s.strip())


@dataclass(frozen=True)
class Settings:
    db_path: Path = Path("data/jobs.db")
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    sources: Tuple[str, ...] = DEFAULT_SOURCES
    limit: int = 5
    catalog_first: bool = True
    # Per-renderer overrides; None keeps each source's own timeout
    browser_source_timeout: Optional[float] = None
    http_source_timeout: Optional[float] = None
    catalog_timeout: float = 10.0
    page_load_timeout_ms: int = 30000
    settle_delay: float = 3.0
    catalog_query_limit: int = 20
    # Cap on pages per source; None follows each source's pagination
    max_pages: Optional[int] = None
    user_agent: str = DEFAULT_USER_AGENT
    geocoder_url: str = DEFAULT_GEOCODER_URL
    geocoder_user_agent: str = field(default="jobdiscovery/0.1")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from os.environ (call load_env() first to pick up .env)."""
        return cls(
            db_path=Path(os.getenv("JOBDISCOVERY_DB_PATH", "data/jobs.db")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_dir=Path(os.getenv("LOG_DIR", "logs")),
            sources=_list("DISCOVERY_SOURCES", DEFAULT_SOURCES),
            limit=_int("DISCOVERY_LIMIT", 5),
            catalog_first=_bool("CATALOG_FIRST", True),
            browser_source_timeout=_float("BROWSER_SOURCE_TIMEOUT", None),
            http_source_timeout=_float("HTTP_SOURCE_TIMEOUT", None),
            catalog_timeout=_float("CATALOG_TIMEOUT", 10.0),
            page_load_timeout_ms=_int("PAGE_LOAD_TIMEOUT_MS", 30000),
            settle_delay=_float("SETTLE_DELAY", 3.0),
            catalog_query_limit=_int("CATALOG_QUERY_LIMIT", 20),
            max_pages=_int("MAX_PAGES", None),
            user_agent=os.getenv("SCRAPER_USER_AGENT", DEFAULT_USER_AGENT),
            geocoder_url=os.getenv("GEOCODER_URL", DEFAULT_GEOCODER_URL),
            geocoder_user_agent=os.getenv("GEOCODER_USER_AGENT", "jobdiscovery/0.1"),
        )
