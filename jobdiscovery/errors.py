"""
Error taxonomy for candidate discovery.

Only ReferenceNotFoundError is meant to reach callers of the orchestrator;
the others are recovered where they happen and turned into degraded results.
"""


class DiscoveryError(Exception):
    """Base class for all discovery errors."""


class ConfigError(DiscoveryError):
    """Raised when an environment setting cannot be parsed."""


class ReferenceNotFoundError(DiscoveryError):
    """The reference job id did not resolve for the requesting owner."""

    def __init__(self, job_id, owner_id=None):
        self.job_id = job_id
        self.owner_id = owner_id
        super().__init__(f"Reference job not found: {job_id}")


class FetchError(DiscoveryError):
    """Raised by page-fetch collaborators when a page cannot be loaded."""

    def __init__(self, message: str, kind: str = "network", status=None):
        self.kind = kind
        self.status = status
        super().__init__(message)


class SourceUnavailableError(DiscoveryError):
    """A single source failed or ran past its budget."""

    TIMEOUT = "timeout"
    HTTP = "http"
    NETWORK = "network"
    PARSE = "parse"
    UNKNOWN = "unknown"

    def __init__(self, source: str, message: str, kind: str = UNKNOWN):
        self.source = source
        self.kind = kind
        super().__init__(f"{source}: {message}")


class MalformedExtractionError(DiscoveryError):
    """A job card was found but its required fields could not be resolved."""


class GeocodeUnavailableError(DiscoveryError):
    """The geocoding service could not be reached or returned garbage."""
