from typing import Any, Dict, List
from urllib.parse import urlparse

from .models import RawExtractedJob
from .vocabulary import EXPERIENCE_LEVELS, JOB_TYPES

REQUIRED_STR_FIELDS = ["title", "company"]
OPTIONAL_STR_FIELDS = [
    "description",
    "location",
    "job_type",
    "experience_level",
]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _valid_url(v: str) -> bool:
    try:
        p = urlparse(v)
        return bool(p.scheme and p.netloc)
    except ValueError:
        return False


def validate_raw_job(raw: RawExtractedJob) -> List[str]:
    """
    Returns a list of problems with an extracted job card. Empty list means usable.

    A card is unusable only when both title and company are missing; a card
    with one of them is kept and the gap filled downstream.
    """
    errors: List[str] = []
    if not _is_non_empty_str(raw.title) and not _is_non_empty_str(raw.company):
        errors.append("Job card has neither title nor company")
    if raw.url and not _valid_url(raw.url):
        errors.append("Field 'url' must be a valid absolute URL (scheme + host)")
    return errors


def validate_reference(data: Dict[str, Any]) -> List[str]:
    """Validate a reference job record handed over by the job-record lookup."""
    errors: List[str] = []

    for f in REQUIRED_STR_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    for f in OPTIONAL_STR_FIELDS:
        if data.get(f) is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    if data.get("job_type") and data["job_type"] not in JOB_TYPES:
        errors.append(f"Field 'job_type' must be one of {', '.join(JOB_TYPES)}")
    if data.get("experience_level") and data["experience_level"] not in EXPERIENCE_LEVELS:
        errors.append(f"Field 'experience_level' must be one of {', '.join(EXPERIENCE_LEVELS)}")

    skills = data.get("skills")
    if skills is not None and (
        not isinstance(skills, (list, tuple)) or not all(isinstance(s, str) for s in skills)
    ):
        errors.append("Field 'skills' must be a list of strings if provided")

    return errors
