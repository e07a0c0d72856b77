"""RemoteOK: public JSON feed of remote jobs, filtered by a single tag.

Docs: https://remoteok.com/api
"""

import json
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from ..errors import MalformedExtractionError
from ..models import RawExtractedJob


def _salary(hit: Dict[str, Any]) -> str | None:
    low, high = hit.get("salary_min"), hit.get("salary_max")
    try:
        if low and high:
            return f"${int(low):,} - ${int(high):,}"
        if low:
            return f"${int(low):,}+"
    except (TypeError, ValueError):
        # Free-text amounts such as "80k" are dropped, the job is kept.
        return None
    return None


def parse_remoteok(text: str, source: str = "remoteok") -> List[RawExtractedJob]:
    """Turn the RemoteOK feed into raw job records.

    The first element of the feed is a legal notice, not a job; it and any
    other entry without a position are skipped.
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        raise MalformedExtractionError(f"RemoteOK returned invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise MalformedExtractionError("RemoteOK feed is not a list")

    jobs: List[RawExtractedJob] = []
    for hit in data:
        if not isinstance(hit, dict) or not hit.get("position"):
            continue
        description = hit.get("description") or ""
        if description:
            description = BeautifulSoup(description, "html.parser").get_text(" ", strip=True)
        tags = hit.get("tags") or []
        if tags:
            description = f"{description} {' '.join(tags)}".strip()
        jobs.append(RawExtractedJob(
            source=source,
            title=hit.get("position"),
            company=hit.get("company"),
            location=hit.get("location") or "Remote",
            description=description,
            url=hit.get("url") or hit.get("apply_url"),
            salary=_salary(hit),
            posted_date=hit.get("date"),
        ))
    return jobs
