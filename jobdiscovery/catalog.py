"""
SQLAlchemy-backed catalog store and saved-job lookup.

Each call opens its own session so the store can be queried from several
worker threads at once.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, or_

from .database import CatalogJob, SavedJob, get_session_factory, init_database
from .logger import get_logger
from .models import CATALOG_SOURCE, CandidateJob, ReferenceJob
from .normalize import is_remote
from .schema import validate_reference

logger = get_logger()


def _like(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _to_candidate(row: CatalogJob) -> CandidateJob:
    return CandidateJob(
        title=row.title,
        company=row.company,
        description=row.description or "",
        location=row.location or "",
        url=row.url,
        source=CATALOG_SOURCE,
        salary=row.salary,
        job_type=row.job_type,
        experience_level=row.experience_level,
        posted_date=row.posted_date.isoformat() if row.posted_date else None,
        skills=list(row.skills or []),
        catalog_id=row.id,
    )


class CatalogStore:
    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        init_database(self.db_path)
        self._Session = get_session_factory(self.db_path)

    def search_jobs(
        self,
        title: Optional[str] = None,
        company: Optional[str] = None,
        location: Optional[str] = None,
        limit: int = 20,
    ) -> List[CandidateJob]:
        """
        Case-insensitive catalog search, newest first.

        Every word of title must appear in the posting's title or description;
        company and location match as substrings. Omitted filters match all.
        """
        filters = []
        for word in (title or "").split():
            pattern = _like(word)
            filters.append(or_(
                CatalogJob.title.ilike(pattern, escape="\\"),
                CatalogJob.description.ilike(pattern, escape="\\"),
            ))
        if company:
            filters.append(CatalogJob.company.ilike(_like(company), escape="\\"))
        if location:
            filters.append(CatalogJob.location.ilike(_like(location), escape="\\"))

        session = self._Session()
        try:
            query = session.query(CatalogJob)
            if filters:
                query = query.filter(and_(*filters))
            rows = (
                query.order_by(CatalogJob.created_at.desc(), CatalogJob.id.desc())
                .limit(limit)
                .all()
            )
            return [_to_candidate(r) for r in rows]
        finally:
            session.close()

    def add_job(self, **fields: Any) -> int:
        """Insert a catalog posting and return its id."""
        fields.setdefault("is_remote", is_remote(fields.get("location")))
        session = self._Session()
        try:
            job = CatalogJob(**fields)
            session.add(job)
            session.commit()
            logger.debug("Added catalog job", id=job.id, title=job.title, company=job.company)
            return job.id
        finally:
            session.close()

    def save_reference(self, owner_id: str, **fields: Any) -> int:
        """Store a saved job for owner_id and return its id."""
        session = self._Session()
        try:
            job = SavedJob(owner_id=owner_id, **fields)
            session.add(job)
            session.commit()
            return job.id
        finally:
            session.close()

    def get_job_by_id(self, job_id: Any, owner_id: str) -> Optional[ReferenceJob]:
        """Resolve a saved job owned by owner_id, or None."""
        try:
            pk = int(job_id)
        except (TypeError, ValueError):
            return None

        session = self._Session()
        try:
            row = session.query(SavedJob).filter_by(id=pk, owner_id=str(owner_id)).first()
            if row is None:
                return None
            return ReferenceJob(
                id=str(row.id),
                title=row.title,
                company=row.company,
                description=row.description or "",
                location=row.location,
                job_type=row.job_type,
                experience_level=row.experience_level,
                skills=tuple(row.skills or ()),
            )
        finally:
            session.close()


def reference_from_dict(data: Dict[str, Any]) -> ReferenceJob:
    """Build a ReferenceJob from a plain record (e.g. an API payload)."""
    errors = validate_reference(data)
    if errors:
        raise ValueError("Invalid reference job: " + "; ".join(errors))
    return ReferenceJob(
        id=str(data["id"]) if data.get("id") is not None else None,
        title=data.get("title", ""),
        company=data.get("company", ""),
        description=data.get("description") or "",
        location=data.get("location"),
        job_type=data.get("job_type"),
        experience_level=data.get("experience_level"),
        skills=tuple(data.get("skills") or ()),
    )
