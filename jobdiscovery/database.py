"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for the job catalog and for saved reference jobs.
"""

from datetime import datetime
from pathlib import Path

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class CatalogJob(Base):
    """A searchable posting in the internal catalog."""

    __tablename__ = "available_jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    company = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String(200), nullable=False, default="")
    url = Column(String, nullable=False)
    salary = Column(String(100), nullable=True)
    job_type = Column(String, nullable=True)  # full-time, part-time, contract, internship, remote
    experience_level = Column(String, nullable=True)  # entry, mid, senior, lead, executive
    skills = Column(JSON, nullable=False, default=list)
    is_remote = Column(Boolean, nullable=False, default=False)
    posted_date = Column(DateTime, nullable=True, default=datetime.now)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


class SavedJob(Base):
    """A posting a user saved; the anchor of a discovery request."""

    __tablename__ = "saved_jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String, nullable=False, index=True)
    title = Column(String(200), nullable=False)
    company = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String(200), nullable=True)
    url = Column(String, nullable=True)
    job_type = Column(String, nullable=True)
    experience_level = Column(String, nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=datetime.now)


def get_engine(db_path: Path):
    # Catalog queries run on worker threads
    return create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(get_engine(db_path))


def get_session_factory(db_path: Path):
    """
    Get a session factory bound to the database.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy sessionmaker; call it for a new session
    """
    return sessionmaker(bind=get_engine(db_path))
