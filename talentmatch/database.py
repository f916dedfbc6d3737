"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for jobs, parsed résumés and applications.
Parsed résumés keep the parsing service's document as-is in a JSON column.
"""

import uuid
from datetime import datetime
from pathlib import Path
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def _new_id() -> str:
    return uuid.uuid4().hex


class JobRecord(Base):
    """Job posting model."""

    __tablename__ = "jobs"

    job_id = Column(String, primary_key=True, default=_new_id)
    business_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    technique = Column(Text, nullable=False, default="")
    experience = Column(String, nullable=False, default="none")  # none, intern, ... manager
    degree = Column(String, nullable=False, default="none")  # none, high-school, ... phd
    field = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default="open")  # open, closed
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


class ResumeRecord(Base):
    """Parsed résumé of a candidate, one per candidate."""

    __tablename__ = "resumes"

    resume_id = Column(String, primary_key=True, default=_new_id)
    candidate_id = Column(String, nullable=False, unique=True)
    username = Column(String, nullable=False, unique=True)
    parsed_output = Column(JSON(none_as_null=True), nullable=True)
    uploaded_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


class ApplicationRecord(Base):
    """A candidate's application to a job."""

    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("job_id", "candidate_id", name="uq_application"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(String, nullable=False, index=True)
    candidate_id = Column(String, nullable=False)
    applied_at = Column(DateTime, nullable=False, default=datetime.now)


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()
