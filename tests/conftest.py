"""
Pytest configuration and shared fixtures.
"""

import pytest
from pathlib import Path
from typing import Dict, Any

from talentmatch.database import init_database, get_session
from talentmatch.logger import StructuredLogger
from talentmatch.models import JobPosting, ParsedResume


@pytest.fixture
def backend_job() -> JobPosting:
    """Senior backend job whose text mentions node.js and sql."""
    return JobPosting(
        job_id="job-backend",
        title="Backend Engineer",
        description="Build services in node.js with sql storage.",
        experience="senior",
        degree="bachelor",
        field="backend",
        business_id="biz-1",
    )


@pytest.fixture
def strong_resume_doc() -> Dict[str, Any]:
    """Parsed output of a candidate who fits the backend job."""
    return {
        "skills": {"technical": ["Node.js", "SQL", "Docker"]},
        "work_experience": [
            {
                "title": "Backend Engineer",
                "description": "Built internal APIs",
                "industry": "backend services",
                "duration": "6 years",
            }
        ],
        "education": [{"degree": "Bachelor of Science in Computer Science"}],
    }


@pytest.fixture
def strong_resume(strong_resume_doc) -> ParsedResume:
    return ParsedResume.from_document("res-strong", "cand-strong", "strong", strong_resume_doc)


@pytest.fixture
def empty_resume() -> ParsedResume:
    return ParsedResume(resume_id="res-empty", candidate_id="cand-empty", username="empty")


@pytest.fixture
def db_path(tmp_path) -> Path:
    path = tmp_path / "talentmatch.db"
    init_database(path)
    return path


@pytest.fixture
def db_session(db_path):
    """Session on a fresh temporary database."""
    session = get_session(db_path)
    yield session
    session.close()


@pytest.fixture
def quiet_logger(tmp_path) -> StructuredLogger:
    """Logger that writes only to a temporary file."""
    return StructuredLogger(
        name="talentmatch-test",
        level="DEBUG",
        log_dir=tmp_path / "logs",
        enable_console=False,
    )
