"""
Jobs Repository.

Responsibilities:
- Read job postings by id and by owning business.
- Validated, transaction-safe writes of job postings.

Non-Responsibilities:
- No scoring.
- No candidate selection.
"""

from typing import Any, Dict, List, Optional

from ..database import JobRecord
from ..logger import get_logger
from ..models import JobPosting
from ..normalize import normalize_text
from ..schema import validate_job
from .transaction import commit

logger = get_logger()


def _to_posting(record: JobRecord) -> JobPosting:
    return JobPosting(
        job_id=record.job_id,
        title=record.title or "",
        description=record.description or "",
        technique=record.technique or "",
        experience=record.experience or "",
        degree=record.degree or "",
        field=record.field or "",
        business_id=record.business_id,
        status=record.status or "open",
    )


class JobRepository:
    def __init__(self, session):
        self.session = session

    def get_job_by_id(self, job_id: str) -> Optional[JobPosting]:
        record = self.session.get(JobRecord, str(job_id))
        return _to_posting(record) if record is not None else None

    def list_open_jobs(self, business_id: Optional[str] = None) -> List[JobPosting]:
        """Open jobs, optionally for one business, oldest first."""
        query = self.session.query(JobRecord).filter(JobRecord.status != "closed")
        if business_id is not None:
            query = query.filter(JobRecord.business_id == str(business_id))
        return [_to_posting(r) for r in query.order_by(JobRecord.created_at, JobRecord.job_id)]

    def save_job(self, data: Dict[str, Any], job_id: Optional[str] = None) -> JobPosting:
        """
        Insert or update a job posting.

        Args:
            data: Job fields (title, business_id, description, technique,
                experience, degree, field, status)
            job_id: Existing job to update; a new id is generated when omitted

        Raises:
            ValueError: If the data fails validation
        """
        errors = validate_job(data)
        if errors:
            logger.warning("Rejected job posting", errors=errors)
            raise ValueError("; ".join(errors))

        record = self.session.get(JobRecord, str(job_id)) if job_id is not None else None
        if record is None:
            record = JobRecord(job_id=str(job_id)) if job_id is not None else JobRecord()
            self.session.add(record)

        record.business_id = data["business_id"].strip()
        record.title = data["title"].strip()
        for name in ("description", "technique", "field"):
            record_value = data.get(name)
            setattr(record, name, record_value.strip() if isinstance(record_value, str) else "")
        record.experience = normalize_text(data.get("experience")) or "none"
        record.degree = normalize_text(data.get("degree")) or "none"
        record.status = normalize_text(data.get("status")) or "open"

        commit(self.session, "save_job", job_id=record.job_id)
        logger.debug("Saved job posting", job_id=record.job_id, business_id=record.business_id)
        return _to_posting(record)
