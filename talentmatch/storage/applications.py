"""
Applications Repository.

Responsibilities:
- Record that a candidate applied to a job (idempotent).
- List the candidates who already applied to a job.
"""

from typing import List

from ..database import ApplicationRecord
from .transaction import commit


class ApplicationRepository:
    def __init__(self, session):
        self.session = session

    def record_application(self, job_id: str, candidate_id: str) -> bool:
        """Returns True when a new application was stored."""
        existing = (
            self.session.query(ApplicationRecord)
            .filter_by(job_id=str(job_id), candidate_id=str(candidate_id))
            .first()
        )
        if existing is not None:
            return False
        self.session.add(ApplicationRecord(job_id=str(job_id), candidate_id=str(candidate_id)))
        commit(self.session, "record_application", job_id=str(job_id), candidate_id=str(candidate_id))
        return True

    def applicant_ids(self, job_id: str) -> List[str]:
        rows = (
            self.session.query(ApplicationRecord.candidate_id)
            .filter_by(job_id=str(job_id))
            .distinct()
            .order_by(ApplicationRecord.candidate_id)
        )
        return [candidate_id for (candidate_id,) in rows]
