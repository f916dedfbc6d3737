"""
Resumes Repository.

Responsibilities:
- Read parsed résumés as typed values.
- Replace a candidate's résumé wholesale on re-upload.
- Enforce one username per candidate.

Non-Responsibilities:
- No eligibility decisions beyond "has a parsed document".
- No scoring.
"""

from typing import Any, Iterable, List, Optional

from ..database import ResumeRecord
from ..logger import get_logger
from ..models import ParsedResume
from .transaction import commit

logger = get_logger()


class UsernameConflictError(Exception):
    """Raised when a username already belongs to another candidate."""
    pass


def _to_resume(record: ResumeRecord) -> ParsedResume:
    return ParsedResume.from_document(
        resume_id=record.resume_id,
        candidate_id=record.candidate_id,
        username=record.username,
        parsed_output=record.parsed_output,
    )


class ResumeRepository:
    def __init__(self, session):
        self.session = session

    def list_parsed(self, exclude_ids: Iterable[str] = ()) -> List[ParsedResume]:
        """Résumés that carry a parsed document, minus excluded candidates."""
        query = self.session.query(ResumeRecord).filter(ResumeRecord.parsed_output.isnot(None))
        excluded = [str(c) for c in exclude_ids]
        if excluded:
            query = query.filter(ResumeRecord.candidate_id.notin_(excluded))
        return [_to_resume(r) for r in query.order_by(ResumeRecord.uploaded_at, ResumeRecord.resume_id)]

    def get_by_candidate(self, candidate_id: str) -> Optional[ParsedResume]:
        record = self._find(candidate_id)
        return _to_resume(record) if record is not None else None

    def save_parsed_resume(self, candidate_id: str, username: str, parsed_output: Any) -> ParsedResume:
        """
        Store the parsing service's output for a candidate.

        An existing résumé for the candidate is replaced, including its
        username.

        Raises:
            UsernameConflictError: If the username belongs to another candidate
        """
        candidate_id = str(candidate_id)
        owner = self.session.query(ResumeRecord).filter_by(username=username).first()
        if owner is not None and owner.candidate_id != candidate_id:
            raise UsernameConflictError(
                f"Username '{username}' is already associated with another candidate"
            )

        record = self._find(candidate_id)
        if record is None:
            record = ResumeRecord(candidate_id=candidate_id, username=username)
            self.session.add(record)
            status = "new"
        else:
            record.username = username
            status = "replaced"
        record.parsed_output = parsed_output

        commit(self.session, "save_parsed_resume", candidate_id=candidate_id, username=username)
        logger.info("Stored parsed resume", candidate_id=candidate_id, username=username, status=status)
        return _to_resume(record)

    def delete_resume(self, candidate_id: str) -> bool:
        record = self._find(candidate_id)
        if record is None:
            return False
        self.session.delete(record)
        commit(self.session, "delete_resume", candidate_id=str(candidate_id))
        logger.info("Deleted resume", candidate_id=str(candidate_id))
        return True

    def _find(self, candidate_id: str) -> Optional[ResumeRecord]:
        return self.session.query(ResumeRecord).filter_by(candidate_id=str(candidate_id)).first()
