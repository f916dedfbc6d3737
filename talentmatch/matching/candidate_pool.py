"""
Candidate Selection Logic.

Responsibilities:
- Return every eligible résumé: parsed, with at least one populated
  extracted field, and not excluded by the caller.
- Own the exclusion-list filtering.

Non-Responsibilities:
- No scoring.
- No pagination or limits (the orchestrator truncates after ranking).

Invariant:
The pool is global across all parsed résumés. It is never pre-filtered
by job, so selection can never drop a candidate the scorer would rank.
"""

from typing import Iterable, List

from ..models import ParsedResume


class CandidatePool:
    def __init__(self, resumes):
        """
        Args:
            resumes: Repository exposing ``list_parsed(exclude_ids)``
        """
        self.resumes = resumes

    def fetch_eligible(self, exclude_ids: Iterable[str] = ()) -> List[ParsedResume]:
        excluded = {str(c) for c in exclude_ids}
        return [
            resume
            for resume in self.resumes.list_parsed(exclude_ids=excluded)
            if resume.candidate_id not in excluded and resume.has_parsed_fields()
        ]
