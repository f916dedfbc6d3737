"""
Applicant Matching Orchestrator.

Responsibilities:
- Load the job posting.
- Coordinate candidate selection.
- Invoke scoring logic per candidate.
- Apply the minimum score, ranking and limit.

Non-Responsibilities:
- No feature computation.
- No mutation of persistent state.

Invariant:
This module must be deterministic given the same inputs and data snapshot.
A failure while scoring one candidate never aborts the run.
"""

from typing import Dict, Iterable, List, Optional

from ..database import get_session, init_database
from ..logger import get_logger
from ..models import JobPosting, MatchOptions, MatchResult
from ..storage.applications import ApplicationRepository
from ..storage.jobs import JobRepository
from ..storage.resumes import ResumeRepository
from .candidate_pool import CandidatePool
from .scoring import MatchScorer


class JobNotFoundError(LookupError):
    """Raised when a job id does not resolve to a posting."""

    def __init__(self, job_id: str):
        super().__init__(f"Job not found: {job_id}")
        self.job_id = job_id


class MatchingOrchestrator:
    """Ranks the global candidate pool against one job at a time."""

    def __init__(
        self,
        jobs,
        pool: CandidatePool,
        applications=None,
        scorer: Optional[MatchScorer] = None,
        default_options: Optional[MatchOptions] = None,
        logger=None,
    ):
        """
        Args:
            jobs: Repository exposing ``get_job_by_id`` and ``list_open_jobs``
            pool: Candidate pool the résumés are drawn from
            applications: Repository exposing ``applicant_ids``; required only
                for the recommend_* methods
            scorer: Scorer to apply (default: MatchScorer())
            default_options: Options used when a call passes none
            logger: StructuredLogger (default: global logger)
        """
        self.jobs = jobs
        self.pool = pool
        self.applications = applications
        self.scorer = scorer or MatchScorer()
        self.default_options = default_options or MatchOptions()
        self.logger = logger or get_logger()

    @classmethod
    def from_session(cls, session, **kwargs) -> "MatchingOrchestrator":
        """Wire the SQLAlchemy-backed repositories around one session."""
        return cls(
            jobs=JobRepository(session),
            pool=CandidatePool(ResumeRepository(session)),
            applications=ApplicationRepository(session),
            **kwargs,
        )

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "MatchingOrchestrator":
        """Open the configured database and use its default options."""
        init_database(settings.db_path)
        kwargs.setdefault("default_options", settings.match_options())
        return cls.from_session(get_session(settings.db_path), **kwargs)

    def get_matching_applicants(
        self,
        job_id: str,
        options: Optional[MatchOptions] = None,
    ) -> List[MatchResult]:
        """
        Score every eligible candidate against a job and return the best.

        Raises:
            JobNotFoundError: If the job does not exist
        """
        options = options or self.default_options
        job = self.jobs.get_job_by_id(job_id)
        if job is None:
            self.logger.warning("Matching requested for unknown job", job_id=str(job_id))
            raise JobNotFoundError(str(job_id))

        return self._rank(job, options)

    def recommend_new_applicants(
        self,
        job_id: str,
        options: Optional[MatchOptions] = None,
    ) -> List[MatchResult]:
        """Like get_matching_applicants, skipping candidates who already applied."""
        options = options or self.default_options
        applied = self._applicant_ids(job_id)
        return self.get_matching_applicants(job_id, options.excluding(applied))

    def get_bulk_recommendations(
        self,
        job_ids: Iterable[str],
        options: Optional[MatchOptions] = None,
    ) -> Dict[str, List[MatchResult]]:
        """Results per job id; unknown jobs map to an empty list."""
        results: Dict[str, List[MatchResult]] = {}
        for job_id in job_ids:
            try:
                results[str(job_id)] = self.get_matching_applicants(job_id, options)
            except JobNotFoundError:
                results[str(job_id)] = []
        return results

    def recommend_for_business(
        self,
        business_id: str,
        options: Optional[MatchOptions] = None,
    ) -> Dict[str, List[MatchResult]]:
        """New-applicant recommendations for every open job of a business."""
        options = options or self.default_options
        recommendations: Dict[str, List[MatchResult]] = {}
        for job in self.jobs.list_open_jobs(business_id=business_id):
            applied = self._applicant_ids(job.job_id)
            recommendations[job.job_id] = self._rank(job, options.excluding(applied))

        self.logger.info(
            "Business recommendations complete",
            business_id=str(business_id),
            jobs=len(recommendations),
        )
        return recommendations

    def _rank(self, job: JobPosting, options: MatchOptions) -> List[MatchResult]:
        candidates = self.pool.fetch_eligible(options.exclude_applicants)

        results: List[MatchResult] = []
        for resume in candidates:
            try:
                card = self.scorer.score(job, resume)
            except Exception as e:
                self.logger.error(
                    "Scoring failed, candidate skipped",
                    job_id=job.job_id,
                    candidate_id=resume.candidate_id,
                    error=str(e),
                )
                self.logger.record_scoring_failure(type(e).__name__)
                continue

            results.append(MatchResult(
                candidate_id=resume.candidate_id,
                resume_id=resume.resume_id,
                username=resume.username,
                score=card.score,
                reasons=card.reasons,
                breakdown=dict(card.breakdown),
            ))

        scored = len(results)
        results = [r for r in results if r.score >= options.min_score]
        results.sort(key=lambda r: r.score, reverse=True)
        results = results[:options.limit]

        self.logger.record_match_run(scored=scored, returned=len(results))
        self.logger.info(
            "Matching complete",
            job_id=job.job_id,
            pool=len(candidates),
            scored=scored,
            returned=len(results),
            min_score=options.min_score,
            limit=options.limit,
        )
        return results

    def _applicant_ids(self, job_id: str) -> List[str]:
        if self.applications is None:
            raise RuntimeError("An applications repository is required to exclude existing applicants")
        return self.applications.applicant_ids(job_id)
