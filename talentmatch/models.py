"""
Value types shared by the storage layer and the matching engine.

All types are immutable. Constructors that read stored documents
(``from_document``) never raise on malformed input; bad fields become
empty values so one broken résumé cannot stop a matching run.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from .normalize import as_list, as_text, unique_texts


@dataclass(frozen=True)
class JobPosting:
    """A job posting as the matching engine sees it."""
    job_id: str
    title: str = ""
    description: str = ""
    technique: str = ""
    experience: str = ""
    degree: str = ""
    field: str = ""
    business_id: Optional[str] = None
    status: str = "open"

    @classmethod
    def from_document(cls, job_id: str, data: Dict[str, Any]) -> "JobPosting":
        return cls(
            job_id=str(job_id),
            title=as_text(data.get("title")),
            description=as_text(data.get("description")),
            technique=as_text(data.get("technique")),
            experience=as_text(data.get("experience")),
            degree=as_text(data.get("degree")),
            field=as_text(data.get("field")),
            business_id=data.get("business_id"),
            status=as_text(data.get("status")) or "open",
        )


@dataclass(frozen=True)
class WorkExperience:
    title: str = ""
    description: str = ""
    industry: str = ""
    duration: str = ""


@dataclass(frozen=True)
class EducationEntry:
    degree: str = ""


@dataclass(frozen=True)
class ParsedResume:
    """Structured extraction of one candidate's résumé."""
    resume_id: str
    candidate_id: str
    username: str = ""
    technical_skills: Tuple[str, ...] = ()
    work_experience: Tuple[WorkExperience, ...] = ()
    education: Tuple[EducationEntry, ...] = ()
    job_titles: Tuple[str, ...] = ()

    def has_parsed_fields(self) -> bool:
        """True when the extraction produced at least one populated field."""
        return bool(
            self.technical_skills
            or self.work_experience
            or self.education
            or self.job_titles
        )

    @classmethod
    def from_document(
        cls,
        resume_id: str,
        candidate_id: str,
        username: str,
        parsed_output: Any,
    ) -> "ParsedResume":
        """
        Build a résumé from the parsing service's ``parsed_output`` document.

        Technical skills are read from ``skills.technical`` or, failing that,
        a flat ``technical_skills`` list. Entries that are not mappings and
        values that are not strings are dropped.
        """
        doc = parsed_output if isinstance(parsed_output, dict) else {}

        skills = doc.get("skills")
        technical = skills.get("technical") if isinstance(skills, dict) else None
        if not as_list(technical):
            technical = doc.get("technical_skills")

        experience = tuple(
            WorkExperience(
                title=as_text(entry.get("title")),
                description=as_text(entry.get("description")),
                industry=as_text(entry.get("industry")),
                duration=as_text(entry.get("duration")),
            )
            for entry in as_list(doc.get("work_experience"))
            if isinstance(entry, dict)
        )
        education = tuple(
            EducationEntry(degree=as_text(entry.get("degree")))
            for entry in as_list(doc.get("education"))
            if isinstance(entry, dict)
        )

        return cls(
            resume_id=str(resume_id),
            candidate_id=str(candidate_id),
            username=as_text(username),
            technical_skills=tuple(unique_texts(technical)),
            work_experience=experience,
            education=education,
            job_titles=tuple(unique_texts(doc.get("job_titles"))),
        )


@dataclass(frozen=True)
class MatchOptions:
    """Caller options for a matching run."""
    limit: int = 20
    min_score: int = 30
    exclude_applicants: FrozenSet[str] = frozenset()

    def __post_init__(self):
        if isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit < 1:
            raise ValueError(f"limit must be a positive integer, got {self.limit!r}")
        if (
            isinstance(self.min_score, bool)
            or not isinstance(self.min_score, int)
            or not 0 <= self.min_score <= 100
        ):
            raise ValueError(f"min_score must be an integer in [0, 100], got {self.min_score!r}")
        if isinstance(self.exclude_applicants, (str, bytes)):
            raise ValueError(
                f"exclude_applicants must be a collection of candidate ids, got {self.exclude_applicants!r}"
            )
        object.__setattr__(
            self, "exclude_applicants", frozenset(str(c) for c in self.exclude_applicants)
        )

    def excluding(self, candidate_ids: Iterable[str]) -> "MatchOptions":
        """Copy of these options with more candidates excluded."""
        if isinstance(candidate_ids, (str, bytes)):
            raise ValueError(f"candidate_ids must be a collection, got {candidate_ids!r}")
        return MatchOptions(
            limit=self.limit,
            min_score=self.min_score,
            exclude_applicants=self.exclude_applicants | {str(c) for c in candidate_ids},
        )


@dataclass(frozen=True)
class MatchResult:
    """Score of one candidate against one job. Never persisted."""
    candidate_id: str
    resume_id: str
    username: str
    score: int
    reasons: Tuple[str, ...]
    breakdown: Dict[str, float] = field(default_factory=dict, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate_id": self.candidate_id,
            "resume_id": self.resume_id,
            "username": self.username,
            "matching_score": self.score,
            "matching_reasons": list(self.reasons),
            "breakdown": dict(self.breakdown),
        }
