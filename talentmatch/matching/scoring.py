"""
Scoring Logic for Applicant Matching.

Responsibilities:
- Combine the five sub-scores into a 0-100 compatibility score.
- Emit a score breakdown and a human-readable explanation.

Non-Responsibilities:
- No database access.
- No candidate selection.
- No threshold decisions.

Invariant:
Given identical inputs, this module must always return
the same score and explanation.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from ..models import JobPosting, ParsedResume
from . import features

HIGH_FIT_THRESHOLD = 70
EXPERIENCE_REASON_MIN_YEARS = 3
MAX_SKILLS_IN_REASON = 3
FALLBACK_REASON = "potential fit"


@dataclass(frozen=True)
class ScoreCard:
    score: int
    reasons: Tuple[str, ...]
    breakdown: Dict[str, float] = field(default_factory=dict, hash=False)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def explain(
    resume: ParsedResume,
    score: int,
    matched: Sequence[str],
    years: float,
) -> List[str]:
    """
    Reasons in fixed order: overall fit, skills, experience, education.

    Falls back to a single generic reason when nothing specific applies.
    """
    reasons = []

    if score >= HIGH_FIT_THRESHOLD:
        reasons.append("high overall fit")

    if matched:
        reasons.append(f"matching skills: {', '.join(matched[:MAX_SKILLS_IN_REASON])}")

    if resume.work_experience and years >= EXPERIENCE_REASON_MIN_YEARS:
        reasons.append(f"{years:.1f} years of experience")

    degree = next((e.degree for e in resume.education if e.degree), None)
    if degree:
        reasons.append(f"degree: {degree}")

    return reasons or [FALLBACK_REASON]


class MatchScorer:
    """Deterministic weighted scorer for one job against one résumé."""

    # Percentage points per factor; they sum to 100
    WEIGHTS = {
        "skills": 40,
        "experience": 20,
        "education": 15,
        "field": 15,
        "title": 10,
    }

    def score(self, job: JobPosting, resume: ParsedResume) -> ScoreCard:
        job_skills = features.extract_job_skills(job)
        candidate_skills = features.extract_candidate_skills(resume)
        matched = features.matched_skills(job_skills, candidate_skills)

        breakdown = {
            "skills": features.skills_score(job_skills, matched),
            "experience": features.experience_score(
                features.job_experience_level(job),
                features.candidate_experience_level(resume),
            ),
            "education": features.education_score(
                features.job_degree_level(job),
                features.candidate_degree_level(resume),
            ),
            "field": features.field_score(job, resume),
            "title": features.title_score(job, resume),
        }

        total = sum(breakdown[name] * weight for name, weight in self.WEIGHTS.items())
        score = max(0, min(100, _round_half_up(total)))

        years = features.total_experience_years(resume)
        reasons = explain(resume, score, matched, years)

        return ScoreCard(score=score, reasons=tuple(reasons), breakdown=breakdown)
