"""
Feature Extraction for Applicant Matching.

Responsibilities:
- Compute the five normalized sub-scores (skills, experience, education,
  field, title), each in [0, 1].
- Extract the skill keywords and experience totals the explanations reuse.

Non-Responsibilities:
- No weighting logic.
- No threshold logic.
- No persistence.

Invariant:
Missing or malformed data contributes zero or a neutral default.
Nothing in this module raises for a well-typed job and résumé.
"""

import re
from typing import List, Sequence

from ..models import JobPosting, ParsedResume
from ..normalize import normalize_text, parse_leading_number

# Vocabulary detected in job title + description + techniques
JOB_SKILL_KEYWORDS = (
    "javascript", "python", "java", "react", "node.js", "angular", "vue",
    "html", "css", "sql", "mongodb", "postgresql", "mysql", "docker",
    "aws", "azure", "git", "agile", "scrum", "rest api", "graphql",
    "machine learning", "ai", "data analysis", "excel", "powerpoint",
)

# Narrower vocabulary mined from work experience descriptions
EXPERIENCE_SKILL_KEYWORDS = (
    "javascript", "python", "java", "react", "node.js", "angular", "vue",
    "html", "css", "sql", "mongodb", "postgresql", "mysql", "docker",
    "aws", "azure", "git", "agile", "scrum", "rest api", "graphql",
)

EXPERIENCE_LEVELS = {
    "none": 0,
    "no required": 0,
    "intern": 1,
    "fresher": 2,
    "junior": 3,
    "mid": 4,
    "mid-level": 4,
    "senior": 5,
    "lead": 6,
    "manager": 7,
}

DEGREE_LEVELS = {
    "none": 0,
    "no required": 0,
    "high-school": 1,
    "high school": 1,
    "associate": 2,
    "bachelor": 3,
    "master": 4,
    "phd": 5,
    "doctorate": 5,
}

# Upper bounds (exclusive) in years for candidate experience ordinals 1..6
YEARS_TO_LEVEL = ((1, 1), (2, 2), (3, 3), (5, 4), (7, 5), (10, 6))
MAX_EXPERIENCE_LEVEL = 7

EXPERIENCE_GAP_PENALTY = 0.2
NEUTRAL_SKILLS_SCORE = 0.5
NEUTRAL_FIELD_SCORE = 0.5
FIELD_FLOOR_SCORE = 0.1

TITLE_PARTIAL_SCORE = 0.8
# Words shorter than this ("of", "ii", "sr") never make a partial title match
TITLE_MIN_WORD_LENGTH = 3


def _contains_either_way(a: str, b: str) -> bool:
    return a in b or b in a


# --- Skills ---

def extract_job_skills(job: JobPosting) -> List[str]:
    """Vocabulary keywords present in the job text, in vocabulary order."""
    text = f"{job.title} {job.description} {job.technique}".lower()
    return [kw for kw in JOB_SKILL_KEYWORDS if kw in text]


def extract_candidate_skills(resume: ParsedResume) -> List[str]:
    skills = []
    for skill in resume.technical_skills:
        s = normalize_text(skill)
        if s and s not in skills:
            skills.append(s)

    for exp in resume.work_experience:
        desc = exp.description.lower()
        if not desc:
            continue
        for kw in EXPERIENCE_SKILL_KEYWORDS:
            if kw in desc and kw not in skills:
                skills.append(kw)

    return skills


def matched_skills(job_skills: Sequence[str], candidate_skills: Sequence[str]) -> List[str]:
    """Job keywords that contain, or are contained in, some candidate skill."""
    return [
        skill for skill in job_skills
        if any(_contains_either_way(skill, cs) for cs in candidate_skills)
    ]


def skills_score(job_skills: Sequence[str], matched: Sequence[str]) -> float:
    if not job_skills:
        return NEUTRAL_SKILLS_SCORE
    return len(matched) / len(job_skills)


# --- Experience ---

def job_experience_level(job: JobPosting) -> int:
    return EXPERIENCE_LEVELS.get(normalize_text(job.experience), 0)


def total_experience_years(resume: ParsedResume) -> float:
    return sum(
        parse_leading_number(exp.duration).value_or(0.0)
        for exp in resume.work_experience
    )


def candidate_experience_level(resume: ParsedResume) -> int:
    if not resume.work_experience:
        return 0
    years = total_experience_years(resume)
    for upper, level in YEARS_TO_LEVEL:
        if years < upper:
            return level
    return MAX_EXPERIENCE_LEVEL


def experience_score(job_level: int, candidate_level: int) -> float:
    if job_level == 0 or candidate_level >= job_level:
        return 1.0
    return max(0.0, 1.0 - EXPERIENCE_GAP_PENALTY * (job_level - candidate_level))


# --- Education ---

def job_degree_level(job: JobPosting) -> int:
    return DEGREE_LEVELS.get(normalize_text(job.degree), 0)


def candidate_degree_level(resume: ParsedResume) -> int:
    best = 0
    for entry in resume.education:
        degree = entry.degree.lower()
        if not degree:
            continue
        for keyword, level in DEGREE_LEVELS.items():
            if level > best and keyword in degree:
                best = level
    return best


def education_score(job_level: int, candidate_level: int) -> float:
    if job_level == 0 or candidate_level >= job_level:
        return 1.0
    return candidate_level / job_level


# --- Field ---

def field_score(job: JobPosting, resume: ParsedResume) -> float:
    job_field = normalize_text(job.field)
    if not job_field:
        return NEUTRAL_FIELD_SCORE

    score = 0.0
    for exp in resume.work_experience:
        if exp.industry and job_field in exp.industry.lower():
            score = max(score, 0.8)
        if exp.description and job_field in exp.description.lower():
            score = max(score, 0.6)

    for skill in resume.technical_skills:
        if job_field in skill.lower():
            score = max(score, 0.4)

    return score or FIELD_FLOOR_SCORE


# --- Title ---

def _title_words(title: str) -> set:
    return {w for w in re.findall(r"[a-z0-9.+#]+", title) if len(w) >= TITLE_MIN_WORD_LENGTH}


def title_score(job: JobPosting, resume: ParsedResume) -> float:
    """
    1.0 when a held title (``job_titles`` or a work experience title)
    contains the job title or is contained in it. A work experience title
    that only shares a word with the job title scores TITLE_PARTIAL_SCORE.
    """
    job_title = normalize_text(job.title)
    if not job_title:
        return 0.0

    for title in resume.job_titles:
        t = normalize_text(title)
        if t and _contains_either_way(t, job_title):
            return 1.0

    experience_titles = [normalize_text(exp.title) for exp in resume.work_experience]
    experience_titles = [t for t in experience_titles if t]
    if any(_contains_either_way(t, job_title) for t in experience_titles):
        return 1.0

    job_words = _title_words(job_title)
    if any(job_words & _title_words(t) for t in experience_titles):
        return TITLE_PARTIAL_SCORE

    return 0.0
