from typing import Any, Dict, List, Tuple

from .matching.features import DEGREE_LEVELS, EXPERIENCE_LEVELS
from .normalize import normalize_text

REQUIRED_JOB_FIELDS = ["title", "business_id"]
OPTIONAL_JOB_FIELDS = [
    "description",
    "technique",
    "experience",
    "degree",
    "field",
    "status",
]
JOB_STATUSES = {"open", "closed"}

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 200

PARSED_LIST_FIELDS = ["work_experience", "education", "job_titles", "technical_skills"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def validate_job(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    errors: List[str] = []

    for f in REQUIRED_JOB_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    for f in OPTIONAL_JOB_FIELDS:
        if f in data and data[f] is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    title = data.get("title")
    if _is_non_empty_str(title) and not TITLE_MIN_LENGTH <= len(title.strip()) <= TITLE_MAX_LENGTH:
        errors.append(
            f"Field 'title' length must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH}"
        )

    status = data.get("status")
    if _is_non_empty_str(status) and normalize_text(status) not in JOB_STATUSES:
        errors.append(f"Field 'status' must be one of: {', '.join(sorted(JOB_STATUSES))}")

    return errors


def validate_job_strict(data: Dict[str, Any]) -> Tuple[bool, List[str]]:
    """
    Basic validation plus known experience and degree levels.

    Unknown levels are tolerated by the scorer (they count as "no
    requirement"), so this is for ingestion paths that want to reject typos.
    """
    errors = validate_job(data)

    experience = data.get("experience")
    if _is_non_empty_str(experience) and normalize_text(experience) not in EXPERIENCE_LEVELS:
        errors.append(f"Unknown experience level: {experience}")

    degree = data.get("degree")
    if _is_non_empty_str(degree) and normalize_text(degree) not in DEGREE_LEVELS:
        errors.append(f"Unknown degree level: {degree}")

    return (not errors, errors)


def validate_parsed_output(doc: Any) -> List[str]:
    """
    Shape check for a parsing-service document.

    Problems reported here never block storage; the scorer reads around them.
    """
    if not isinstance(doc, dict):
        return ["parsed_output must be an object"]

    errors: List[str] = []
    for f in PARSED_LIST_FIELDS:
        if f in doc and not isinstance(doc[f], list):
            errors.append(f"Field '{f}' must be a list if provided")

    skills = doc.get("skills")
    if skills is not None:
        if not isinstance(skills, dict):
            errors.append("Field 'skills' must be an object if provided")
        elif "technical" in skills and not isinstance(skills["technical"], list):
            errors.append("Field 'skills.technical' must be a list if provided")

    for f in ("work_experience", "education"):
        entries = doc.get(f)
        if isinstance(entries, list) and any(not isinstance(e, dict) for e in entries):
            errors.append(f"Every entry in '{f}' must be an object")

    if not any(
        doc.get(f) for f in PARSED_LIST_FIELDS
    ) and not (isinstance(skills, dict) and skills.get("technical")):
        errors.append("parsed_output has no extracted fields")

    return errors
