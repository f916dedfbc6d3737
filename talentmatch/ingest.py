"""
Résumé sync from the AI parsing service into the résumé store.
"""

from .ai_client import ResumeParserClient
from .logger import get_logger
from .models import ParsedResume
from .schema import validate_parsed_output
from .storage.resumes import ResumeRepository

logger = get_logger()


def sync_resume(
    client: ResumeParserClient,
    resumes: ResumeRepository,
    candidate_id: str,
    username: str,
) -> ParsedResume:
    """
    Pull a candidate's parsed résumé from the service and store it.

    The stored document replaces any earlier résumé of the candidate.
    Shape problems are logged but do not block storage; the scorer reads
    around missing or malformed fields.

    Raises:
        AIServiceError: If the service call fails
        UsernameConflictError: If the username belongs to another candidate
    """
    parsed_output = client.fetch_parsed_resume(username)

    errors = validate_parsed_output(parsed_output)
    if errors:
        logger.warning(
            "Parsed resume has shape problems",
            candidate_id=str(candidate_id),
            username=username,
            errors=errors,
        )

    resume = resumes.save_parsed_resume(candidate_id, username, parsed_output or None)
    if not resume.has_parsed_fields():
        logger.info("Resume stored but not eligible for matching", candidate_id=str(candidate_id))
    return resume
