"""
Commit helper shared by the repositories.

A failed commit is rolled back before the error propagates, so the
session stays usable for the next call.
"""

from sqlalchemy.exc import SQLAlchemyError

from ..logger import get_logger

logger = get_logger()


def commit(session, action: str, **context) -> None:
    """
    Commit the session; on failure roll back and re-raise.

    Raises:
        SQLAlchemyError: Whatever the commit raised (e.g. IntegrityError)
    """
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(
            "Database write failed, rolled back",
            action=action,
            error_type=type(e).__name__,
            **context,
        )
        raise
