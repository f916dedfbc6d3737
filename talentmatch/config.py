"""
Runtime settings read from the environment (and .env via python-dotenv).
"""

from dataclasses import dataclass
from pathlib import Path

from .env import get_env, load_env
from .logger import get_logger
from .models import MatchOptions

DEFAULT_DB_PATH = "data/talentmatch.db"
DEFAULT_AI_SERVICE_URL = "http://localhost:8000"

logger = get_logger()


def _number(key: str, default, cast):
    raw = get_env(key)
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid setting, using default", key=key, value=raw, default=default)
        return default


@dataclass(frozen=True)
class Settings:
    db_path: Path = Path(DEFAULT_DB_PATH)
    ai_service_url: str = DEFAULT_AI_SERVICE_URL
    ai_service_timeout: float = 30.0
    ai_service_max_retries: int = 3
    default_limit: int = 20
    default_min_score: int = 30
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "Settings":
        """
        Build settings from environment variables.

        Variables:
            TALENTMATCH_DB_PATH, AI_SERVICE_URL, AI_SERVICE_TIMEOUT,
            AI_SERVICE_MAX_RETRIES, MATCH_DEFAULT_LIMIT, MATCH_DEFAULT_MIN_SCORE, LOG_LEVEL
        """
        if load_dotenv_file:
            load_env()
        return cls(
            db_path=Path(get_env("TALENTMATCH_DB_PATH", DEFAULT_DB_PATH)),
            ai_service_url=get_env("AI_SERVICE_URL", DEFAULT_AI_SERVICE_URL).rstrip("/"),
            ai_service_timeout=_number("AI_SERVICE_TIMEOUT", 30.0, float),
            ai_service_max_retries=_number("AI_SERVICE_MAX_RETRIES", 3, int),
            default_limit=_number("MATCH_DEFAULT_LIMIT", 20, int),
            default_min_score=_number("MATCH_DEFAULT_MIN_SCORE", 30, int),
            log_level=get_env("LOG_LEVEL", "INFO").upper() or "INFO",
        )

    def configure_logger(self):
        """Apply LOG_LEVEL to the process-wide logger and return it."""
        shared = get_logger()
        shared.set_level(self.log_level)
        return shared

    def match_options(self) -> MatchOptions:
        """
        Raises:
            ValueError: If the configured limit or minimum score is out of range
        """
        return MatchOptions(limit=self.default_limit, min_score=self.default_min_score)
