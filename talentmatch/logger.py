"""
Structured logging for talentmatch.

One process-wide StructuredLogger writes to the console and to a daily
file under logs/, renders keyword context as JSON after the message, and
keeps counters for matching runs and AI service calls.
"""

import json
import logging
import sys
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Optional

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"talentmatch_{datetime.now():%Y%m%d}.log"
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)  # file always gets everything
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _rate(part: int, whole: int) -> float:
    return round(part / whole, 3) if whole else 0.0


class StructuredLogger:
    """
    Logger with keyword context and matching/service counters.

    Counters:
        match_runs: Completed ranking runs
        candidates_scored: Candidates that produced a score
        candidates_failed: Candidates skipped because scoring raised
        matches_returned: Results handed back after filtering and limits
        service_calls: Logical calls to the AI parsing service
        service_failures: Calls that ended in an error
        errors_by_type: Failure counts keyed by error name
    """

    def __init__(
        self,
        name: str = "talentmatch",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        numeric_level = getattr(logging, level.upper())
        self.logger = logging.getLogger(name)
        self.logger.setLevel(numeric_level)
        self.logger.handlers.clear()

        if enable_console:
            self.logger.addHandler(_console_handler(numeric_level))
        if enable_file:
            self.logger.addHandler(_file_handler(log_dir or Path("logs")))

        self.metrics = {
            "match_runs": 0,
            "candidates_scored": 0,
            "candidates_failed": 0,
            "matches_returned": 0,
            "service_calls": 0,
            "service_failures": 0,
            "errors_by_type": Counter(),
        }

    def debug(self, message: str, **context):
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, **context):
        self._log(logging.INFO, message, context)

    def warning(self, message: str, **context):
        self._log(logging.WARNING, message, context)

    def error(self, message: str, **context):
        self._log(logging.ERROR, message, context)

    def critical(self, message: str, **context):
        self._log(logging.CRITICAL, message, context)

    def set_level(self, level: str):
        """Change the threshold of the logger and its console output."""
        numeric_level = getattr(logging, level.upper())
        self.logger.setLevel(numeric_level)
        for handler in self.logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(numeric_level)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Counters

    def record_match_run(self, scored: int, returned: int):
        """Record one completed ranking run for a job."""
        self.metrics["match_runs"] += 1
        self.metrics["candidates_scored"] += scored
        self.metrics["matches_returned"] += returned

    def record_scoring_failure(self, error_type: str):
        self.metrics["candidates_failed"] += 1
        self.metrics["errors_by_type"][error_type] += 1

    def record_service_call(self):
        self.metrics["service_calls"] += 1

    def record_service_failure(self, error_type: str):
        self.metrics["service_failures"] += 1
        self.metrics["errors_by_type"][error_type] += 1

    def get_metrics(self) -> dict:
        """Snapshot of the counters plus scoring and service failure rates."""
        snapshot = dict(self.metrics)
        snapshot["errors_by_type"] = dict(self.metrics["errors_by_type"])

        attempted = snapshot["candidates_scored"] + snapshot["candidates_failed"]
        snapshot["scoring_failure_rate"] = _rate(snapshot["candidates_failed"], attempted)
        snapshot["service_failure_rate"] = _rate(snapshot["service_failures"], snapshot["service_calls"])
        return snapshot

    def log_metrics_summary(self):
        metrics = self.get_metrics()

        self.info("=== Matching Session Metrics ===")
        self.info(f"Match runs: {metrics['match_runs']}")
        self.info(
            f"Candidates: {metrics['candidates_scored']} scored, "
            f"{metrics['candidates_failed']} failed "
            f"({metrics['scoring_failure_rate'] * 100:.1f}% failure)"
        )
        self.info(f"Matches returned: {metrics['matches_returned']}")
        self.info(f"AI service calls: {metrics['service_calls']} ({metrics['service_failures']} failed)")

        for error_type, count in sorted(metrics["errors_by_type"].items()):
            self.info(f"  {error_type}: {count}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "talentmatch",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the process-wide logger.

    Arguments only apply on first creation; later calls return the same
    instance unchanged.
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Drop the process-wide logger so the next get_logger builds a new one."""
    global _global_logger
    _global_logger = None
