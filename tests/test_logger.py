"""
Tests for logger functionality.
"""

import pytest
from talentmatch.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with zeroed metrics."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["match_runs"] == 0
        assert logger.metrics["service_calls"] == 0

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")
        logger.critical("Critical message")

    def test_log_with_context(self, tmp_path):
        """Context should be serialized into the message."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Matching complete", job_id="job-1", returned=3, excluded={"c1"})

        content = next(tmp_path.glob("*.log")).read_text()
        assert '"job_id": "job-1"' in content
        assert '"returned": 3' in content

    def test_match_metrics(self, tmp_path):
        """Match runs should accumulate scored and returned counts."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.record_match_run(scored=10, returned=4)
        logger.record_match_run(scored=5, returned=5)
        logger.record_scoring_failure("KeyError")

        metrics = logger.get_metrics()

        assert metrics["match_runs"] == 2
        assert metrics["candidates_scored"] == 15
        assert metrics["matches_returned"] == 9
        assert metrics["candidates_failed"] == 1
        assert metrics["errors_by_type"] == {"KeyError": 1}
        assert metrics["scoring_failure_rate"] == pytest.approx(1 / 16, abs=0.001)

    def test_service_metrics(self, tmp_path):
        """Service failure rate should be calculated correctly."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        for _ in range(3):
            logger.record_service_call()
        logger.record_service_failure("Timeout")
        logger.record_service_failure("Timeout")

        metrics = logger.get_metrics()

        assert metrics["service_failures"] == 2
        assert metrics["service_failure_rate"] == pytest.approx(0.667, rel=0.01)
        assert metrics["errors_by_type"]["Timeout"] == 2

    def test_rates_without_activity(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)

        metrics = logger.get_metrics()

        assert metrics["scoring_failure_rate"] == 0.0
        assert metrics["service_failure_rate"] == 0.0

    def test_get_metrics_returns_copy(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)
        logger.record_scoring_failure("ValueError")

        metrics = logger.get_metrics()
        metrics["errors_by_type"]["ValueError"] = 99

        assert logger.metrics["errors_by_type"]["ValueError"] == 1

    def test_metrics_summary(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)
        logger.record_match_run(scored=2, returned=1)
        logger.record_service_failure("AIServiceError")

        logger.log_metrics_summary()

        content = next(tmp_path.glob("*.log")).read_text()
        assert "Match runs: 1" in content
        assert "AIServiceError: 1" in content

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Test message")

        log_files = list(tmp_path.glob("talentmatch_*.log"))
        assert len(log_files) == 1
        assert "Test message" in log_files[0].read_text()


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self, tmp_path):
        """get_logger should return same instance."""
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self, tmp_path):
        """reset_logger should create new instance."""
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger1.record_service_call()

        reset_logger()

        logger2 = get_logger(log_dir=tmp_path, enable_console=False)

        assert logger2 is not logger1
        assert logger2.metrics["service_calls"] == 0
