"""Test logging setup and the search failure report"""

import logging

import pytest

from spot_tube.core.logger import (
    ErrorOnlyFilter,
    get_logger,
    log_search_failure,
    setup_logging,
    shutdown_logging,
)


@pytest.fixture
def log_dir(temp_dir):
    yield temp_dir / "logs"
    shutdown_logging()


class TestSetupLogging:
    """Test setup_logging() output files"""

    def test_creates_log_files(self, log_dir):
        setup_logging(log_dir)

        assert len(list(log_dir.iterdir())) == 3
        assert any(p.name.startswith("log_full_") for p in log_dir.iterdir())
        assert any(p.name.startswith("log_errors_") for p in log_dir.iterdir())
        assert any(p.name.startswith("search_failures_") for p in log_dir.iterdir())

    def test_search_failure_report(self, log_dir):
        setup_logging(log_dir, console_level=logging.CRITICAL)
        logger = get_logger("spot_tube.test")

        logger.info("not a failure")
        log_search_failure(
            logger,
            title="Imagine",
            artist="John Lennon",
            query="Imagine John Lennon",
            reason="no results found for query: Imagine John Lennon",
        )
        shutdown_logging()

        report = next(log_dir.glob("search_failures_*.log")).read_text(encoding="utf-8")
        assert report == (
            "Imagine - John Lennon\n"
            "query: Imagine John Lennon\n"
            "reason: no results found for query: Imagine John Lennon\n\n"
        )

        errors = next(log_dir.glob("log_errors_*.log")).read_text(encoding="utf-8")
        assert "Error searching YouTube for Imagine by John Lennon" in errors
        assert "not a failure" not in errors

        full = next(log_dir.glob("log_full_*.log")).read_text(encoding="utf-8")
        assert "not a failure" in full

    def test_shutdown_removes_handlers(self, log_dir):
        setup_logging(log_dir)
        shutdown_logging()

        assert logging.getLogger().handlers == []


def test_error_only_filter():
    error_filter = ErrorOnlyFilter()
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "msg", None, None)
    assert not error_filter.filter(record)

    record.levelno = logging.ERROR
    assert error_filter.filter(record)
