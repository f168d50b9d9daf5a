"""Tests for logging configuration."""

import logging as stdlib_logging

import pytest
from loguru import logger

from payloadbench.logging import (
    CLIENT_NOISY_LOGGERS,
    configure_client_log_filtering,
    setup_logging,
)


class TestSetupLogging:
    """Tests for setup_logging function."""

    def teardown_method(self):
        """Reset logger after each test."""
        logger.remove()

    def test_setup_logging_default(self):
        setup_logging()
        # Should not raise
        logger.info("test message")

    def test_setup_logging_debug_level(self):
        setup_logging(level="DEBUG")
        logger.debug("debug message")

    def test_setup_logging_json_output(self):
        setup_logging(json_output=True)
        logger.info("json test")

    def test_setup_logging_log_file(self, tmp_path):
        log_file = tmp_path / "bench.log"
        setup_logging(log_file=str(log_file), verbosity="quiet")
        logger.debug("written to file only")
        logger.remove()
        assert "written to file only" in log_file.read_text()

    @pytest.mark.parametrize(
        ("verbosity", "expected"),
        [
            ("quiet", stdlib_logging.WARNING),
            ("normal", stdlib_logging.WARNING),
            ("verbose", stdlib_logging.DEBUG),
        ],
    )
    def test_verbosity_controls_client_loggers(self, verbosity, expected):
        setup_logging(verbosity=verbosity)
        assert stdlib_logging.getLogger("httpx").level == expected

    def test_verbosity_from_env(self, monkeypatch):
        monkeypatch.setenv("PAYLOADBENCH_VERBOSITY", "verbose")
        setup_logging()
        assert stdlib_logging.getLogger("google_genai").level == stdlib_logging.DEBUG

    def test_invalid_env_verbosity_falls_back_to_normal(self, monkeypatch):
        monkeypatch.setenv("PAYLOADBENCH_VERBOSITY", "chatty")
        setup_logging()
        assert stdlib_logging.getLogger("google_genai").level == stdlib_logging.WARNING


class TestClientLogFiltering:
    """Tests for SDK/HTTP logger filtering."""

    def test_all_noisy_loggers_set(self):
        configure_client_log_filtering("normal")
        for name in CLIENT_NOISY_LOGGERS:
            assert stdlib_logging.getLogger(name).level == stdlib_logging.WARNING
