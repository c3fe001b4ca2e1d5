# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for structured logging configuration."""

import logging
from collections.abc import Iterator

import pytest
import structlog

from src.core.config import get_settings
from src.utils.logging import bind_context, clear_context, get_logger, setup_logging


@pytest.fixture(autouse=True)
def configured_logging() -> Iterator[None]:
    """Configure logging for each test and restore structlog defaults after."""
    setup_logging(get_settings())
    yield
    clear_context()
    structlog.reset_defaults()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_key_value_logging_reaches_stdlib(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that structlog events are emitted as stdlib records."""
        logger = get_logger("src.domains.offline_sync.processor")

        with caplog.at_level(logging.DEBUG):
            logger.error(
                "Offline activity failed",
                activity_id="a1",
                activity_type="download",
                user_id="u1",
            )

        records = [r for r in caplog.records if r.name == "src.domains.offline_sync.processor"]
        assert len(records) == 1
        assert records[0].levelno == logging.ERROR

    def test_positional_arguments(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test %-style arguments on structlog loggers."""
        logger = get_logger("src.tests.positional")

        with caplog.at_level(logging.DEBUG):
            logger.info("Processed %d offline activities", 3)

        assert any(r.name == "src.tests.positional" for r in caplog.records)

    def test_exception_logging(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test logging with exception info inside an except block."""
        logger = get_logger("src.tests.exception")

        with caplog.at_level(logging.DEBUG):
            try:
                raise ValueError("boom")
            except ValueError:
                logger.exception("Could not mark offline activity %s as failed", "a1")

        records = [r for r in caplog.records if r.name == "src.tests.exception"]
        assert records[0].levelno == logging.ERROR

    def test_bound_context(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that bound context does not break logging."""
        bind_context(user_id="u1")
        logger = get_logger("src.tests.context")

        with caplog.at_level(logging.DEBUG):
            logger.warning("Batch sync started")

        assert any(r.levelno == logging.WARNING for r in caplog.records)

    def test_noisy_loggers_lowered(self) -> None:
        """Test that third-party loggers are kept at WARNING."""
        assert logging.getLogger("sqlalchemy").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
