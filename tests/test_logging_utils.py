"""Tests for :mod:`channel_guide.logging_utils`."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from channel_guide import logging_utils


@pytest.fixture
def fresh_logging(monkeypatch: pytest.MonkeyPatch):
    """Reset the package logger so each test configures it from scratch."""

    for attribute in (
        "_configured",
        "_stream_handler",
        "_ui_handler",
        "_file_handler",
        "_log_path",
        "_level",
    ):
        monkeypatch.delattr(logging_utils.configure_logging, attribute, raising=False)
    monkeypatch.delenv("CHANNEL_GUIDE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("CHANNEL_GUIDE_LOG_FILE", raising=False)
    logger = logging.getLogger("channel_guide")
    saved = list(logger.handlers)
    for handler in saved:
        logger.removeHandler(handler)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if handler not in saved:
            handler.close()
    for handler in saved:
        logger.addHandler(handler)


def test_configure_logging_writes_to_requested_file(fresh_logging, tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "guide.log"
    logger = logging_utils.configure_logging(level="DEBUG", log_file=str(log_file))

    assert logger.level == logging.DEBUG
    assert logging_utils.get_log_file_path() == log_file

    logging_utils.get_logger("tests.file").info("Hello from tests")
    for handler in logger.handlers:
        handler.flush()
    assert "channel_guide.tests.file: Hello from tests" in log_file.read_text(encoding="utf8")


def test_environment_overrides_level_and_file(
    fresh_logging, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("CHANNEL_GUIDE_LOG_LEVEL", "warning")
    monkeypatch.setenv("CHANNEL_GUIDE_LOG_FILE", "")

    logger = logging_utils.configure_logging()

    assert logger.level == logging.WARNING
    assert logging_utils.get_log_file_path() is None


def test_get_logger_nests_under_package(fresh_logging, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHANNEL_GUIDE_LOG_FILE", "")

    assert logging_utils.get_logger().name == "channel_guide"
    assert logging_utils.get_logger("channel_guide.api").name == "channel_guide.api"
    assert logging_utils.get_logger("elsewhere").name == "channel_guide.elsewhere"


def test_ui_handler_buffers_records(fresh_logging, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHANNEL_GUIDE_LOG_FILE", "")
    logging_utils.configure_logging()

    logging_utils.get_logger("tests.buffer").warning("Buffered message")

    handler = logging_utils.configure_logging._ui_handler  # type: ignore[attr-defined]
    assert any("Buffered message" in line for line in handler.buffered)
