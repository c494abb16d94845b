"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from ragkb.utils.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)
    for name in ("aiosqlite", "httpcore", "httpx", "trafilatura"):
        logging.getLogger(name).setLevel(logging.NOTSET)


def test_json_output_goes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    logger = configure_logging(log_level="INFO", json_output=True)
    logger.info("document_ingested", document_id=7)

    captured = capsys.readouterr()
    assert captured.out == ""
    event = json.loads(captured.err.strip().splitlines()[-1])
    assert event["event"] == "document_ingested"
    assert event["document_id"] == 7
    assert event["level"] == "info"


def test_level_filters_lower_events(capsys: pytest.CaptureFixture[str]) -> None:
    logger = configure_logging(log_level="WARNING", json_output=True)
    logger.info("hidden")
    logger.warning("shown")
    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "shown" in err


def test_bound_context_is_merged(capsys: pytest.CaptureFixture[str]) -> None:
    logger = configure_logging(json_output=True)
    with structlog.contextvars.bound_contextvars(worker_id=2, queue_id=11):
        logger.info("queue_item_claimed")
    event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert (event["worker_id"], event["queue_id"]) == (2, 11)


def test_third_party_loggers_quieted() -> None:
    configure_logging(log_level="DEBUG")
    assert logging.getLogger("aiosqlite").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING

    configure_logging(log_level="ERROR")
    assert logging.getLogger("httpx").level == logging.ERROR


def test_get_logger_configures_on_first_use() -> None:
    structlog.reset_defaults()
    get_logger("ragkb.test")
    assert structlog.is_configured()
