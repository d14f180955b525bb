from __future__ import annotations

import logging
from io import StringIO

import pytest

import circle_import.logging.init as log_init
from circle_import.logging.init import (
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    reset_logging,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


def _capture(logger_name: str) -> tuple[logging.Logger, StringIO]:
    out = StringIO()
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)
    for h in logger.handlers[:]:
        logger.removeHandler(h)
    handler = logging.StreamHandler(out)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger, out


def test_setup_logging_creates_logger_with_single_handler():
    logger = setup_logging()
    assert logger.name == "circle_import"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_labeled_prefixes():
    logger, out = _capture("test_circle_import_labels")
    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger.info("info message")
    logger.warning("warning message")
    logger.error("error message")
    logger.log(SUMMARY_LEVEL, "summary message")
    assert out.getvalue().splitlines() == [
        "INFO info message",
        "WARN warning message",
        "ERROR error message",
        "SUMMARY summary message",
    ]


def test_setup_logging_idempotent_and_debug_upgrade():
    first = setup_logging()
    second = setup_logging(debug=True)
    assert first is second
    assert len(first.handlers) == 1
    assert first.level == logging.DEBUG
    assert first.handlers[0].level == logging.DEBUG


def test_get_logger_configures_on_first_use():
    logger = get_logger()
    assert logger is setup_logging()
    assert logging.getLevelName(SUMMARY_LEVEL) == "SUMMARY"


def test_module_loggers_reach_app_handler():
    app_logger, out = _capture("circle_import")
    log_init._logger = app_logger
    logging.getLogger("circle_import.services.importer").info("from child")
    assert out.getvalue() == "INFO from child\n"


def test_log_summary_convenience_function():
    app_logger, out = _capture("circle_import")
    log_init._logger = app_logger
    log_summary("source=paste status=success rows=2 items=2")
    assert out.getvalue() == "SUMMARY source=paste status=success rows=2 items=2\n"
