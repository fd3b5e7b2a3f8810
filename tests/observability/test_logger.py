"""Tests for the root logger setup and context formatter."""

import logging
import sys

import pytest

from edu_rag.observability.logger import LOG_FORMAT, ContextFormatter, configure_logging


def _record(**extra) -> logging.LogRecord:
    logger = logging.getLogger("edu_rag.tests.formatter")
    record = logger.makeRecord(logger.name, logging.INFO, __file__, 1, "Search done", None, None, extra=extra)
    return record


def test_formatter_appends_sorted_context() -> None:
    formatter = ContextFormatter("%(levelname)s %(message)s")

    line = formatter.format(_record(language="en", count="3"))

    assert line == "INFO Search done | count=3 language=en"


def test_formatter_without_context_is_plain() -> None:
    formatter = ContextFormatter("%(levelname)s %(message)s")

    assert formatter.format(_record()) == "INFO Search done"


def test_formatter_keeps_traceback_after_context() -> None:
    formatter = ContextFormatter("%(message)s")
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.getLogger("edu_rag.tests.formatter").makeRecord(
            "edu_rag.tests.formatter", logging.ERROR, __file__, 1, "Failed", None, sys.exc_info(),
            extra={"channel": "email"},
        )

    first, _, rest = formatter.format(record).partition("\n")
    assert first == "Failed | channel=email"
    assert "ValueError: boom" in rest


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_configure_logging_installs_single_handler(restore_root_logger) -> None:
    configure_logging("debug")
    configure_logging("warning")

    root = restore_root_logger
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, ContextFormatter)
    assert root.handlers[0].formatter._fmt == LOG_FORMAT
    assert root.level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_configure_logging_unknown_level_falls_back_to_info(restore_root_logger) -> None:
    configure_logging("chatty")

    assert restore_root_logger.level == logging.INFO
