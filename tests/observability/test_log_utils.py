"""Tests for structured logging helpers."""

import logging

from edu_rag.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)


class TestSafeLogValue:
    def test_embedding_sized_lists_are_summarised(self) -> None:
        assert safe_log_value([0.1] * 1536) == "list(1536 items)"

    def test_long_strings_are_truncated(self) -> None:
        value = safe_log_value("x" * 20, max_length=5)
        assert value == "xxxxx... (truncated, 20 total)"

    def test_none_and_dict(self) -> None:
        assert safe_log_value(None) == "None"
        assert safe_log_value({"a": 1, "b": 2}) == "dict(2 keys)"


def test_log_with_context_attaches_safe_extra(caplog) -> None:
    logger = logging.getLogger("edu_rag.tests.log_utils")

    with caplog.at_level(logging.INFO, logger=logger.name):
        log_with_context(logger, logging.INFO, "Searching", vector=[1.0, 2.0], language="en")

    record = caplog.records[-1]
    assert record.vector == "list(2 items)"
    assert record.language == "en"


def test_log_exception_with_context_records_error_type(caplog) -> None:
    logger = logging.getLogger("edu_rag.tests.log_utils")

    with caplog.at_level(logging.ERROR, logger=logger.name):
        log_exception_with_context(logger, "Delivery failed", ValueError("bad"), channel="email")

    record = caplog.records[-1]
    assert record.error_type == "ValueError"
    assert record.error_msg == "bad"
    assert record.channel == "email"


class TestSafeLogValueScalars:
    def test_enum_renders_its_value(self) -> None:
        from edu_rag.models.processing import ProcessingStatus

        assert safe_log_value(ProcessingStatus.CHUNKING) == ProcessingStatus.CHUNKING.value

    def test_uuid_renders_plain(self) -> None:
        from uuid import UUID

        doc_id = UUID("12345678-1234-5678-1234-567812345678")
        assert safe_log_value(doc_id) == "12345678-1234-5678-1234-567812345678"

    def test_floats_are_rounded(self) -> None:
        assert safe_log_value(0.123456789) == "0.1235"

    def test_unprintable_value_does_not_raise(self) -> None:
        class Broken:
            def __str__(self) -> str:
                raise RuntimeError("no")

        assert safe_log_value(Broken()) == "<unloggable Broken: RuntimeError>"
