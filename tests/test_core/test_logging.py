"""Tests for logging setup."""

import json
import logging

from callprep.core.logging import (
    ConsoleFormatter,
    JSONFormatter,
    RedactionFilter,
    get_logger,
    mask_phone,
    redact_context,
    reset_logging,
    setup_logging,
)


def _record(msg: str, context=None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="callprep.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    if context is not None:
        record.context = context
    return record


class TestLogging:
    """Test logging configuration."""

    def test_get_logger_returns_logger(self):
        logger = get_logger(__name__)
        assert isinstance(logger, logging.Logger)

    def test_get_logger_namespaces_under_callprep(self):
        assert get_logger("main").name == "callprep.main"

    def test_get_logger_keeps_package_names(self):
        assert get_logger("callprep.engine.dialer").name == "callprep.engine.dialer"

    def test_get_logger_same_name_returns_same_logger(self):
        assert get_logger("test.module") is get_logger("test.module")

    def test_setup_logging_creates_handlers(self, tmp_path):
        root_logger = logging.getLogger("callprep")
        reset_logging()
        before = len(root_logger.handlers)
        try:
            setup_logging(log_dir=tmp_path / "logs")
            assert len(root_logger.handlers) == before + 2
            assert (tmp_path / "logs" / "callprep.log").exists()
        finally:
            reset_logging()
        assert len(root_logger.handlers) == before

    def test_file_log_is_redacted(self, tmp_path):
        reset_logging()
        try:
            setup_logging(log_dir=tmp_path, console_level=logging.CRITICAL)
            get_logger("test.redaction").warning(
                "probe", extra={"context": {"phone": "18778406250", "api_key": "k-123"}}
            )
        finally:
            reset_logging()
        lines = (tmp_path / "callprep.log").read_text(encoding="utf-8").splitlines()
        last = json.loads(lines[-1])
        assert last["context"] == {"phone": "***6250", "api_key": "[redacted]"}


class TestFormatters:
    """Test JSON and console formatting."""

    def test_json_formatter_includes_context(self):
        data = json.loads(JSONFormatter().format(_record("hello", {"call_id": "c1"})))
        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["context"] == {"call_id": "c1"}
        assert data["timestamp"].endswith("Z")

    def test_console_formatter_appends_context(self):
        line = ConsoleFormatter().format(_record("hello", {"call_id": "c1"}))
        assert "callprep.test: hello [call_id=c1]" in line


class TestMaskPhone:
    def test_keeps_last_four(self):
        assert mask_phone("18778406250") == "***6250"

    def test_short_numbers_fully_masked(self):
        assert mask_phone("123") == "***"

    def test_already_masked_unchanged(self):
        assert mask_phone("***6250") == "***6250"


class TestRedaction:
    def test_masks_phone_keys(self):
        assert redact_context({"to": "18778406250", "call_id": "c1"}) == {
            "to": "***6250",
            "call_id": "c1",
        }

    def test_blanks_secrets(self):
        assert redact_context({"token": "abc", "sig": ""}) == {"token": "[redacted]", "sig": ""}

    def test_filter_rewrites_record(self):
        record = _record("x", {"secret_key": "s"})
        assert RedactionFilter().filter(record) is True
        assert record.context == {"secret_key": "[redacted]"}

    def test_filter_ignores_records_without_context(self):
        record = _record("x")
        assert RedactionFilter().filter(record) is True
        assert not hasattr(record, "context")
