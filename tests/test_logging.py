import json
import logging

from quorum_safe.shared.errors import (
    AlreadySubmitted,
    ExternalUnavailable,
    InvalidThreshold,
    QuorumNotMet,
)
from quorum_safe.shared.logging import (
    ContextAdapter,
    HumanReadableFormatter,
    LoggingConfig,
    LogLevel,
    StructuredFormatter,
    format_error_for_user,
    get_error_mapping,
    get_user_friendly_error,
    log_error,
    sanitize_dict,
    sanitize_message,
)


def _record(message, context=None):
    record = logging.LogRecord("quorum_safe.test", logging.INFO, __file__, 1, message, (), None)
    if context is not None:
        record.context = context
    return record


class TestSanitization:
    def test_private_key_redacted(self):
        message = f"private_key={'a' * 64}"
        assert sanitize_message(message) == "private_key=[REDACTED]"

    def test_signature_hex_redacted(self):
        message = f"got {'b' * 128} from owner"
        assert sanitize_message(message) == "got [SIGNATURE_REDACTED] from owner"

    def test_public_key_kept(self):
        message = f"owner {'c' * 64}"
        assert sanitize_message(message) == message

    def test_dict_keys_redacted(self):
        data = {
            "signature": "abc",
            "address": "0x01",
            "nested": {"password": "hunter2"},
            "items": [{"secret": "x"}, "plain"],
        }
        assert sanitize_dict(data) == {
            "signature": "[REDACTED]",
            "address": "0x01",
            "nested": {"password": "[REDACTED]"},
            "items": [{"secret": "[REDACTED]"}, "plain"],
        }


class TestErrorMapping:
    def test_already_submitted_is_info(self):
        assert get_error_mapping(AlreadySubmitted("0x01")).log_level == LogLevel.INFO

    def test_unavailable_is_warning(self):
        mapping = get_error_mapping(ExternalUnavailable("down"))
        assert mapping.log_level == LogLevel.WARNING

    def test_user_message_with_suggestion(self):
        message, suggestion = get_user_friendly_error(QuorumNotMet(1, 2))
        assert message == "Not enough owners have signed yet."
        assert suggestion is not None
        assert format_error_for_user(QuorumNotMet(1, 2)).startswith(message)

    def test_unmapped_error(self):
        assert format_error_for_user(RuntimeError("x")) == "An unexpected error occurred."

    def test_log_error_uses_mapped_level(self, caplog):
        logger = logging.getLogger("quorum_safe.test.errors")
        with caplog.at_level(logging.DEBUG, logger="quorum_safe.test.errors"):
            log_error(logger, AlreadySubmitted("0x01"))
            log_error(logger, InvalidThreshold(0, 2))
        assert [record.levelno for record in caplog.records] == [
            logging.INFO,
            logging.ERROR,
        ]


class TestFormatters:
    def test_structured_includes_context(self):
        formatter = StructuredFormatter()
        output = json.loads(
            formatter.format(_record("hello", {"address": "0x01", "signature": "ff"}))
        )
        assert output["message"] == "hello"
        assert output["level"] == "INFO"
        assert output["context"] == {"address": "0x01", "signature": "[REDACTED]"}

    def test_human_appends_context(self):
        formatter = HumanReadableFormatter()
        output = formatter.format(_record("hello", {"address": "0x01"}))
        assert output.endswith("hello [address=0x01]")


class TestContextAdapter:
    def test_with_context_merges(self, caplog):
        adapter = ContextAdapter(logging.getLogger("quorum_safe.test.ctx"), {"a": 1})
        child = adapter.with_context(b=2)

        with caplog.at_level(logging.INFO, logger="quorum_safe.test.ctx"):
            child.info("message", extra={"context": {"c": 3}})

        assert caplog.records[0].context == {"a": 1, "b": 2, "c": 3}
        assert adapter.extra == {"a": 1}


class TestLoggingConfig:
    def test_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("QUORUM_SAFE_LOG_LEVEL", "debug")
        monkeypatch.setenv("QUORUM_SAFE_LOG_FORMAT", "JSON")
        monkeypatch.setenv("QUORUM_SAFE_LOG_STDOUT", "true")
        monkeypatch.setenv("QUORUM_SAFE_LOG_DIR", str(tmp_path))

        config = LoggingConfig.from_environment()

        assert config.log_level == LogLevel.DEBUG
        assert config.log_format == "json"
        assert config.log_to_stdout is True
        assert config.log_to_file is True
        assert config.log_dir == tmp_path

    def test_invalid_level_defaults_to_info(self, monkeypatch):
        monkeypatch.setenv("QUORUM_SAFE_LOG_LEVEL", "loud")
        assert LoggingConfig.from_environment().log_level == LogLevel.INFO
