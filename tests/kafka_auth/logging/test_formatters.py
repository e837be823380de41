"""Tests for JSON and console log formatters and logging helpers."""

import json
import logging
import sys

import pytest

from kafka_auth.errors import MissingCredentialError
from kafka_auth.logging import setup_logging
from kafka_auth.logging.context import clear_log_context, get_log_context, set_log_context
from kafka_auth.logging.formatters import ConsoleFormatter, JSONFormatter
from kafka_auth.logging.utilities import log_exception


def _make_record(msg="test message", level=logging.INFO, exc_info=None, **extras):
    record = logging.LogRecord(
        name="kafka_auth.test",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extras.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_formats_required_fields(self):
        output = json.loads(JSONFormatter().format(_make_record()))

        assert output["level"] == "INFO"
        assert output["logger"] == "kafka_auth.test"
        assert output["message"] == "test message"
        assert output["ts"].endswith("Z")
        assert "file" not in output

    def test_includes_client_context(self):
        set_log_context(client_id="orders-exporter", component="sasl")

        output = json.loads(JSONFormatter().format(_make_record()))

        assert output["client_id"] == "orders-exporter"
        assert output["component"] == "sasl"

    def test_extra_fields_whitelisted(self):
        record = _make_record(mechanism="PLAIN", region="us-east-1", unrelated="x")

        output = json.loads(JSONFormatter().format(record))

        assert output["mechanism"] == "PLAIN"
        assert output["region"] == "us-east-1"
        assert "unrelated" not in output

    def test_numeric_fields_coerced(self):
        record = _make_record(timeout_seconds="2.5", handshake_version="bad")

        output = json.loads(JSONFormatter().format(record))

        assert output["timeout_seconds"] == 2.5
        assert output["handshake_version"] is None

    def test_file_location_on_debug_and_error(self):
        output = json.loads(JSONFormatter().format(_make_record(level=logging.ERROR)))

        assert output["file"] == "test.py:42"

    def test_exception_block(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _make_record(level=logging.ERROR, exc_info=sys.exc_info())

        output = json.loads(JSONFormatter().format(record))

        assert output["exception"]["type"] == "ValueError"
        assert output["exception"]["message"] == "boom"
        assert "Traceback" in output["exception"]["stacktrace"]

    def test_credentials_passed_as_extras_not_emitted(self):
        record = _make_record(
            mechanism="PLAIN", password="plain-pw-1", token="bearer-tok-2", sasl_password="plain-pw-1"
        )

        line = JSONFormatter().format(record)

        assert json.loads(line)["mechanism"] == "PLAIN"
        assert "plain-pw-1" not in line
        assert "bearer-tok-2" not in line


class TestConsoleFormatter:

    @pytest.fixture
    def formatter(self):
        formatter = ConsoleFormatter()
        formatter._use_colors = False
        return formatter

    def test_plain_message(self, formatter):
        output = formatter.format(_make_record())

        assert output.endswith(" - INFO - test message")

    def test_context_and_mechanism_tags(self, formatter):
        set_log_context(client_id="c1")

        output = formatter.format(_make_record(mechanism="GSSAPI"))

        assert " - [c1] - [GSSAPI] test message" in output


class TestLogContext:

    def test_clear_resets_values(self):
        set_log_context(client_id="c1", component="tls")
        clear_log_context()

        assert get_log_context() == {"client_id": "", "component": ""}

    def test_partial_update_keeps_other_value(self):
        set_log_context(client_id="c1")
        set_log_context(component="kerberos")

        assert get_log_context() == {"client_id": "c1", "component": "kerberos"}


class TestLogException:

    def test_adds_error_fields(self, auth_caplog):
        logger = logging.getLogger("kafka_auth.test")
        error = MissingCredentialError("username", "PLAIN")

        log_exception(logger, error, "Setup failed", include_traceback=False, mechanism="PLAIN")

        record = auth_caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.error_category == "permanent"
        assert record.error_message == "username has to be provided"
        assert record.error_type == "MissingCredentialError"
        assert record.mechanism == "PLAIN"
        assert record.exc_info is None

    def test_truncates_long_messages(self, auth_caplog):
        logger = logging.getLogger("kafka_auth.test")

        log_exception(logger, RuntimeError("x" * 600), "Failed")

        record = auth_caplog.records[-1]
        assert len(record.error_message) == 503
        assert record.exc_info is not None


class TestSetupLogging:

    @pytest.fixture(autouse=True)
    def _restore_root(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_console_and_file_handlers(self, tmp_path):
        log_file = tmp_path / "logs" / "auth.log"

        setup_logging(client_id="c1", log_file=log_file)

        root = logging.getLogger()
        assert isinstance(root.handlers[0].formatter, ConsoleFormatter)
        assert isinstance(root.handlers[1].formatter, JSONFormatter)
        assert log_file.parent.exists()
        assert get_log_context()["client_id"] == "c1"
        for handler in root.handlers[1:]:
            handler.close()

    def test_suppresses_noisy_loggers(self):
        setup_logging(json_format=True)

        assert logging.getLogger("botocore").level == logging.WARNING
        assert isinstance(logging.getLogger().handlers[0].formatter, JSONFormatter)
