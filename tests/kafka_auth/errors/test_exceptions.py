"""Tests for the authentication exception hierarchy and classification."""

import pytest

from kafka_auth.errors import (
    AuthenticationRejectedError,
    ConfigurationError,
    ErrorCategory,
    IAMSigningError,
    InvalidEnumValueError,
    KafkaAuthError,
    KerberosError,
    MissingCredentialError,
    TLSConfigLoadError,
    UnsupportedMechanismError,
    classify_exception,
    is_auth_error,
    is_retryable_error,
)


class TestKafkaAuthError:

    def test_message_and_defaults(self):
        error = KafkaAuthError("something failed")

        assert str(error) == "something failed"
        assert error.cause is None
        assert error.context == {}
        assert error.category == ErrorCategory.UNKNOWN
        assert error.is_retryable

    def test_str_includes_cause(self):
        error = KafkaAuthError("wrapped", cause=ValueError("inner"))

        assert str(error) == "wrapped | Caused by: inner"


class TestCategories:

    @pytest.mark.parametrize(
        "error",
        [
            MissingCredentialError("username", "PLAIN"),
            InvalidEnumValueError("version", 5, (0, 1)),
            TLSConfigLoadError("error loading tls config: bad"),
            UnsupportedMechanismError("nope"),
        ],
    )
    def test_configuration_errors_are_permanent(self, error):
        assert isinstance(error, ConfigurationError)
        assert error.category == ErrorCategory.PERMANENT
        assert not error.is_retryable
        assert not error.should_refresh_auth

    @pytest.mark.parametrize(
        "error_class",
        [AuthenticationRejectedError, IAMSigningError, KerberosError],
    )
    def test_auth_errors_refresh_and_retry(self, error_class):
        error = error_class("rejected")

        assert error.category == ErrorCategory.AUTH
        assert error.is_retryable
        assert error.should_refresh_auth


class TestMessages:

    def test_missing_credential(self):
        error = MissingCredentialError("password", "SCRAM-SHA-256")

        assert str(error) == "password has to be provided"
        assert error.context == {"field": "password", "mechanism": "SCRAM-SHA-256"}

    def test_invalid_enum_quotes_strings(self):
        error = InvalidEnumValueError("mechanism", "X", ("A", "B"), label="SASL mechanism")

        assert str(error) == 'invalid SASL mechanism "X": can be either "A" or "B"'
        assert error.field == "mechanism"

    def test_invalid_enum_single_allowed_value(self):
        error = InvalidEnumValueError("mode", "x", ("only",))

        assert str(error) == 'invalid mode "x": can be either "only"'


class TestClassification:

    def test_typed_errors_use_category(self):
        assert classify_exception(IAMSigningError("x")) == ErrorCategory.AUTH

    def test_timeout_is_transient(self):
        assert classify_exception(TimeoutError()) == ErrorCategory.TRANSIENT

    @pytest.mark.parametrize(
        "message,expected",
        [
            ("SASL authentication failed", ErrorCategory.AUTH),
            ("The security token included in the request is expired", ErrorCategory.AUTH),
            ("Connection reset by peer", ErrorCategory.TRANSIENT),
            ("Rate exceeded, throttling", ErrorCategory.TRANSIENT),
            ("something odd", ErrorCategory.UNKNOWN),
        ],
    )
    def test_string_markers(self, message, expected):
        assert classify_exception(RuntimeError(message)) == expected

    def test_is_auth_error(self):
        assert is_auth_error(RuntimeError("Unauthorized"))
        assert not is_auth_error(RuntimeError("connection refused"))

    def test_is_retryable_error(self):
        assert is_retryable_error(RuntimeError("unexpected"))
        assert is_retryable_error(KerberosError("kdc down"))
        assert not is_retryable_error(MissingCredentialError("username", "PLAIN"))
