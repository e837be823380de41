"""
Unified exception hierarchy for Kafka client authentication.

Provides typed exceptions with retry classification so the owning client
driver can tell configuration mistakes (fatal at construction time) from
authentication failures that may succeed on the next connection attempt.
"""

from collections.abc import Iterable

# Import ErrorCategory from canonical source to avoid duplicate enum issues
from kafka_auth.types import ErrorCategory


class KafkaAuthError(Exception):
    """
    Base exception for all authentication errors.

    Attributes:
        message: Human-readable error description
        category: Error classification for retry decisions
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        return self.category in (
            ErrorCategory.TRANSIENT,
            ErrorCategory.AUTH,
            ErrorCategory.UNKNOWN,
        )

    @property
    def should_refresh_auth(self) -> bool:
        return self.category == ErrorCategory.AUTH

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Configuration Errors (Permanent)
# =============================================================================


class ConfigurationError(KafkaAuthError):
    """Base class for invalid authentication settings."""

    category = ErrorCategory.PERMANENT


class MissingCredentialError(ConfigurationError):
    """A username or password required by the selected mechanism is empty."""

    def __init__(self, field: str, mechanism: str):
        super().__init__(
            f"{field} has to be provided",
            context={"field": field, "mechanism": mechanism},
        )
        self.field = field
        self.mechanism = mechanism


class InvalidEnumValueError(ConfigurationError):
    """A setting holds a value outside its closed set of allowed values."""

    def __init__(
        self,
        field: str,
        value: object,
        allowed: Iterable[object],
        label: str | None = None,
    ):
        self.field = field
        self.value = value
        self.allowed = tuple(allowed)
        shown = f'"{value}"' if isinstance(value, str) else value
        super().__init__(
            f"invalid {label or field} {shown}: can be either {_format_allowed(self.allowed)}",
            context={"field": field},
        )


class TLSConfigLoadError(ConfigurationError):
    """The TLS context could not be built from the configured settings."""

    pass


class UnsupportedMechanismError(ConfigurationError):
    """The configured mechanism has no counterpart in the target client library."""

    pass


# =============================================================================
# Authentication Errors
# =============================================================================


class AuthError(KafkaAuthError):
    """Base class for authentication errors."""

    category = ErrorCategory.AUTH


class AuthenticationRejectedError(AuthError):
    """The SASL exchange with the broker failed verification."""

    pass


class IAMSigningError(AuthError):
    """AWS credentials could not be resolved or the IAM payload could not be signed."""

    pass


class KerberosError(AuthError):
    """Kerberos ticket acquisition failed."""

    pass


# =============================================================================
# Error Classification Utilities
# =============================================================================

# Markers for string-based detection (fallback for non-KafkaAuthError exceptions)
AUTH_ERROR_MARKERS = frozenset(
    {
        "unauthorized",
        "authentication",
        "sasl",
        "token expired",
        "invalid token",
        "expiredtoken",
        "unrecognizedclient",
        "security token",
    }
)

TRANSIENT_ERROR_MARKERS = frozenset(
    {
        "timeout",
        "timed out",
        "connection",
        "throttl",
        "temporarily unavailable",
        "service unavailable",
    }
)


def _format_allowed(allowed: tuple) -> str:
    quoted = [f'"{a}"' if isinstance(a, str) else str(a) for a in allowed]
    if len(quoted) < 2:
        return "".join(quoted)
    return ", ".join(quoted[:-1]) + " or " + quoted[-1]


def classify_exception(exc: BaseException) -> ErrorCategory:
    """Classify an exception into error category."""
    # Already classified
    if isinstance(exc, KafkaAuthError):
        return exc.category

    if isinstance(exc, TimeoutError):
        return ErrorCategory.TRANSIENT

    exc_type = type(exc).__name__.lower()
    exc_str = str(exc).lower()

    if any(m in exc_type or m in exc_str for m in AUTH_ERROR_MARKERS):
        return ErrorCategory.AUTH

    if any(m in exc_type or m in exc_str for m in TRANSIENT_ERROR_MARKERS):
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


def is_auth_error(exc: BaseException) -> bool:
    """
    Check if exception is authentication-related.

    Returns True if this is an auth error that should trigger token refresh.
    """
    return classify_exception(exc) == ErrorCategory.AUTH


def is_retryable_error(exc: BaseException) -> bool:
    """
    Check if exception should be retried on the next connection attempt.

    Retryable errors include:
    - Transient errors (signer timeouts, connection failures)
    - Auth errors (after credential refresh)
    - Unknown errors (conservative retry)

    Non-retryable:
    - Configuration errors (missing credentials, invalid enum values, TLS load)
    """
    if isinstance(exc, KafkaAuthError):
        return exc.is_retryable

    return classify_exception(exc) in (
        ErrorCategory.TRANSIENT,
        ErrorCategory.AUTH,
        ErrorCategory.UNKNOWN,
    )
