"""
Error classification and exception hierarchy.

Provides:
- ErrorCategory enum for classifying errors
- KafkaAuthError hierarchy for typed exceptions
- Classification utilities for retry decisions
"""

from kafka_auth.errors.exceptions import (
    AuthError,
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

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "KafkaAuthError",
    "ConfigurationError",
    "AuthError",
    # Configuration errors
    "MissingCredentialError",
    "InvalidEnumValueError",
    "TLSConfigLoadError",
    "UnsupportedMechanismError",
    # Authentication errors
    "AuthenticationRejectedError",
    "IAMSigningError",
    "KerberosError",
    # Classification utilities
    "classify_exception",
    "is_auth_error",
    "is_retryable_error",
]
