"""
Core types and enums shared across the authentication modules.

This module provides the error categories and the closed sets of values
that the configuration is allowed to take, so every module compares
against the same enum classes.
"""

from enum import Enum, IntEnum
from typing import Protocol


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures that should retry with backoff
                   (e.g., signer timeouts, broker connection resets)
        AUTH: Authentication failures requiring credential refresh
              (e.g., rejected SCRAM proof, expired IAM credentials)
        PERMANENT: Non-retriable failures that won't succeed on retry
                   (e.g., missing credentials, unsupported mechanism)
        UNKNOWN: Unclassified errors, may retry conservatively
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class SASLMechanism(str, Enum):
    """SASL mechanisms accepted in the ``sasl.mechanism`` setting."""

    PLAIN = "PLAIN"
    SCRAM_SHA_256 = "SCRAM-SHA-256"
    SCRAM_SHA_512 = "SCRAM-SHA-512"
    AWS_MSK_IAM = "AWS_MSK_IAM"
    AWS_MSK_IAM_OAUTHBEARER = "AWS_MSK_IAM_OAUTHBEARER"


class SASLHandshakeVersion(IntEnum):
    """SASL handshake request version negotiated with the broker."""

    V0 = 0
    V1 = 1


class KerberosAuthType(IntEnum):
    """How GSSAPI obtains its initial Kerberos ticket."""

    USER = 1
    KEYTAB = 2


# Mechanism names as they appear on the client side (what the broker sees)
SASL_TYPE_PLAINTEXT = "PLAIN"
SASL_TYPE_SCRAM_SHA_256 = "SCRAM-SHA-256"
SASL_TYPE_SCRAM_SHA_512 = "SCRAM-SHA-512"
SASL_TYPE_OAUTH = "OAUTHBEARER"
SASL_TYPE_GSSAPI = "GSSAPI"
SASL_TYPE_AWS_MSK_IAM = "AWS_MSK_IAM"


class ChallengeResponseClient(Protocol):
    """
    Protocol for SASL clients driven by the broker connection.

    A new instance is created per connection attempt. The connection calls
    ``begin`` once, then ``step`` with each server challenge until ``done``
    reports completion.
    """

    def begin(self, username: str, password: str, authz_id: str = "") -> None:
        ...

    def step(self, challenge: str) -> str:
        ...

    @property
    def done(self) -> bool:
        ...
