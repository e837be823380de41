"""
Resolution of SASL settings into mechanism variants.

resolve_sasl_mechanism() validates a SASLConfig and returns one variant
per supported mechanism, carrying only the settings that mechanism uses.
Nothing is written to a client configuration here, so a rejected setting
leaves the target untouched.
"""

from dataclasses import dataclass, field
from typing import Union

from kafka_auth.auth.scram import SHA256, SHA512, HashFactory
from kafka_auth.config.models import SASLConfig
from kafka_auth.errors import InvalidEnumValueError, MissingCredentialError
from kafka_auth.types import SASLHandshakeVersion, SASLMechanism


@dataclass(frozen=True)
class PlainMechanism:
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class ScramMechanism:
    mechanism: SASLMechanism
    username: str
    password: str = field(repr=False)

    @property
    def hash_factory(self) -> HashFactory:
        return SHA512 if self.mechanism == SASLMechanism.SCRAM_SHA_512 else SHA256


@dataclass(frozen=True)
class AwsMskIamMechanism:
    username: str
    password: str = field(repr=False)
    region: str = ""
    broker_addr: str = ""


@dataclass(frozen=True)
class AwsMskOAuthBearerMechanism:
    # Credentials are optional here and only kept for the client configuration
    username: str = ""
    password: str = field(default="", repr=False)
    region: str = ""
    broker_addr: str = ""


MechanismVariant = Union[
    PlainMechanism,
    ScramMechanism,
    AwsMskIamMechanism,
    AwsMskOAuthBearerMechanism,
]


@dataclass(frozen=True)
class ResolvedSASL:
    """A validated SASL block: mechanism variant plus handshake version."""

    mechanism: MechanismVariant
    version: SASLHandshakeVersion


ALLOWED_MECHANISMS = tuple(m.value for m in SASLMechanism)
ALLOWED_VERSIONS = tuple(v.value for v in SASLHandshakeVersion)


def parse_mechanism(value: object) -> SASLMechanism:
    """Map a configured mechanism name onto SASLMechanism (exact match only)."""
    if isinstance(value, str) and value in ALLOWED_MECHANISMS:
        return SASLMechanism(value)
    raise InvalidEnumValueError(
        "mechanism", value, ALLOWED_MECHANISMS, label="SASL mechanism"
    )


def parse_handshake_version(value: object) -> SASLHandshakeVersion:
    """Map a configured protocol version onto SASLHandshakeVersion (0 or 1)."""
    # bool is an int subclass; True must not pass as version 1
    if isinstance(value, int) and not isinstance(value, bool) and value in ALLOWED_VERSIONS:
        return SASLHandshakeVersion(value)
    raise InvalidEnumValueError(
        "version", value, ALLOWED_VERSIONS, label="SASL protocol version"
    )


def resolve_sasl_mechanism(config: SASLConfig) -> ResolvedSASL:
    """
    Validate a SASL block and build its mechanism variant.

    Credentials are checked first (username, then password), then the
    mechanism name, then the handshake version.

    Raises:
        MissingCredentialError: Empty username or password for a mechanism
            other than AWS_MSK_IAM_OAUTHBEARER
        InvalidEnumValueError: Unsupported mechanism or handshake version
    """
    oauthbearer = config.mechanism == SASLMechanism.AWS_MSK_IAM_OAUTHBEARER.value
    if not oauthbearer:
        if not config.username:
            raise MissingCredentialError("username", str(config.mechanism))
        if not config.password:
            raise MissingCredentialError("password", str(config.mechanism))

    mechanism = parse_mechanism(config.mechanism)
    version = parse_handshake_version(config.version)

    if mechanism == SASLMechanism.PLAIN:
        variant: MechanismVariant = PlainMechanism(config.username, config.password)
    elif mechanism in (SASLMechanism.SCRAM_SHA_256, SASLMechanism.SCRAM_SHA_512):
        variant = ScramMechanism(mechanism, config.username, config.password)
    elif mechanism == SASLMechanism.AWS_MSK_IAM:
        variant = AwsMskIamMechanism(
            config.username,
            config.password,
            region=config.aws_msk.region,
            broker_addr=config.aws_msk.broker_addr,
        )
    else:
        variant = AwsMskOAuthBearerMechanism(
            config.username,
            config.password,
            region=config.aws_msk.region,
            broker_addr=config.aws_msk.broker_addr,
        )

    return ResolvedSASL(mechanism=variant, version=version)
