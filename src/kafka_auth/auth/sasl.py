"""SASL and plaintext configurators."""

import logging
import ssl
from typing import Optional

from kafka_auth.auth.aws_msk_iam import IAMSASLClient
from kafka_auth.auth.mechanisms import (
    AwsMskIamMechanism,
    AwsMskOAuthBearerMechanism,
    PlainMechanism,
    ResolvedSASL,
    ScramMechanism,
    resolve_sasl_mechanism,
)
from kafka_auth.auth.msk_oauth import MSKTokenProvider
from kafka_auth.auth.scram import scram_client_factory
from kafka_auth.client_config import ClientConfiguration
from kafka_auth.config.models import PlainTextConfig, SASLConfig
from kafka_auth.types import (
    SASL_TYPE_AWS_MSK_IAM,
    SASL_TYPE_OAUTH,
    SASL_TYPE_PLAINTEXT,
)

logger = logging.getLogger(__name__)


def configure_plaintext(config: PlainTextConfig, client_config: ClientConfiguration) -> None:
    """Enable SASL with the plaintext credentials. Empty values are accepted."""
    client_config.sasl.enable = True
    client_config.sasl.user = config.username
    client_config.sasl.password = config.password


def configure_sasl(
    config: SASLConfig,
    client_config: ClientConfiguration,
    resolved: Optional[ResolvedSASL] = None,
    token_timeout: Optional[float] = None,
) -> None:
    """
    Enable SASL and install the configured mechanism.

    Args:
        config: SASL block
        client_config: Target client configuration
        resolved: Result of resolve_sasl_mechanism(config) when already validated
        token_timeout: Default timeout for AWS_MSK_IAM_OAUTHBEARER token requests

    Raises:
        MissingCredentialError: Empty username or password
        InvalidEnumValueError: Unsupported mechanism or handshake version
    """
    if resolved is None:
        resolved = resolve_sasl_mechanism(config)
    mechanism = resolved.mechanism

    client_config.sasl.enable = True
    client_config.sasl.user = config.username
    client_config.sasl.password = config.password
    client_config.sasl.version = resolved.version

    if isinstance(mechanism, PlainMechanism):
        client_config.sasl.mechanism = SASL_TYPE_PLAINTEXT
    elif isinstance(mechanism, ScramMechanism):
        client_config.sasl.scram_client_factory = scram_client_factory(mechanism.hash_factory)
        client_config.sasl.mechanism = mechanism.mechanism.value
    elif isinstance(mechanism, AwsMskIamMechanism):

        def new_iam_client() -> IAMSASLClient:
            return IAMSASLClient(
                mechanism.broker_addr, mechanism.region, client_config.client_id
            )

        client_config.sasl.scram_client_factory = new_iam_client
        client_config.sasl.mechanism = SASL_TYPE_AWS_MSK_IAM
    elif isinstance(mechanism, AwsMskOAuthBearerMechanism):
        client_config.sasl.mechanism = SASL_TYPE_OAUTH
        client_config.sasl.token_provider = MSKTokenProvider(
            mechanism.region, timeout=token_timeout
        )
        if client_config.tls.enable:
            logger.warning(
                "AWS_MSK_IAM_OAUTHBEARER replaces the configured TLS context with the default one",
                extra={"mechanism": SASL_TYPE_OAUTH},
            )
        client_config.tls.enable = True
        client_config.tls.context = ssl.create_default_context()
    else:
        raise TypeError(f"unhandled SASL mechanism variant: {type(mechanism).__name__}")

    logger.info(
        "SASL authentication configured",
        extra={
            "mechanism": client_config.sasl.mechanism,
            "handshake_version": int(resolved.version),
            "username": config.username or None,
        },
    )
