"""
Authentication dispatch for Kafka clients.

configure_authentication() is called once while a client is being built.
It validates the settings, then applies every configured block in a fixed
order (plaintext, TLS, SASL, Kerberos) to one ClientConfiguration:

    >>> from kafka_auth import ClientConfiguration, configure_authentication
    >>> from kafka_auth.config import AuthenticationConfig, SASLConfig
    >>>
    >>> client_config = ClientConfiguration(client_id="orders-exporter")
    >>> configure_authentication(
    ...     AuthenticationConfig(
    ...         sasl=SASLConfig(username="u", password="p", mechanism="SCRAM-SHA-512")
    ...     ),
    ...     client_config,
    ... )
    >>> producer = AIOKafkaProducer(**client_config.to_aiokafka_kwargs())

Blocks are not checked for mutual exclusivity. When several
credential-bearing blocks are present, later blocks overwrite the SASL
fields written by earlier ones.
"""

import logging
from typing import Optional

from kafka_auth.auth.kerberos import configure_kerberos
from kafka_auth.auth.mechanisms import resolve_sasl_mechanism
from kafka_auth.auth.sasl import configure_plaintext, configure_sasl
from kafka_auth.client_config import ClientConfiguration
from kafka_auth.config.models import AuthenticationConfig
from kafka_auth.errors import KafkaAuthError
from kafka_auth.logging.utilities import log_exception
from kafka_auth.security.tls import TLSLoader, configure_tls

logger = logging.getLogger(__name__)


def configure_authentication(
    config: AuthenticationConfig,
    client_config: ClientConfiguration,
    tls_loader: Optional[TLSLoader] = None,
    token_timeout: Optional[float] = None,
) -> None:
    """
    Apply authentication settings to a client configuration.

    The SASL block is validated before anything is written. After that the
    first failure aborts dispatch without undoing earlier writes, so the
    caller must discard ``client_config`` when this raises.

    Args:
        config: Authentication settings
        client_config: Target configuration, owned by this call until it returns
        tls_loader: Builds the SSLContext from TLS settings (default: load_tls_context)
        token_timeout: Default seconds each AWS_MSK_IAM_OAUTHBEARER token request may take

    Raises:
        MissingCredentialError: SASL username or password missing
        InvalidEnumValueError: Unsupported SASL mechanism or handshake version
        TLSConfigLoadError: The TLS context could not be loaded
    """
    configured = [
        name
        for name in ("plain_text", "tls", "sasl", "kerberos")
        if getattr(config, name) is not None
    ]
    credential_blocks = [name for name in configured if name != "tls"]
    if len(credential_blocks) > 1:
        logger.warning(
            "Multiple credential blocks configured; later blocks overwrite earlier SASL settings",
            extra={"configured": ",".join(credential_blocks)},
        )

    try:
        resolved_sasl = resolve_sasl_mechanism(config.sasl) if config.sasl is not None else None

        if config.plain_text is not None:
            configure_plaintext(config.plain_text, client_config)
        if config.tls is not None:
            configure_tls(config.tls, client_config, loader=tls_loader)
        if config.sasl is not None:
            configure_sasl(
                config.sasl,
                client_config,
                resolved=resolved_sasl,
                token_timeout=token_timeout,
            )
        if config.kerberos is not None:
            configure_kerberos(config.kerberos, client_config)
    except KafkaAuthError as e:
        log_exception(
            logger,
            e,
            "Failed to configure Kafka authentication",
            include_traceback=False,
            configured=",".join(configured),
        )
        raise

    logger.debug(
        "Kafka authentication configured",
        extra={
            "configured": ",".join(configured),
            "mechanism": client_config.sasl.mechanism or None,
            "tls_enabled": client_config.tls.enable,
        },
    )
