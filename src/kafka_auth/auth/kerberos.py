"""
Kerberos (GSSAPI) configuration and ticket acquisition.

configure_kerberos() copies the kerberos block onto the client
configuration, selecting keytab or password based ticket acquisition.
acquire_kerberos_credentials() performs that acquisition with the
``gssapi`` package, which is imported lazily as aiokafka does, and
install_kerberos_credentials() stores the result where aiokafka looks.
"""

import logging
import os
from typing import Any

from kafka_auth.client_config import ClientConfiguration, GSSAPISettings
from kafka_auth.config.models import KerberosConfig
from kafka_auth.errors import KerberosError
from kafka_auth.types import SASL_TYPE_GSSAPI, KerberosAuthType

logger = logging.getLogger(__name__)


def configure_kerberos(config: KerberosConfig, client_config: ClientConfiguration) -> None:
    """Enable GSSAPI with the Kerberos settings. No validation is performed."""
    client_config.sasl.mechanism = SASL_TYPE_GSSAPI
    client_config.sasl.enable = True

    gssapi_settings = client_config.sasl.gssapi
    if config.use_keytab:
        gssapi_settings.keytab_path = config.keytab_file
        gssapi_settings.auth_type = KerberosAuthType.KEYTAB
    else:
        gssapi_settings.auth_type = KerberosAuthType.USER
        gssapi_settings.password = config.password
    gssapi_settings.kerberos_config_path = config.config_file
    gssapi_settings.username = config.username
    gssapi_settings.realm = config.realm
    gssapi_settings.service_name = config.service_name
    gssapi_settings.disable_pafx_fast = config.disable_fast_negotiation

    logger.info(
        "Kerberos authentication configured",
        extra={
            "mechanism": SASL_TYPE_GSSAPI,
            "auth_type": gssapi_settings.auth_type.name,
            "realm": config.realm or None,
            "service_name": config.service_name or None,
        },
    )


def principal_name(settings: GSSAPISettings) -> str:
    """Return ``username@REALM``, or the bare username when no realm is set."""
    if settings.realm and "@" not in settings.username:
        return f"{settings.username}@{settings.realm}"
    return settings.username


def acquire_kerberos_credentials(settings: GSSAPISettings) -> Any:
    """
    Acquire initiator credentials for the configured principal.

    Keytab auth reads the principal's key from ``keytab_path``; user auth
    obtains a ticket with the password. A non-empty ``kerberos_config_path``
    is exported as KRB5_CONFIG, which the Kerberos library reads on every
    acquisition.

    Returns:
        gssapi.Credentials usable for the GSSAPI SASL exchange

    Raises:
        KerberosError: gssapi is not installed, the auth type is unset,
            or the KDC rejected the request
    """
    try:
        import gssapi
        import gssapi.raw
    except ImportError as e:
        raise KerberosError(
            "Kerberos authentication requires the 'gssapi' package", cause=e
        ) from e

    if settings.auth_type is None:
        raise KerberosError("Kerberos auth type is not configured")

    if settings.kerberos_config_path:
        os.environ["KRB5_CONFIG"] = settings.kerberos_config_path

    principal = principal_name(settings)
    try:
        name = gssapi.Name(principal, gssapi.NameType.kerberos_principal)
        if settings.auth_type == KerberosAuthType.KEYTAB:
            credentials = gssapi.Credentials(
                name=name,
                usage="initiate",
                store={"client_keytab": settings.keytab_path},
            )
        else:
            result = gssapi.raw.acquire_cred_with_password(
                name, settings.password.encode("utf-8"), usage="initiate"
            )
            credentials = gssapi.Credentials(result.creds)
    except gssapi.exceptions.GSSError as e:
        raise KerberosError(
            f"failed to acquire Kerberos credentials for {principal}: {e}",
            cause=e,
            context={"auth_type": settings.auth_type.name},
        ) from e

    logger.debug(
        "Kerberos credentials acquired",
        extra={"auth_type": settings.auth_type.name, "realm": settings.realm or None},
    )
    return credentials


def install_kerberos_credentials(settings: GSSAPISettings) -> None:
    """
    Acquire credentials and store them as the default initiator credentials.

    aiokafka's GSSAPI exchange authenticates from the default credential
    cache, so keytab or password settings only take effect once stored there.

    Raises:
        KerberosError: Acquisition failed, or the gssapi build cannot
            store credentials
    """
    credentials = acquire_kerberos_credentials(settings)

    import gssapi

    try:
        credentials.store(usage="initiate", overwrite=True, set_default=True)
    except NotImplementedError as e:
        raise KerberosError(
            "the installed gssapi build cannot store Kerberos credentials", cause=e
        ) from e
    except gssapi.exceptions.GSSError as e:
        raise KerberosError(
            f"failed to store Kerberos credentials for {principal_name(settings)}: {e}",
            cause=e,
            context={"auth_type": settings.auth_type.name},
        ) from e

    logger.info(
        "Kerberos credentials installed in the default credential cache",
        extra={"auth_type": settings.auth_type.name, "realm": settings.realm or None},
    )
