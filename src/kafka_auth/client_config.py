"""
Kafka client security configuration target.

ClientConfiguration is the single mutable object the authentication
configurators write into. One configure_authentication() call owns it for
its duration; no locking is done.

to_aiokafka_kwargs() translates the finished configuration into keyword
arguments for AIOKafkaProducer / AIOKafkaConsumer.
"""

import ssl
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Optional

from aiokafka.abc import AbstractTokenProvider

from kafka_auth.errors import UnsupportedMechanismError
from kafka_auth.types import (
    SASL_TYPE_AWS_MSK_IAM,
    SASL_TYPE_GSSAPI,
    SASL_TYPE_OAUTH,
    SASL_TYPE_PLAINTEXT,
    ChallengeResponseClient,
    KerberosAuthType,
    SASLHandshakeVersion,
)

DEFAULT_CLIENT_ID = "kafka-auth"


@dataclass
class GSSAPISettings:
    """Kerberos parameters used by the GSSAPI mechanism."""

    auth_type: Optional[KerberosAuthType] = None
    keytab_path: str = ""
    kerberos_config_path: str = ""
    service_name: str = ""
    username: str = ""
    password: str = field(default="", repr=False)
    realm: str = ""
    disable_pafx_fast: bool = False


@dataclass
class SASLSettings:
    enable: bool = False
    mechanism: str = ""
    user: str = ""
    password: str = field(default="", repr=False)
    version: SASLHandshakeVersion = SASLHandshakeVersion.V0
    # Called once per connection attempt; each call returns a fresh client
    scram_client_factory: Optional[Callable[[], ChallengeResponseClient]] = None
    token_provider: Optional[AbstractTokenProvider] = None
    gssapi: GSSAPISettings = field(default_factory=GSSAPISettings)


@dataclass
class TLSSettings:
    enable: bool = False
    context: Optional[ssl.SSLContext] = None


@dataclass
class ClientConfiguration:
    """Security state of one Kafka client."""

    client_id: str = DEFAULT_CLIENT_ID
    sasl: SASLSettings = field(default_factory=SASLSettings)
    tls: TLSSettings = field(default_factory=TLSSettings)

    @property
    def security_protocol(self) -> str:
        if self.sasl.enable:
            return "SASL_SSL" if self.tls.enable else "SASL_PLAINTEXT"
        return "SSL" if self.tls.enable else "PLAINTEXT"

    def to_aiokafka_kwargs(self) -> dict[str, Any]:
        """Build aiokafka security kwargs from this configuration.

        Handles PLAIN, SCRAM, OAUTHBEARER and GSSAPI SASL mechanisms and the
        SSL context. Returns only ``security_protocol`` for PLAINTEXT
        connections. For GSSAPI with a keytab or password configured, the
        Kerberos credentials are acquired into the default credential cache
        before returning.

        Raises:
            UnsupportedMechanismError: AWS_MSK_IAM, which aiokafka cannot negotiate
            KerberosError: GSSAPI credentials could not be acquired or stored
        """
        kwargs: dict[str, Any] = {
            "client_id": self.client_id,
            "security_protocol": self.security_protocol,
        }

        if self.tls.enable:
            kwargs["ssl_context"] = self.tls.context or ssl.create_default_context()

        if not self.sasl.enable:
            return kwargs

        # Plaintext-only configuration leaves the mechanism unset
        mechanism = self.sasl.mechanism or SASL_TYPE_PLAINTEXT
        if mechanism == SASL_TYPE_AWS_MSK_IAM:
            raise UnsupportedMechanismError(
                "aiokafka does not support the AWS_MSK_IAM mechanism; "
                "use AWS_MSK_IAM_OAUTHBEARER instead",
                context={"mechanism": mechanism},
            )

        kwargs["sasl_mechanism"] = mechanism
        if mechanism == SASL_TYPE_OAUTH:
            kwargs["sasl_oauth_token_provider"] = self.sasl.token_provider
        elif mechanism == SASL_TYPE_GSSAPI:
            if self.sasl.gssapi.auth_type is not None:
                from kafka_auth.auth.kerberos import install_kerberos_credentials

                install_kerberos_credentials(self.sasl.gssapi)
            kwargs["sasl_kerberos_service_name"] = self.sasl.gssapi.service_name
        else:
            kwargs["sasl_plain_username"] = self.sasl.user
            kwargs["sasl_plain_password"] = self.sasl.password

        return kwargs
