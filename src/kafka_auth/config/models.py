"""Authentication configuration data model.

Mirrors the ``authentication`` settings block:

    authentication:
      plain_text: {username, password}
      sasl:
        username: ...
        password: ...
        mechanism: PLAIN | SCRAM-SHA-256 | SCRAM-SHA-512 | AWS_MSK_IAM | AWS_MSK_IAM_OAUTHBEARER
        version: 0 | 1
        aws_msk: {region, broker_addr}
      tls: {ca_file, cert_file, key_file, ...}
      kerberos: {service_name, realm, use_keytab, username, password,
                 config_file, keytab_file, disable_fast_negotiation}

A block set to ``None`` is not configured.
"""

from dataclasses import dataclass, field
from typing import Optional

from kafka_auth.security.tls import TLSClientSettings


@dataclass
class PlainTextConfig:
    """Legacy plaintext SASL credentials."""

    username: str = ""
    password: str = field(default="", repr=False)


@dataclass
class AWSMSKConfig:
    """Additional settings for the AWS_MSK_IAM and AWS_MSK_IAM_OAUTHBEARER mechanisms.

    Attributes:
        region: AWS region the MSK cluster is based in
        broker_addr: Broker the client is connecting to, used to sign the IAM payload
    """

    region: str = ""
    broker_addr: str = ""


@dataclass
class SASLConfig:
    """SASL authentication settings.

    Attributes:
        username: Username used for authentication
        password: Password used for authentication
        mechanism: One of PLAIN, AWS_MSK_IAM, AWS_MSK_IAM_OAUTHBEARER,
            SCRAM-SHA-256 or SCRAM-SHA-512
        version: SASL handshake protocol version, 0 or 1
        aws_msk: AWS MSK settings for the IAM mechanisms
    """

    username: str = ""
    password: str = field(default="", repr=False)
    mechanism: str = ""
    version: int = 0
    aws_msk: AWSMSKConfig = field(default_factory=AWSMSKConfig)


@dataclass
class KerberosConfig:
    """Kerberos (GSSAPI) settings."""

    service_name: str = ""
    realm: str = ""
    use_keytab: bool = False
    username: str = ""
    password: str = field(default="", repr=False)
    config_file: str = ""
    keytab_file: str = ""
    disable_fast_negotiation: bool = False


@dataclass
class AuthenticationConfig:
    """All authentication settings for one Kafka client."""

    plain_text: Optional[PlainTextConfig] = None
    sasl: Optional[SASLConfig] = None
    tls: Optional[TLSClientSettings] = None
    kerberos: Optional[KerberosConfig] = None
