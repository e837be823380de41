"""Authentication configuration models and loading."""

from kafka_auth.config.loader import (
    authentication_config_from_dict,
    find_plaintext_secrets,
    load_authentication_config,
)
from kafka_auth.config.models import (
    AuthenticationConfig,
    AWSMSKConfig,
    KerberosConfig,
    PlainTextConfig,
    SASLConfig,
)
from kafka_auth.security.tls import TLSClientSettings

__all__ = [
    "AuthenticationConfig",
    "AWSMSKConfig",
    "KerberosConfig",
    "PlainTextConfig",
    "SASLConfig",
    "TLSClientSettings",
    "authentication_config_from_dict",
    "find_plaintext_secrets",
    "load_authentication_config",
]
