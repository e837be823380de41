"""
Authentication mechanisms module.

Components:
    - SCRAM-SHA-256 / SCRAM-SHA-512 challenge-response clients
    - AWS_MSK_IAM signed-payload SASL client
    - AWS_MSK_IAM_OAUTHBEARER token provider for aiokafka
    - Kerberos (GSSAPI) configuration and ticket acquisition
    - SASL and plaintext configurators
"""

from kafka_auth.auth.aws_msk_iam import IAMSASLClient
from kafka_auth.auth.kerberos import (
    acquire_kerberos_credentials,
    configure_kerberos,
    install_kerberos_credentials,
)
from kafka_auth.auth.mechanisms import (
    AwsMskIamMechanism,
    AwsMskOAuthBearerMechanism,
    PlainMechanism,
    ResolvedSASL,
    ScramMechanism,
    resolve_sasl_mechanism,
)
from kafka_auth.auth.msk_oauth import AccessToken, MSKTokenProvider
from kafka_auth.auth.sasl import configure_plaintext, configure_sasl
from kafka_auth.auth.scram import SHA256, SHA512, ScramClient, scram_client_factory

__all__ = [
    # SCRAM
    "ScramClient",
    "scram_client_factory",
    "SHA256",
    "SHA512",
    # AWS MSK
    "IAMSASLClient",
    "MSKTokenProvider",
    "AccessToken",
    # Mechanism variants
    "PlainMechanism",
    "ScramMechanism",
    "AwsMskIamMechanism",
    "AwsMskOAuthBearerMechanism",
    "ResolvedSASL",
    "resolve_sasl_mechanism",
    # Configurators
    "configure_plaintext",
    "configure_sasl",
    "configure_kerberos",
    "acquire_kerberos_credentials",
    "install_kerberos_credentials",
]
