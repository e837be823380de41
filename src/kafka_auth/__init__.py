"""
Kafka client authentication.

Turns declarative authentication settings (plaintext, SASL, TLS, Kerberos)
into the security configuration of a Kafka client.
"""

from kafka_auth.authentication import configure_authentication
from kafka_auth.client_config import (
    ClientConfiguration,
    GSSAPISettings,
    SASLSettings,
    TLSSettings,
)

__all__ = [
    "configure_authentication",
    "ClientConfiguration",
    "SASLSettings",
    "TLSSettings",
    "GSSAPISettings",
]
