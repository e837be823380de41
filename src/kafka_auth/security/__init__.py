"""
Transport security module.

Builds TLS contexts for Kafka client connections and installs them on a
ClientConfiguration.
"""

from kafka_auth.security.ssl_utils import get_ca_bundle_path
from kafka_auth.security.tls import (
    TLS_VERSIONS,
    TLSClientSettings,
    TLSLoader,
    configure_tls,
    load_tls_context,
)

__all__ = [
    "TLSClientSettings",
    "TLSLoader",
    "TLS_VERSIONS",
    "configure_tls",
    "load_tls_context",
    "get_ca_bundle_path",
]
