"""
TLS context loading for Kafka client connections.

load_tls_context() turns declarative client TLS settings into an
ssl.SSLContext. configure_tls() installs the result on a
ClientConfiguration and reports loader failures as TLSConfigLoadError.
"""

import logging
import ssl
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from kafka_auth.errors import TLSConfigLoadError
from kafka_auth.security.ssl_utils import get_ca_bundle_path

if TYPE_CHECKING:
    from kafka_auth.client_config import ClientConfiguration

logger = logging.getLogger(__name__)


TLS_VERSIONS = {
    "1.0": ssl.TLSVersion.TLSv1,
    "1.1": ssl.TLSVersion.TLSv1_1,
    "1.2": ssl.TLSVersion.TLSv1_2,
    "1.3": ssl.TLSVersion.TLSv1_3,
}


@dataclass
class TLSClientSettings:
    """Client-side TLS settings as read from the ``tls`` block.

    Attributes:
        ca_file: Path to a PEM bundle of trusted CAs
        ca_pem: Inline PEM bundle of trusted CAs
        cert_file: Client certificate for mutual TLS
        key_file: Private key matching cert_file
        insecure_skip_verify: Disable certificate and hostname verification
        min_version: Minimum TLS version ("1.0" .. "1.3")
        max_version: Maximum TLS version ("1.0" .. "1.3")
    """

    ca_file: str = ""
    ca_pem: str = ""
    cert_file: str = ""
    key_file: str = ""
    insecure_skip_verify: bool = False
    min_version: str = ""
    max_version: str = ""


TLSLoader = Callable[[TLSClientSettings], ssl.SSLContext]


def _parse_tls_version(value: str, setting: str) -> ssl.TLSVersion:
    try:
        return TLS_VERSIONS[value]
    except KeyError:
        raise ValueError(
            f"invalid TLS {setting} {value!r}: expected one of {', '.join(TLS_VERSIONS)}"
        ) from None


def load_tls_context(settings: TLSClientSettings) -> ssl.SSLContext:
    """
    Build an SSLContext from client TLS settings.

    Trust roots come from ca_file/ca_pem when set, otherwise from the
    SSL_CERT_FILE/REQUESTS_CA_BUNDLE/CURL_CA_BUNDLE environment variables,
    otherwise from the system store.

    Raises:
        ValueError: Inconsistent settings (key without cert, bad TLS version)
        OSError / ssl.SSLError: Unreadable or invalid certificate material
    """
    if bool(settings.cert_file) != bool(settings.key_file):
        raise ValueError("cert_file and key_file must be provided together")

    cafile = settings.ca_file or None
    if not cafile and not settings.ca_pem:
        cafile = get_ca_bundle_path()

    context = ssl.create_default_context(
        cafile=cafile,
        cadata=settings.ca_pem or None,
    )

    if settings.cert_file:
        context.load_cert_chain(settings.cert_file, settings.key_file)

    if settings.min_version:
        context.minimum_version = _parse_tls_version(settings.min_version, "min_version")
    if settings.max_version:
        context.maximum_version = _parse_tls_version(settings.max_version, "max_version")

    if settings.insecure_skip_verify:
        # check_hostname must be cleared before verify_mode can drop to CERT_NONE
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        logger.warning("TLS certificate verification disabled for Kafka connections")

    return context


def configure_tls(
    settings: TLSClientSettings,
    client_config: "ClientConfiguration",
    loader: Optional[TLSLoader] = None,
) -> None:
    """
    Load the TLS context and enable TLS on the client configuration.

    Raises:
        TLSConfigLoadError: The loader failed; wraps the loader's exception
    """
    loader = loader or load_tls_context
    try:
        context = loader(settings)
    except Exception as e:
        raise TLSConfigLoadError(f"error loading tls config: {e}", cause=e) from e

    client_config.tls.enable = True
    client_config.tls.context = context

    logger.debug(
        "TLS configured",
        extra={
            "tls_enabled": True,
            "ca_file": settings.ca_file or None,
            "min_version": settings.min_version or None,
        },
    )
