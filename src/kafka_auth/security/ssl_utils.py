"""SSL/TLS utilities for corporate proxy environments."""

import os


def get_ca_bundle_path() -> str | None:
    """Return a custom CA bundle path from the environment, or ``None``."""
    return (
        os.getenv("SSL_CERT_FILE")
        or os.getenv("REQUESTS_CA_BUNDLE")
        or os.getenv("CURL_CA_BUNDLE")
        or None
    )
