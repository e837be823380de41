"""
Kafka SASL/OAUTHBEARER authentication for AWS MSK with IAM.

This module provides an aiokafka token provider that obtains short-lived
MSK IAM auth tokens from aws-msk-iam-sasl-signer-python.

Example:
    >>> from aiokafka import AIOKafkaProducer
    >>> from kafka_auth.auth.msk_oauth import MSKTokenProvider
    >>>
    >>> producer = AIOKafkaProducer(
    ...     bootstrap_servers=["..."],
    ...     security_protocol="SASL_SSL",
    ...     sasl_mechanism="OAUTHBEARER",
    ...     sasl_oauth_token_provider=MSKTokenProvider("us-east-1"),
    ... )

Security Notes:
    - Every token() call signs a new token; nothing is cached here
    - The provider does not log tokens or credentials
    - Cancelling the awaiting task abandons the signing call immediately
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Optional

from aiokafka.abc import AbstractTokenProvider
from aws_msk_iam_sasl_signer import MSKAuthTokenProvider

logger = logging.getLogger(__name__)


# Signs a token for a region: returns (token, expiry in epoch milliseconds)
TokenSigner = Callable[[str], tuple[str, int]]


@dataclass(frozen=True)
class AccessToken:
    """A signed MSK bearer token and its expiry (aware UTC datetime)."""

    token: str = field(repr=False)
    expires_at: datetime


def _default_signer(region: str) -> tuple[str, int]:
    return MSKAuthTokenProvider.generate_auth_token(region)


class MSKTokenProvider(AbstractTokenProvider):
    """
    OAUTHBEARER token provider for AWS MSK.

    aiokafka awaits token() whenever a connection needs to authenticate.
    Concurrent calls are independent: the provider holds only its region,
    signer and default timeout.

    Attributes:
        region: AWS region the MSK cluster is based in
        timeout: Default seconds a token request may take; None waits
            until the calling task is cancelled
    """

    def __init__(
        self,
        region: str,
        signer: Optional[TokenSigner] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__()
        self.region = region
        self.timeout = timeout
        self._signer = signer or _default_signer

    async def fetch_access_token(self, timeout: Optional[float] = None) -> AccessToken:
        """
        Sign a new MSK auth token.

        The signer runs in a worker thread. ``timeout`` overrides the
        provider default for this call.

        Raises:
            asyncio.CancelledError: The calling task was cancelled
            TimeoutError: The signer did not finish within the timeout
            Exception: Any signer failure, unchanged
        """
        effective_timeout = timeout if timeout is not None else self.timeout
        start = time.perf_counter()

        try:
            token, expiry_ms = await asyncio.wait_for(
                asyncio.to_thread(self._signer, self.region),
                timeout=effective_timeout,
            )
        except asyncio.CancelledError:
            logger.debug("MSK token request cancelled", extra={"region": self.region})
            raise
        except Exception as e:
            logger.error(
                "Failed to acquire MSK OAuth token",
                extra={
                    "region": self.region,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "timeout_seconds": effective_timeout,
                },
            )
            raise

        expires_at = datetime.fromtimestamp(expiry_ms / 1000.0, tz=UTC)
        logger.debug(
            "Successfully acquired MSK OAuth token",
            extra={
                "region": self.region,
                "expires_at": expires_at.isoformat(),
                "duration_ms": (time.perf_counter() - start) * 1000,
            },
        )
        return AccessToken(token=token, expires_at=expires_at)

    async def token(self) -> str:
        """Return a freshly signed token string (aiokafka entry point)."""
        access_token = await self.fetch_access_token()
        return access_token.token
