"""
AWS_MSK_IAM SASL client.

Implements the client side of the AWS MSK IAM mechanism: the client sends
a JSON payload describing a SigV4-presigned ``kafka-cluster:Connect``
request for the broker host, and the broker answers with a JSON document
carrying its version and request id.

Signing uses botocore's SigV4 query signer and the default AWS credential
chain (environment, shared config, instance/container roles).
"""

import json
import logging
from typing import Any, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit

from botocore.auth import SigV4QueryAuth
from botocore.awsrequest import AWSRequest
from botocore.exceptions import BotoCoreError
from botocore.session import get_session

from kafka_auth.errors import AuthenticationRejectedError, IAMSigningError
from kafka_auth.types import SASL_TYPE_AWS_MSK_IAM

logger = logging.getLogger(__name__)

MECHANISM = SASL_TYPE_AWS_MSK_IAM

PAYLOAD_VERSION = "2020_10_22"
SIGNING_SERVICE = "kafka-cluster"
CONNECT_ACTION = "kafka-cluster:Connect"
SIGNATURE_EXPIRY_SECONDS = 900

_STATE_INITIAL = "initial"
_STATE_PAYLOAD_SENT = "payload_sent"
_STATE_DONE = "done"


def broker_host(broker_addr: str) -> str:
    """Return the host part of ``host:port`` (IPv6 brackets preserved)."""
    if broker_addr.startswith("["):
        return broker_addr[: broker_addr.find("]") + 1]
    host, _, port = broker_addr.rpartition(":")
    if host and port.isdigit():
        return host
    return broker_addr


class IAMSASLClient:
    """
    AWS_MSK_IAM conversation for one connection attempt.

    Attributes:
        broker_addr: Broker the payload is signed for
        region: AWS region of the MSK cluster
        user_agent: Client identifier reported in the payload
    """

    def __init__(
        self,
        broker_addr: str,
        region: str,
        user_agent: str,
        credentials: Optional[Any] = None,
    ):
        self.broker_addr = broker_addr
        self.region = region
        self.user_agent = user_agent
        self._credentials = credentials
        self._state = _STATE_INITIAL

    @property
    def done(self) -> bool:
        return self._state == _STATE_DONE

    def begin(self, username: str, password: str, authz_id: str = "") -> None:
        # Identity comes from AWS credentials; SASL username/password are unused
        self._state = _STATE_INITIAL

    def step(self, challenge: str) -> str:
        """
        Return the signed payload first, then validate the server response.

        Raises:
            IAMSigningError: No AWS credentials found or signing failed
            AuthenticationRejectedError: Unexpected server response
        """
        if self._state == _STATE_INITIAL:
            payload = self._signed_payload()
            self._state = _STATE_PAYLOAD_SENT
            return payload
        if self._state == _STATE_PAYLOAD_SENT:
            self._validate_server_response(challenge)
            self._state = _STATE_DONE
            return ""
        raise AuthenticationRejectedError("AWS_MSK_IAM conversation already completed")

    def _resolve_credentials(self) -> Any:
        if self._credentials is not None:
            return self._credentials

        try:
            credentials = get_session().get_credentials()
        except BotoCoreError as e:
            raise IAMSigningError(f"failed to resolve AWS credentials: {e}", cause=e) from e
        if credentials is None:
            raise IAMSigningError(
                "no AWS credentials found for AWS_MSK_IAM authentication",
                context={"region": self.region},
            )
        return credentials.get_frozen_credentials()

    def _signed_payload(self) -> str:
        host = broker_host(self.broker_addr)
        credentials = self._resolve_credentials()

        query = urlencode({"Action": CONNECT_ACTION})
        request = AWSRequest(method="GET", url=f"https://{host}/?{query}")
        try:
            SigV4QueryAuth(
                credentials, SIGNING_SERVICE, self.region, expires=SIGNATURE_EXPIRY_SECONDS
            ).add_auth(request)
        except (BotoCoreError, ValueError, TypeError) as e:
            raise IAMSigningError(f"failed to sign AWS_MSK_IAM payload: {e}", cause=e) from e

        signed_params = dict(parse_qsl(urlsplit(request.url).query))
        payload = {
            "version": PAYLOAD_VERSION,
            "host": host,
            "user-agent": self.user_agent,
            "action": signed_params.pop("Action", CONNECT_ACTION),
        }
        for key, value in signed_params.items():
            payload[key.lower()] = value

        logger.debug(
            "Signed AWS_MSK_IAM payload",
            extra={
                "mechanism": MECHANISM,
                "region": self.region,
                "broker_addr": self.broker_addr,
            },
        )
        return json.dumps(payload)

    def _validate_server_response(self, challenge: str) -> None:
        if not challenge:
            raise AuthenticationRejectedError("empty AWS_MSK_IAM server response")
        try:
            response = json.loads(challenge)
        except ValueError as e:
            raise AuthenticationRejectedError(
                f"invalid AWS_MSK_IAM server response: {e}", cause=e
            ) from e

        if not isinstance(response, dict) or not response.get("version") or not response.get("request-id"):
            raise AuthenticationRejectedError(
                "AWS_MSK_IAM server response is missing version or request-id"
            )

        logger.debug(
            "AWS_MSK_IAM authentication accepted",
            extra={"mechanism": MECHANISM, "broker_addr": self.broker_addr},
        )

