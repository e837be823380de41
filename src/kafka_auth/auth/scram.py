"""
SCRAM (RFC 5802) SASL client bound to a hash constructor.

The broker connection drives one ScramClient per connection attempt:

    client = ScramClient(SHA512)
    client.begin("alice", "secret")
    client_first = client.step("")            # n,,n=alice,r=<nonce>
    client_final = client.step(server_first)  # c=biws,r=<nonce>,p=<proof>
    client.step(server_final)                 # verifies v=<signature>
    assert client.done

Hashing and key derivation come from hashlib/hmac; this module only wires
the selected hash family into the message exchange.
"""

import base64
import hashlib
import hmac
import logging
import secrets
from collections.abc import Callable
from typing import Any

from kafka_auth.errors import AuthenticationRejectedError

logger = logging.getLogger(__name__)

HashFactory = Callable[..., Any]

# Hash generator functions for the two supported SCRAM families
SHA256: HashFactory = hashlib.sha256
SHA512: HashFactory = hashlib.sha512

NONCE_BYTES = 24

_STATE_INITIAL = "initial"
_STATE_CLIENT_FIRST_SENT = "client_first_sent"
_STATE_CLIENT_FINAL_SENT = "client_final_sent"
_STATE_DONE = "done"


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _escape_username(username: str) -> str:
    return username.replace("=", "=3D").replace(",", "=2C")


def _parse_attributes(message: str) -> dict[str, str]:
    attributes = {}
    for part in message.split(","):
        if len(part) < 2 or part[1] != "=":
            raise AuthenticationRejectedError(
                f"malformed SCRAM server message: {message!r}"
            )
        attributes[part[0]] = part[2:]
    return attributes


class ScramClient:
    """
    SCRAM client conversation for one connection attempt.

    Attributes:
        hash_factory: Hash constructor (SHA256 or SHA512) the keys are derived with
        digest_size: Byte length of proofs and signatures for that hash
    """

    def __init__(self, hash_factory: HashFactory):
        self.hash_factory = hash_factory
        self.digest_size = hash_factory().digest_size
        self._state = _STATE_INITIAL
        self._username = ""
        self._password = ""
        self._authz_id = ""
        self._client_nonce = ""
        self._client_first_bare = ""
        self._server_signature = b""

    @property
    def hash_name(self) -> str:
        return self.hash_factory().name

    @property
    def done(self) -> bool:
        return self._state == _STATE_DONE

    def begin(self, username: str, password: str, authz_id: str = "") -> None:
        """Start a new conversation with the given credentials."""
        self._username = username
        self._password = password
        self._authz_id = authz_id
        self._client_nonce = _b64(secrets.token_bytes(NONCE_BYTES))
        self._state = _STATE_INITIAL

    def step(self, challenge: str) -> str:
        """
        Process a server message and return the next client message.

        The first call ignores ``challenge`` and returns the client-first
        message. The last call verifies the server signature and returns an
        empty string.

        Raises:
            AuthenticationRejectedError: Server error, malformed message,
                nonce mismatch or signature mismatch, or begin() was not called
        """
        if not self._client_nonce:
            raise AuthenticationRejectedError("SCRAM conversation has not begun")
        if self._state == _STATE_INITIAL:
            return self._client_first()
        if self._state == _STATE_CLIENT_FIRST_SENT:
            return self._client_final(challenge)
        if self._state == _STATE_CLIENT_FINAL_SENT:
            self._verify_server_final(challenge)
            return ""
        raise AuthenticationRejectedError("SCRAM conversation already completed")

    @property
    def _gs2_header(self) -> str:
        if self._authz_id:
            return f"n,a={_escape_username(self._authz_id)},"
        return "n,,"

    def _hmac(self, key: bytes, message: bytes) -> bytes:
        return hmac.new(key, message, self.hash_factory).digest()

    def _client_first(self) -> str:
        self._client_first_bare = (
            f"n={_escape_username(self._username)},r={self._client_nonce}"
        )
        self._state = _STATE_CLIENT_FIRST_SENT
        return self._gs2_header + self._client_first_bare

    def _client_final(self, server_first: str) -> str:
        attributes = _parse_attributes(server_first)
        if "e" in attributes:
            raise AuthenticationRejectedError(
                f"SCRAM server error: {attributes['e']}"
            )
        if "m" in attributes:
            raise AuthenticationRejectedError("SCRAM server requested unsupported extension")

        try:
            nonce = attributes["r"]
            salt = base64.b64decode(attributes["s"], validate=True)
            iterations = int(attributes["i"])
        except (KeyError, ValueError) as e:
            raise AuthenticationRejectedError(
                f"malformed SCRAM server-first message: {server_first!r}", cause=e
            ) from e

        if not nonce.startswith(self._client_nonce) or nonce == self._client_nonce:
            raise AuthenticationRejectedError("SCRAM server nonce does not extend client nonce")
        if iterations < 1:
            raise AuthenticationRejectedError(f"invalid SCRAM iteration count {iterations}")

        salted_password = hashlib.pbkdf2_hmac(
            self.hash_name, self._password.encode("utf-8"), salt, iterations
        )
        client_key = self._hmac(salted_password, b"Client Key")
        stored_key = self.hash_factory(client_key).digest()

        channel_binding = _b64(self._gs2_header.encode("utf-8"))
        client_final_without_proof = f"c={channel_binding},r={nonce}"
        auth_message = ",".join(
            (self._client_first_bare, server_first, client_final_without_proof)
        ).encode("utf-8")

        client_signature = self._hmac(stored_key, auth_message)
        proof = bytes(a ^ b for a, b in zip(client_key, client_signature))

        server_key = self._hmac(salted_password, b"Server Key")
        self._server_signature = self._hmac(server_key, auth_message)

        self._state = _STATE_CLIENT_FINAL_SENT
        return f"{client_final_without_proof},p={_b64(proof)}"

    def _verify_server_final(self, server_final: str) -> None:
        attributes = _parse_attributes(server_final)
        if "e" in attributes:
            raise AuthenticationRejectedError(
                f"SCRAM server error: {attributes['e']}"
            )
        try:
            signature = base64.b64decode(attributes["v"], validate=True)
        except (KeyError, ValueError) as e:
            raise AuthenticationRejectedError(
                f"malformed SCRAM server-final message: {server_final!r}", cause=e
            ) from e

        if not hmac.compare_digest(signature, self._server_signature):
            raise AuthenticationRejectedError("SCRAM server signature mismatch")

        self._state = _STATE_DONE
        logger.debug("SCRAM exchange verified", extra={"mechanism": f"SCRAM-SHA-{self.digest_size * 8}"})


def scram_client_factory(hash_factory: HashFactory) -> Callable[[], ScramClient]:
    """Return a factory producing a new ScramClient bound to ``hash_factory`` per call."""

    def new_client() -> ScramClient:
        return ScramClient(hash_factory)

    return new_client
