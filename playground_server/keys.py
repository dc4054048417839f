"""
RSA key for signing request objects. Generated at startup, never persisted.
The public half is published as a JWK Set (GET /certs) so providers can verify our request objects.
"""
import base64
import logging

import jwt
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.asymmetric.rsa import generate_private_key

from playground_server.errors import SigningError

logger = logging.getLogger(__name__)

_KEY_BITS = 2048
KEY_ID = "play_key_id"
ALGORITHM = "RS256"


def _b64url_uint(value: int) -> str:
    return base64.urlsafe_b64encode(value.to_bytes((value.bit_length() + 7) // 8, "big")).rstrip(b"=").decode("ascii")


def public_key_to_jwk(public_key, kid: str) -> dict:
    """Export cryptography RSA public key to JWK with given kid."""
    numbers = public_key.public_numbers()
    return {
        "kty": "RSA",
        "kid": kid,
        "alg": ALGORITHM,
        "use": "sig",
        "n": _b64url_uint(numbers.n),
        "e": _b64url_uint(numbers.e),
    }


class KeyManager:
    """
    Owns the signing key for the lifetime of the process. Read-only after construction,
    so concurrent sign() calls need no locking.
    """

    def __init__(self, key_id: str = KEY_ID, private_key=None):
        # Key generation errors propagate: without a key no signing endpoint can be served
        self._private_key = private_key if private_key is not None else generate_private_key(65537, _KEY_BITS, default_backend())
        self.key_id = key_id
        self.algorithm = ALGORITHM
        logger.info("Signing key ready (kid=%s, %s bits)", key_id, self._private_key.key_size)

    def public_key(self):
        return self._private_key.public_key()

    def public_jwk_set(self) -> dict:
        """JWK Set with the public key only; safe to publish."""
        return {"keys": [public_key_to_jwk(self.public_key(), self.key_id)]}

    def sign(self, claims: dict, headers: dict | None = None) -> str:
        """Sign claims as a compact JWS (RS256); kid is always set to our key id."""
        if self._private_key is None:
            raise SigningError("Signing key is not available")
        header = dict(headers or {})
        header["kid"] = self.key_id
        try:
            token = jwt.encode(claims, self._private_key, algorithm=self.algorithm, headers=header)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise SigningError(f"Could not sign JWT: {e}")
        if isinstance(token, bytes):
            token = token.decode("utf-8")
        return token


# Module-level instance (created at app startup)
_key_manager: KeyManager | None = None


def get_key_manager() -> KeyManager:
    """Return the process-wide KeyManager, generating the key on first use."""
    global _key_manager
    if _key_manager is None:
        _key_manager = KeyManager()
    return _key_manager
