"""
Signed request objects (OIDC Core §6.1): authorization parameters carried as claims of a JWT
passed in the "request" query parameter.
"""
import time
import uuid
from collections.abc import Mapping

from playground_server.keys import KeyManager

REQUEST_OBJECT_AUDIENCE = "audience"
REQUEST_OBJECT_LIFETIME = 3600

# Moved into the request object; client_id, response_type, scope, redirect_uri and nonce stay plaintext
REQUEST_OBJECT_EXCLUDED = (
    "response_mode",
    "claims",
    "prompt",
    "state",
    "code_challenge",
    "code_challenge_method",
    "acr_values",
)


def request_object_claims(parameters: Mapping[str, str | None], client_id: str, now: int | None = None) -> dict:
    if now is None:
        now = int(time.time())
    claims = {
        "iss": client_id,
        "sub": client_id,
        "aud": REQUEST_OBJECT_AUDIENCE,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "nbf": now,
        "exp": now + REQUEST_OBJECT_LIFETIME,
    }
    for key, value in parameters.items():
        if key in claims or value is None or not value.strip():
            continue
        claims[key] = value
    return claims


def sign_request_object(parameters: Mapping[str, str | None], key_manager: KeyManager, client_id: str) -> str:
    """Return the compact serialization of the signed request object for the given parameters."""
    claims = request_object_claims(parameters, client_id)
    return key_manager.sign(claims, headers={"typ": "JWT"})
