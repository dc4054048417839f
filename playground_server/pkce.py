"""
PKCE (RFC 7636) verifier and challenge computation for the playground UI.
S256 and plain; the caller keeps the verifier until the token exchange.
"""
import hashlib
import secrets
from base64 import urlsafe_b64encode
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import APIRouter, Body

from playground_server.errors import UnsupportedPkceMethod, ValidationError
from playground_server.params import get_str, sanitize

router = APIRouter()


class CodeChallengeMethod(str, Enum):
    S256 = "S256"
    PLAIN = "plain"


@dataclass(frozen=True)
class PKCEPair:
    verifier: str
    challenge: str
    method: CodeChallengeMethod


def generate_code_verifier() -> str:
    # 32 bytes -> 43 chars base64url (RFC 7636 minimum length)
    return secrets.token_urlsafe(32)


def _parse_method(method: str | CodeChallengeMethod) -> CodeChallengeMethod:
    try:
        return CodeChallengeMethod(method)
    except ValueError:
        raise UnsupportedPkceMethod(f"Unsupported code_challenge_method: {method}")


def compute_challenge(method: str | CodeChallengeMethod = CodeChallengeMethod.S256, verifier: str | None = None) -> PKCEPair:
    """
    Compute the challenge for verifier under method, generating a verifier when none is given.
    S256: base64url(SHA256(verifier)) without padding. plain: the verifier itself.
    """
    parsed = _parse_method(method)
    if not verifier:
        verifier = generate_code_verifier()
    if parsed is CodeChallengeMethod.S256:
        try:
            digest = hashlib.sha256(verifier.encode("ascii")).digest()
        except UnicodeEncodeError:
            raise ValidationError("code_verifier must be ASCII")
        challenge = urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
    else:
        challenge = verifier
    return PKCEPair(verifier=verifier, challenge=challenge, method=parsed)


@router.post("/code_challenge")
def code_challenge(body: dict[str, Any] = Body(...)):
    """
    Compute a PKCE pair. Optional codeChallengeMethod (default S256) and codeVerifier;
    echoes the body with codeChallenge, codeVerifier and codeChallengeMethod set.
    """
    params = sanitize(body)
    pair = compute_challenge(get_str(params, "codeChallengeMethod", "S256"), get_str(params, "codeVerifier"))
    params["codeChallenge"] = pair.challenge
    params["codeVerifier"] = pair.verifier
    params["codeChallengeMethod"] = pair.method.value
    return params
