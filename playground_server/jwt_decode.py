"""
JWT inspection for the UI (GET /decode_jwt). Decodes header and payload without verifying anything.
Opaque reference tokens (UUIDs) are passed through unchanged.
"""
import json
import logging
import re

import jwt
from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse, Response

from playground_server.errors import MalformedJwt

logger = logging.getLogger(__name__)
router = APIRouter()

UUID_PATTERN = re.compile(r"[a-fA-F0-9]{8}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{12}")

_NO_VERIFICATION = {
    "verify_signature": False,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
}


def is_reference_token(token: str) -> bool:
    return UUID_PATTERN.fullmatch(token) is not None


def decode_jwt(token: str) -> str:
    """
    Return '{"header": ..., "payload": ...}' for a compact JWS, or the token itself if it is a UUID.
    Raises MalformedJwt if the token is not three base64url segments with JSON header and payload.
    """
    if is_reference_token(token):
        return token
    if token.count(".") != 2:
        raise MalformedJwt("JWT must have three dot-separated segments")
    try:
        decoded = jwt.PyJWT().decode_complete(token, options=_NO_VERIFICATION)
    except jwt.InvalidTokenError as e:
        logger.debug("decode_jwt failed: %s", e)
        raise MalformedJwt(f"Invalid JWT: {e}")
    return json.dumps({"header": decoded["header"], "payload": decoded["payload"]})


@router.get("/decode_jwt")
def decode_jwt_route(token: str = Query(..., alias="jwt")):
    """Decoded header and payload as JSON; reference tokens come back as plain text."""
    if is_reference_token(token):
        return PlainTextResponse(token)
    return Response(content=decode_jwt(token), media_type="application/json")
