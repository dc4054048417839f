"""
Published metadata: our JWK Set (GET /certs) for request object verification, and the
provider's discovery document (GET /discovery) passed through verbatim.
"""
import json
import logging
from pathlib import Path

import httpx
from fastapi import APIRouter

from playground_server.config import SETTINGS
from playground_server.errors import UpstreamError
from playground_server.keys import get_key_manager

logger = logging.getLogger(__name__)
router = APIRouter()


def load_discovery(source: str, timeout: float = SETTINGS.http_timeout) -> dict:
    """Read the discovery document from an http(s) URL or a local file. No transformation."""
    if source.startswith(("http://", "https://")):
        try:
            r = httpx.get(source, headers={"Accept": "application/json"}, timeout=timeout)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Could not fetch discovery document: {e}")
        if r.status_code != 200:
            raise UpstreamError(f"Discovery endpoint returned HTTP {r.status_code}", r.status_code, r.text)
        try:
            return r.json()
        except ValueError:
            raise UpstreamError("Discovery document is not JSON", r.status_code, r.text)

    try:
        text = Path(source).read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Could not read discovery document from %s: %s", source, e)
        raise UpstreamError(f"Could not read discovery document: {e}")
    try:
        return json.loads(text)
    except ValueError as e:
        raise UpstreamError(f"Discovery document is not JSON: {e}", upstream_body=text)


@router.get("/certs")
def certs():
    """JSON Web Key Set for request object signature verification."""
    return get_key_manager().public_jwk_set()


@router.get("/discovery")
def discovery():
    """OpenID Connect discovery document of the configured provider."""
    return load_discovery(SETTINGS.discovery_endpoint)
