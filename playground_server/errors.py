"""
Error taxonomy for the playground engine and its mapping to JSON error responses.
Bodies follow the OAuth2 shape: {"error": ..., "error_description": ...}.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PlaygroundError(Exception):
    """Base class; every engine failure is surfaced to the caller as-is."""

    error = "server_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, description: str):
        super().__init__(description)
        self.description = description

    def to_dict(self) -> dict:
        return {"error": self.error, "error_description": self.description}


class ValidationError(PlaygroundError):
    """Missing or malformed request parameter (e.g. unparsable response_type)."""

    error = "invalid_request"
    status_code = status.HTTP_400_BAD_REQUEST


class UnsupportedPkceMethod(PlaygroundError):
    error = "unsupported_code_challenge_method"
    status_code = status.HTTP_400_BAD_REQUEST


class SigningError(PlaygroundError):
    error = "signing_error"


class MalformedEndpoint(PlaygroundError):
    error = "invalid_endpoint"
    status_code = status.HTTP_400_BAD_REQUEST


class MalformedJwt(PlaygroundError):
    error = "invalid_jwt"
    status_code = status.HTTP_400_BAD_REQUEST


class UpstreamError(PlaygroundError):
    """
    The authorization server failed, returned non-2xx, or returned something that is not JSON.
    upstream_status is None when no response was received (transport failure).
    """

    error = "upstream_error"
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, description: str, upstream_status: int | None = None, upstream_body: str | None = None):
        super().__init__(description)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["upstream_status"] = self.upstream_status
        data["upstream_body"] = self.upstream_body
        return data


async def playground_exception_handler(request: Request, exc: PlaygroundError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s (%s)", request.method, request.url.path, exc.error, exc.description)
    else:
        logger.info("%s %s rejected: %s (%s)", request.method, request.url.path, exc.error, exc.description)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PlaygroundError, playground_exception_handler)
