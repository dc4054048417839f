"""
Proxy for the provider's token, introspection and userinfo endpoints.
POST /token (authorization_code), /client_credentials, /refresh_token, /introspect, /userinfo.
Each call returns the upstream JSON plus the request we sent (credentials redacted) for display.
"""
import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

import httpx
from fastapi import APIRouter, Body

from playground_server.anonymize import anonymize
from playground_server.client_auth import ClientAuthMethod, ClientCredentials, apply_client_auth
from playground_server.config import SETTINGS, Settings
from playground_server.errors import MalformedEndpoint, UpstreamError, ValidationError
from playground_server.params import ParameterSet, get_flag, get_str, get_str_list, sanitize

logger = logging.getLogger(__name__)
router = APIRouter()


class GrantType(str, Enum):
    AUTHORIZATION_CODE = "authorization_code"
    CLIENT_CREDENTIALS = "client_credentials"
    REFRESH_TOKEN = "refresh_token"


class Operation(str, Enum):
    TOKEN = "token"
    CLIENT_CREDENTIALS = "client_credentials"
    REFRESH_TOKEN = "refresh_token"
    INTROSPECT = "introspect"
    USERINFO = "userinfo"


@dataclass(frozen=True)
class TokenRequest:
    token_endpoint: str | None = None
    introspect_endpoint: str | None = None
    userinfo_endpoint: str | None = None
    code: str | None = None
    refresh_token: str | None = None
    token: str | None = None
    scope: tuple[str, ...] = ()
    pkce: bool = False
    code_verifier: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    token_endpoint_auth_method: ClientAuthMethod = ClientAuthMethod.CLIENT_SECRET_BASIC
    omit_authentication: bool = False

    @classmethod
    def from_params(cls, params: ParameterSet) -> "TokenRequest":
        """Parse a sanitized parameter set. Unknown keys are ignored."""
        return cls(
            token_endpoint=get_str(params, "token_endpoint"),
            introspect_endpoint=get_str(params, "introspect_endpoint"),
            userinfo_endpoint=get_str(params, "userinfo_endpoint"),
            code=get_str(params, "code"),
            refresh_token=get_str(params, "refresh_token"),
            token=get_str(params, "token", get_str(params, "access_token")),
            scope=get_str_list(params, "scope"),
            pkce=get_flag(params, "pkce"),
            code_verifier=get_str(params, "code_verifier"),
            client_id=get_str(params, "client_id"),
            client_secret=get_str(params, "client_secret"),
            token_endpoint_auth_method=ClientAuthMethod.parse(get_str(params, "token_endpoint_auth_method")),
            omit_authentication=get_flag(params, "omitAuthentication"),
        )


@dataclass
class UpstreamCallResult:
    result: Any
    request_body: dict[str, str]
    request_url: str
    request_headers: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def _scope(request: TokenRequest) -> dict[str, str]:
    return {"scope": " ".join(request.scope)} if request.scope else {}


def _require_token(request: TokenRequest) -> str:
    if not request.token:
        raise ValidationError("token is required")
    return request.token


def _authorization_code_body(request: TokenRequest, settings: Settings) -> dict[str, str | None]:
    # redirect_uri must match the one used at /authorize, which is always the configured one
    body = {"code": request.code, "redirect_uri": settings.redirect_uri, **_scope(request)}
    if request.pkce:
        body["code_verifier"] = request.code_verifier
    return body


def _client_credentials_body(request: TokenRequest, settings: Settings) -> dict[str, str | None]:
    return _scope(request)


def _refresh_token_body(request: TokenRequest, settings: Settings) -> dict[str, str | None]:
    return {"refresh_token": request.refresh_token, **_scope(request)}


def _introspect_body(request: TokenRequest, settings: Settings) -> dict[str, str | None]:
    return {"token": _require_token(request)}


def _userinfo_body(request: TokenRequest, settings: Settings) -> dict[str, str | None]:
    return {"access_token": _require_token(request)}


def _client_identity(request: TokenRequest, settings: Settings) -> ClientCredentials:
    return ClientCredentials.resolve(request.client_id, request.client_secret, settings.client_id, settings.client_secret)


def _resource_server_identity(request: TokenRequest, settings: Settings) -> ClientCredentials:
    return ClientCredentials(settings.resource_server_id, settings.resource_server_secret)


@dataclass(frozen=True)
class OperationEntry:
    grant_type: GrantType | None
    endpoint_param: str
    build_body: Callable[[TokenRequest, Settings], dict[str, str | None]]
    # None: no client authentication, the access token is sent as a Bearer credential
    identity: Callable[[TokenRequest, Settings], ClientCredentials] | None


OPERATIONS: dict[Operation, OperationEntry] = {
    Operation.TOKEN: OperationEntry(GrantType.AUTHORIZATION_CODE, "token_endpoint", _authorization_code_body, _client_identity),
    Operation.CLIENT_CREDENTIALS: OperationEntry(GrantType.CLIENT_CREDENTIALS, "token_endpoint", _client_credentials_body, _client_identity),
    Operation.REFRESH_TOKEN: OperationEntry(GrantType.REFRESH_TOKEN, "token_endpoint", _refresh_token_body, _client_identity),
    Operation.INTROSPECT: OperationEntry(None, "introspect_endpoint", _introspect_body, _resource_server_identity),
    Operation.USERINFO: OperationEntry(None, "userinfo_endpoint", _userinfo_body, None),
}


def _check_endpoint(name: str, endpoint: str | None) -> str:
    if not endpoint:
        raise ValidationError(f"{name} is required")
    try:
        parts = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError) as e:
        raise MalformedEndpoint(f"Invalid {name}: {e}")
    if parts.scheme not in ("http", "https") or not parts.host:
        raise MalformedEndpoint(f"{name} must be an absolute http(s) URI: {endpoint}")
    return endpoint


def build_upstream_request(
    operation: Operation,
    request: TokenRequest,
    settings: Settings = SETTINGS,
) -> tuple[str, dict[str, str], dict[str, str]]:
    """Return (endpoint, form, headers) for the operation; no network I/O."""
    entry = OPERATIONS[operation]
    endpoint = _check_endpoint(entry.endpoint_param, getattr(request, entry.endpoint_param))

    form: dict[str, str] = {}
    if entry.grant_type is not None:
        form["grant_type"] = entry.grant_type.value
    for key, value in entry.build_body(request, settings).items():
        if value:
            form[key] = value

    headers = {
        "Accept": "application/json",
        "Content-Type": "application/x-www-form-urlencoded",
    }
    if entry.identity is None:
        headers["Authorization"] = f"Bearer {request.token}"
    else:
        apply_client_auth(
            form,
            headers,
            entry.identity(request, settings),
            request.token_endpoint_auth_method,
            request.omit_authentication,
        )
    return endpoint, form, headers


def post_form(endpoint: str, form: dict[str, str], headers: dict[str, str], timeout: float) -> Any:
    """POST form to the provider and return the parsed JSON body. No retries."""
    try:
        r = httpx.post(endpoint, data=form, headers=headers, timeout=timeout)
    except httpx.HTTPError as e:
        logger.warning("POST %s failed: %s", endpoint, e)
        raise UpstreamError(f"Request to {endpoint} failed: {e}")

    logger.info("POST %s -> %s", endpoint, r.status_code)
    if not 200 <= r.status_code < 300:
        raise UpstreamError(f"{endpoint} returned HTTP {r.status_code}", r.status_code, r.text)
    try:
        return r.json()
    except ValueError:
        raise UpstreamError(f"{endpoint} returned a non-JSON body", r.status_code, r.text)


def call_operation(operation: Operation, params: dict[str, Any], settings: Settings = SETTINGS) -> dict:
    """Sanitize params, build the upstream request, execute it and wrap the result for display."""
    request = TokenRequest.from_params(sanitize(params))
    endpoint, form, headers = build_upstream_request(operation, request, settings)
    result = post_form(endpoint, form, headers, settings.http_timeout)
    return UpstreamCallResult(
        result=result,
        request_body=anonymize(form),
        request_url=endpoint,
        request_headers=anonymize(headers),
    ).to_dict()


@router.post("/token")
def token(body: dict[str, Any] = Body(...)):
    """authorization_code grant: exchange code (and code_verifier when pkce) for tokens."""
    return call_operation(Operation.TOKEN, body)


@router.post("/client_credentials")
def client_credentials(body: dict[str, Any] = Body(...)):
    return call_operation(Operation.CLIENT_CREDENTIALS, body)


@router.post("/refresh_token")
def refresh_token(body: dict[str, Any] = Body(...)):
    return call_operation(Operation.REFRESH_TOKEN, body)


@router.post("/introspect")
def introspect(body: dict[str, Any] = Body(...)):
    """RFC 7662 introspection, authenticated as the resource server."""
    return call_operation(Operation.INTROSPECT, body)


@router.post("/userinfo")
def userinfo(body: dict[str, Any] = Body(...)):
    """OIDC UserInfo with the access token as Bearer credential and form field."""
    return call_operation(Operation.USERINFO, body)
