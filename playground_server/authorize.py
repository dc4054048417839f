"""
Authorization request assembly (POST /authorization_code, POST /implicit).
Turns the playground's parameter set into the provider's authorize URL; optionally wraps the
parameters in a signed request object. Nothing is sent upstream: the UI follows the URL.
"""
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlsplit, urlunsplit

from fastapi import APIRouter, Body

from playground_server.claims import encode_claims_request
from playground_server.config import SETTINGS, Settings
from playground_server.errors import MalformedEndpoint, ValidationError
from playground_server.keys import KeyManager, get_key_manager
from playground_server.params import ParameterSet, get_flag, get_str, get_str_list, sanitize
from playground_server.request_object import REQUEST_OBJECT_EXCLUDED, sign_request_object

logger = logging.getLogger(__name__)
router = APIRouter()

RESPONSE_TYPE_VALUES = ("code", "token", "id_token")
DEFAULT_RESPONSE_MODE = "fragment"


@dataclass(frozen=True)
class AuthorizeRequest:
    response_type: tuple[str, ...]
    authorization_endpoint: str | None = None
    scope: tuple[str, ...] = ()
    response_mode: str | None = None
    claims: tuple[str, ...] = ()
    client_id: str | None = None
    nonce: str | None = None
    state: str | None = None
    acr_values: str | None = None
    force_authentication: bool = False
    pkce: bool = False
    code_challenge: str | None = None
    code_challenge_method: str | None = None
    signed_jwt: bool = False

    @property
    def implies_code_flow(self) -> bool:
        return set(self.response_type) == {"code"}

    @classmethod
    def from_params(cls, params: ParameterSet) -> "AuthorizeRequest":
        """Parse a sanitized parameter set. Unknown keys are ignored."""
        return cls(
            response_type=parse_response_type(get_str(params, "response_type")),
            authorization_endpoint=get_str(params, "authorization_endpoint"),
            scope=get_str_list(params, "scope"),
            response_mode=get_str(params, "response_mode"),
            claims=get_str_list(params, "claims"),
            client_id=get_str(params, "client_id"),
            nonce=get_str(params, "nonce"),
            state=get_str(params, "state"),
            acr_values=get_str(params, "acr_values"),
            force_authentication=get_flag(params, "forceAuthentication"),
            pkce=get_flag(params, "pkce"),
            code_challenge=get_str(params, "code_challenge"),
            code_challenge_method=get_str(params, "code_challenge_method"),
            signed_jwt=get_flag(params, "signedJWT"),
        )


def parse_response_type(value: str | None) -> tuple[str, ...]:
    """Space-separated list of code, token, id_token; order kept, duplicates dropped."""
    if not value:
        raise ValidationError("response_type is required")
    values: list[str] = []
    for part in value.split():
        if part not in RESPONSE_TYPE_VALUES:
            raise ValidationError(f"Unsupported response_type value: {part}")
        if part not in values:
            values.append(part)
    return tuple(values)


def _split_endpoint(endpoint: str | None):
    if not endpoint:
        raise MalformedEndpoint("authorization_endpoint is required")
    try:
        parts = urlsplit(endpoint)
    except ValueError as e:
        raise MalformedEndpoint(f"Invalid authorization_endpoint: {e}")
    if not parts.scheme or not parts.netloc:
        raise MalformedEndpoint(f"authorization_endpoint must be an absolute URI: {endpoint}")
    return parts


def authorization_parameters(request: AuthorizeRequest, settings: Settings, key_manager: KeyManager) -> dict[str, str | None]:
    """
    Outbound query parameters in insertion order. Values may be None (e.g. no nonce);
    those are dropped when rendering, not sent empty.
    """
    parameters: dict[str, str | None] = {"response_type": " ".join(request.response_type)}
    if request.scope:
        parameters["scope"] = " ".join(request.scope)

    response_mode = request.response_mode or DEFAULT_RESPONSE_MODE
    if not request.implies_code_flow:
        parameters["response_mode"] = response_mode
    if request.claims:
        parameters["claims"] = encode_claims_request(request.claims)

    client_id = request.client_id or settings.client_id
    parameters["client_id"] = client_id
    if not request.implies_code_flow and response_mode == "form_post":
        parameters["redirect_uri"] = settings.redirect_uri_form_post
    else:
        parameters["redirect_uri"] = settings.redirect_uri

    if request.force_authentication:
        parameters["prompt"] = "login"
    parameters["nonce"] = request.nonce
    parameters["state"] = request.state
    parameters["acr_values"] = request.acr_values
    if request.pkce:
        parameters["code_challenge"] = request.code_challenge
        parameters["code_challenge_method"] = request.code_challenge_method

    if request.signed_jwt:
        request_object = sign_request_object(parameters, key_manager, client_id)
        for key in REQUEST_OBJECT_EXCLUDED:
            parameters.pop(key, None)
        parameters["request"] = request_object
    return parameters


def render_url(endpoint: str | None, parameters: dict[str, str | None]) -> str:
    """Append non-blank parameters, percent-encoded (space -> %20), keeping any existing query."""
    parts = _split_endpoint(endpoint)
    encoded = [f"{key}={quote(value, safe='')}" for key, value in parameters.items() if value and value.strip()]
    query = "&".join(([parts.query] if parts.query else []) + encoded)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def build_authorization_url(
    request: AuthorizeRequest,
    settings: Settings = SETTINGS,
    key_manager: KeyManager | None = None,
) -> str:
    # Validate the endpoint before doing any signing work
    _split_endpoint(request.authorization_endpoint)
    if key_manager is None:
        key_manager = get_key_manager()
    parameters = authorization_parameters(request, settings, key_manager)
    url = render_url(request.authorization_endpoint, parameters)
    logger.info(
        "authorize: response_type=%s signed=%s pkce=%s",
        parameters.get("response_type"),
        request.signed_jwt,
        request.pkce,
    )
    return url


def authorize(params: dict[str, Any], settings: Settings = SETTINGS, key_manager: KeyManager | None = None) -> dict:
    request = AuthorizeRequest.from_params(sanitize(params))
    return {"url": build_authorization_url(request, settings, key_manager)}


@router.post("/authorization_code")
@router.post("/implicit")
def authorize_route(body: dict[str, Any] = Body(...)):
    """Build the authorize URL for code, implicit and hybrid flows. Returns {"url": ...}."""
    return authorize(body)
