"""
Playground Server configuration. Client credentials, redirect URIs and the discovery source.
Values come from env; defaults match a local provider set up for the playground UI.
"""
import os
from dataclasses import dataclass

# OIDC client registered at the provider (used for authorize and token calls)
CLIENT_ID = os.environ.get("OIDC_CLIENT_ID", "playground_client")
CLIENT_SECRET = os.environ.get("OIDC_CLIENT_SECRET", "secret")

# Resource server credentials; introspection authenticates as this identity, not as the client
RESOURCE_SERVER_ID = os.environ.get("OIDC_RESOURCE_SERVER_ID", "resource-server-playground-client")
RESOURCE_SERVER_SECRET = os.environ.get("OIDC_RESOURCE_SERVER_SECRET", "secret")

# Where the provider redirects after login; form_post responses go to this server instead of the UI
REDIRECT_URI = os.environ.get("OIDC_REDIRECT_URI", "http://localhost:3000/redirect")
REDIRECT_URI_FORM_POST = os.environ.get("OIDC_REDIRECT_URI_FORM_POST", "http://localhost:8080/oidc/api/redirect")

# Discovery document: a file path or an http(s) URL, returned verbatim by GET /discovery
DISCOVERY_ENDPOINT = os.environ.get("OIDC_DISCOVERY_ENDPOINT", "discovery.json")

# Timeout (seconds) for outbound calls to the provider
HTTP_TIMEOUT = float(os.environ.get("OIDC_HTTP_TIMEOUT", "10.0"))

# Origins allowed to call this API from a browser (comma-separated)
CORS_ORIGINS = [o.strip() for o in os.environ.get("OIDC_CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

LOG_LEVEL = os.environ.get("OIDC_LOG_LEVEL", "info").lower()


@dataclass(frozen=True)
class Settings:
    client_id: str
    client_secret: str
    resource_server_id: str
    resource_server_secret: str
    redirect_uri: str
    redirect_uri_form_post: str
    discovery_endpoint: str = DISCOVERY_ENDPOINT
    http_timeout: float = HTTP_TIMEOUT


SETTINGS = Settings(
    client_id=CLIENT_ID,
    client_secret=CLIENT_SECRET,
    resource_server_id=RESOURCE_SERVER_ID,
    resource_server_secret=RESOURCE_SERVER_SECRET,
    redirect_uri=REDIRECT_URI,
    redirect_uri_form_post=REDIRECT_URI_FORM_POST,
)
