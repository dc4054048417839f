"""
Pytest configuration for playground_server. Fixed client credentials so tests don't depend on the env,
and one shared signing key (RSA generation is slow).
"""
import os

os.environ["OIDC_CLIENT_ID"] = "playground_client"
os.environ["OIDC_CLIENT_SECRET"] = "secret"
os.environ["OIDC_RESOURCE_SERVER_ID"] = "resource-server"
os.environ["OIDC_RESOURCE_SERVER_SECRET"] = "rs-secret"
os.environ["OIDC_REDIRECT_URI"] = "http://localhost:3000/redirect"
os.environ["OIDC_REDIRECT_URI_FORM_POST"] = "http://localhost:8080/oidc/api/redirect"

import pytest

from playground_server.config import Settings
from playground_server.keys import get_key_manager


@pytest.fixture
def settings():
    return Settings(
        client_id="playground_client",
        client_secret="secret",
        resource_server_id="resource-server",
        resource_server_secret="rs-secret",
        redirect_uri="http://localhost:3000/redirect",
        redirect_uri_form_post="http://localhost:8080/oidc/api/redirect",
    )


@pytest.fixture(scope="session")
def key_manager():
    return get_key_manager()
