"""
Client authentication for calls to the provider's token and introspection endpoints. RFC 6749 §2.3.1.
Credentials via Authorization: Basic base64(client_id:client_secret) or client_id + client_secret in form.
"""
import base64
from dataclasses import dataclass
from enum import Enum


class ClientAuthMethod(str, Enum):
    CLIENT_SECRET_BASIC = "client_secret_basic"
    CLIENT_SECRET_POST = "client_secret_post"

    @classmethod
    def parse(cls, value: str | None) -> "ClientAuthMethod":
        """Default is client_secret_basic; any other value is treated as client_secret_post."""
        if not value or value == cls.CLIENT_SECRET_BASIC.value:
            return cls.CLIENT_SECRET_BASIC
        return cls.CLIENT_SECRET_POST


@dataclass(frozen=True)
class ClientCredentials:
    client_id: str
    client_secret: str

    @classmethod
    def resolve(
        cls,
        client_id: str | None,
        client_secret: str | None,
        default_id: str,
        default_secret: str,
    ) -> "ClientCredentials":
        """Request values win when non-blank, otherwise the configured credentials."""
        return cls(
            client_id=client_id if client_id and client_id.strip() else default_id,
            client_secret=client_secret if client_secret and client_secret.strip() else default_secret,
        )


def basic_authorization(client_id: str, client_secret: str) -> str:
    """'Basic <base64(client_id:client_secret)>' header value."""
    encoded = base64.b64encode(f"{client_id}:{client_secret}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


def apply_client_auth(
    form: dict[str, str],
    headers: dict[str, str],
    credentials: ClientCredentials,
    method: ClientAuthMethod = ClientAuthMethod.CLIENT_SECRET_BASIC,
    omit_authentication: bool = False,
) -> None:
    """
    Add credentials to an outgoing request in place.
    omit_authentication: public client, client_id in the form and no secret anywhere.
    """
    if omit_authentication:
        form["client_id"] = credentials.client_id
        return
    if method is ClientAuthMethod.CLIENT_SECRET_BASIC:
        headers["Authorization"] = basic_authorization(credentials.client_id, credentials.client_secret)
        return
    form["client_id"] = credentials.client_id
    form["client_secret"] = credentials.client_secret
