"""Tests for the signing key, JWKS and request objects."""
import jwt
from fastapi.testclient import TestClient

from playground_server.keys import KEY_ID, KeyManager
from playground_server.main import app
from playground_server.request_object import (
    REQUEST_OBJECT_AUDIENCE,
    REQUEST_OBJECT_LIFETIME,
    request_object_claims,
    sign_request_object,
)

client = TestClient(app)


def test_public_jwk_set_has_only_public_key(key_manager):
    jwks = key_manager.public_jwk_set()
    assert len(jwks["keys"]) == 1
    key = jwks["keys"][0]
    assert key["kty"] == "RSA"
    assert key["alg"] == "RS256"
    assert key["kid"] == KEY_ID
    assert "n" in key and "e" in key
    assert "d" not in key and "p" not in key


def test_key_is_rsa_2048(key_manager):
    assert key_manager.public_key().key_size == 2048


def test_sign_verifies_with_published_jwk(key_manager):
    token = key_manager.sign({"sub": "x"}, headers={"typ": "JWT"})
    header = jwt.get_unverified_header(token)
    assert header["kid"] == KEY_ID
    assert header["alg"] == "RS256"
    assert header["typ"] == "JWT"
    public_key = jwt.PyJWK(key_manager.public_jwk_set()["keys"][0]).key
    assert jwt.decode(token, public_key, algorithms=["RS256"]) == {"sub": "x"}


def test_separate_managers_have_distinct_keys(key_manager):
    other = KeyManager()
    assert other.public_jwk_set()["keys"][0]["n"] != key_manager.public_jwk_set()["keys"][0]["n"]


def test_request_object_claims_standard_claims():
    claims = request_object_claims({"state": "xyz", "nonce": None, "scope": "openid"}, "abc", now=1000)
    assert claims["iss"] == "abc"
    assert claims["sub"] == "abc"
    assert claims["aud"] == REQUEST_OBJECT_AUDIENCE
    assert claims["iat"] == 1000
    assert claims["nbf"] == 1000
    assert claims["exp"] - claims["iat"] == REQUEST_OBJECT_LIFETIME == 3600
    assert claims["state"] == "xyz"
    assert claims["scope"] == "openid"
    assert "nonce" not in claims
    assert len(claims["jti"]) == 36


def test_request_object_parameters_do_not_override_standard_claims():
    claims = request_object_claims({"iss": "evil", "state": "s"}, "abc", now=1000)
    assert claims["iss"] == "abc"


def test_request_object_jti_is_unique():
    a = request_object_claims({}, "abc")
    b = request_object_claims({}, "abc")
    assert a["jti"] != b["jti"]


def test_sign_request_object(key_manager):
    token = sign_request_object({"response_type": "code", "state": "xyz"}, key_manager, "abc")
    payload = jwt.decode(token, key_manager.public_key(), algorithms=["RS256"], audience=REQUEST_OBJECT_AUDIENCE)
    assert payload["response_type"] == "code"
    assert payload["state"] == "xyz"
    assert payload["exp"] - payload["iat"] == 3600


def test_certs_endpoint(key_manager):
    r = client.get("/certs")
    assert r.status_code == 200
    assert r.json() == key_manager.public_jwk_set()
