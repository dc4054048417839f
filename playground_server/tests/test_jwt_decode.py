"""Tests for JWT decoding (GET /decode_jwt) and the discovery passthrough (GET /discovery)."""
import json
from unittest.mock import patch

import jwt
import pytest
from fastapi.testclient import TestClient

from playground_server.errors import MalformedJwt, UpstreamError
from playground_server.jwt_decode import decode_jwt
from playground_server.main import app
from playground_server.well_known import load_discovery

client = TestClient(app)

REFERENCE_TOKEN = "0f8fad5b-d9cb-469f-a165-70867728950e"


def _hs256(payload: dict) -> str:
    return jwt.encode(payload, "k" * 32, algorithm="HS256", headers={"kid": "k1"})


def test_decode_returns_header_then_payload():
    token = _hs256({"sub": "42", "exp": 1})  # expired; not validated
    decoded = decode_jwt(token)
    data = json.loads(decoded)
    assert list(data) == ["header", "payload"]
    assert data["header"] == {"alg": "HS256", "kid": "k1", "typ": "JWT"}
    assert data["payload"] == {"sub": "42", "exp": 1}


def test_decode_signed_request_object(key_manager):
    token = key_manager.sign({"iss": "abc", "aud": "audience"}, headers={"typ": "JWT"})
    data = json.loads(decode_jwt(token))
    assert data["header"]["kid"] == key_manager.key_id
    assert data["payload"] == {"iss": "abc", "aud": "audience"}


def test_reference_token_passes_through():
    assert decode_jwt(REFERENCE_TOKEN) == REFERENCE_TOKEN


def test_two_segments_is_malformed():
    token = _hs256({"sub": "1"})
    with pytest.raises(MalformedJwt):
        decode_jwt(".".join(token.split(".")[:2]))


def test_bad_encoding_is_malformed():
    with pytest.raises(MalformedJwt):
        decode_jwt("not.a.jwt")


def test_decode_jwt_route():
    token = _hs256({"sub": "42"})
    r = client.get("/decode_jwt", params={"jwt": token})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")
    assert r.json()["payload"] == {"sub": "42"}

    r = client.get("/decode_jwt", params={"jwt": REFERENCE_TOKEN})
    assert r.status_code == 200
    assert r.text == REFERENCE_TOKEN

    r = client.get("/decode_jwt", params={"jwt": "abc.def"})
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_jwt"


def test_load_discovery_from_file(tmp_path):
    document = {"issuer": "https://idp.example", "authorization_endpoint": "https://idp.example/auth"}
    path = tmp_path / "discovery.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    assert load_discovery(str(path)) == document


def test_load_discovery_missing_file(tmp_path):
    with pytest.raises(UpstreamError):
        load_discovery(str(tmp_path / "missing.json"))


def test_discovery_route(tmp_path):
    path = tmp_path / "discovery.json"
    path.write_text('{"issuer": "https://idp.example"}', encoding="utf-8")
    with patch("playground_server.well_known.SETTINGS") as settings:
        settings.discovery_endpoint = str(path)
        r = client.get("/discovery")
    assert r.status_code == 200
    assert r.json() == {"issuer": "https://idp.example"}
