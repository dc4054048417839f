"""Tests for parameter sanitizing, typed accessors, claims encoding and anonymizing."""
import json

import pytest

from playground_server.anonymize import REDACTED, anonymize
from playground_server.claims import encode_claims_request
from playground_server.errors import ValidationError
from playground_server.params import get_flag, get_str, get_str_list, sanitize


def test_sanitize_removes_empty_values():
    params = {
        "a": None,
        "b": "",
        "c": "   ",
        "d": [],
        "e": "value",
        "f": ["openid"],
        "g": False,
    }
    cleaned = sanitize(params)
    assert cleaned == {"e": "value", "f": ["openid"], "g": False}


def test_sanitize_does_not_mutate_input():
    params = {"state": "", "nonce": "n"}
    sanitize(params)
    assert params == {"state": "", "nonce": "n"}


def test_sanitized_values_are_never_empty():
    cleaned = sanitize({"x": None, "y": "", "z": [], "w": "ok", "v": ["a"], "u": True})
    for value in cleaned.values():
        assert value is not None
        assert value != ""
        assert value != []


def test_get_flag_accepts_booleans_and_strings():
    assert get_flag({"pkce": True}, "pkce") is True
    assert get_flag({"pkce": "true"}, "pkce") is True
    assert get_flag({"pkce": "False"}, "pkce") is False
    assert get_flag({}, "pkce") is False


def test_get_flag_rejects_other_types():
    with pytest.raises(ValidationError):
        get_flag({"pkce": "yes"}, "pkce")
    with pytest.raises(ValidationError):
        get_flag({"pkce": 1}, "pkce")


def test_get_str_rejects_non_string():
    with pytest.raises(ValidationError):
        get_str({"state": ["a"]}, "state")
    assert get_str({}, "state", "default") == "default"


def test_get_str_list_accepts_list_or_space_separated_string():
    assert get_str_list({"scope": ["openid", "profile"]}, "scope") == ("openid", "profile")
    assert get_str_list({"scope": "openid  profile"}, "scope") == ("openid", "profile")
    assert get_str_list({}, "scope") == ()
    with pytest.raises(ValidationError):
        get_str_list({"scope": ["openid", 3]}, "scope")


def test_encode_claims_request_marks_claims_voluntary():
    encoded = encode_claims_request(["email", "name"])
    assert encoded == '{"id_token":{"email":null,"name":null}}'
    assert list(json.loads(encoded)["id_token"]) == ["email", "name"]


def test_anonymize_replaces_sensitive_values():
    original = {
        "grant_type": "client_credentials",
        "client_id": "abc",
        "client_secret": "s3cret",
        "Authorization": "Basic YWJjOnMzY3JldA==",
    }
    redacted = anonymize(original)
    assert redacted["client_id"] == REDACTED
    assert redacted["client_secret"] == REDACTED
    assert redacted["Authorization"] == REDACTED
    assert redacted["grant_type"] == "client_credentials"
    assert "s3cret" not in json.dumps(redacted)
    # Copy only; the request actually sent keeps its credentials
    assert original["client_secret"] == "s3cret"


def test_anonymize_does_not_add_missing_keys():
    assert anonymize({"token": "t"}) == {"token": "t"}
