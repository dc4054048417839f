"""
Inbound parameter sets: JSON bodies from the playground UI with string, list or boolean values.
sanitize() drops empty entries so builders can treat "key present" as "include in output".
"""
from collections.abc import Mapping
from typing import Any

from playground_server.errors import ValidationError

ParameterSet = dict[str, Any]


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def sanitize(params: Mapping[str, Any]) -> ParameterSet:
    """Return a copy without None, empty/blank strings and empty lists. The input is not modified."""
    return {key: value for key, value in params.items() if not _is_empty(value)}


def get_str(params: Mapping[str, Any], key: str, default: str | None = None) -> str | None:
    value = params.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value.strip() or default


def get_flag(params: Mapping[str, Any], key: str) -> bool:
    """Boolean control flag; accepts JSON booleans and "true"/"false" strings."""
    value = params.get(key)
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValidationError(f"{key} must be a boolean")


def get_str_list(params: Mapping[str, Any], key: str) -> tuple[str, ...]:
    """List of strings; a single string is split on whitespace (e.g. scope="openid profile")."""
    value = params.get(key)
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(value.split())
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return tuple(v.strip() for v in value if v.strip())
    raise ValidationError(f"{key} must be a list of strings")
