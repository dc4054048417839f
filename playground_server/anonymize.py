"""
Redaction of credentials in request metadata echoed back to the playground UI.
"""
from collections.abc import Mapping

REDACTED = "XXX"
SENSITIVE_KEYS = ("client_id", "client_secret", "Authorization")


def anonymize(values: Mapping[str, str]) -> dict[str, str]:
    """Copy with sensitive values replaced; keys that are absent stay absent."""
    result = dict(values)
    for key in SENSITIVE_KEYS:
        if key in result:
            result[key] = REDACTED
    return result
