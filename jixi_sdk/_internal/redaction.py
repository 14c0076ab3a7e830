"""Redaction of sensitive values before they reach the debug log."""

import json
from collections.abc import Mapping
from typing import Any

REDACT_KEYS: frozenset[str] = frozenset({
    "api_key",
    "apikey",
    "token",
    "secret",
    "password",
    "authorization",
    "auth_token",
    "access_token",
    "refresh_token",
    "private_key",
    "credentials",
})

REDACTED_VALUE = "[REDACTED]"
LOG_PREVIEW_LENGTH = 256


def redact_payload(payload: Any) -> Any:
    """Return a copy of a JSON-like value with sensitive keys masked.

    The original value is never mutated. Non-container values are returned as is.
    """
    if isinstance(payload, Mapping):
        result = {}
        for key, value in payload.items():
            key_lower = key.lower() if isinstance(key, str) else key
            if key_lower in REDACT_KEYS:
                result[key] = REDACTED_VALUE
            else:
                result[key] = redact_payload(value)
        return result
    if isinstance(payload, list):
        return [redact_payload(item) for item in payload]
    return payload


def redact_json_text(json_text: str | None) -> str:
    """Redact a JSON document for logging.

    Text that does not parse is truncated rather than echoed in full.
    """
    if not json_text:
        return ""
    try:
        parsed = json.loads(json_text)
    except ValueError:
        return _preview(json_text)
    return _preview(json.dumps(redact_payload(parsed), separators=(",", ":")))


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Mask credential headers, keeping the auth scheme visible."""
    result = {}
    for name, value in headers.items():
        if name.lower() == "authorization":
            scheme, _, _ = value.partition(" ")
            result[name] = f"{scheme} {REDACTED_VALUE}" if scheme.lower() == "bearer" else REDACTED_VALUE
        else:
            result[name] = value
    return result


def _preview(text: str) -> str:
    if len(text) <= LOG_PREVIEW_LENGTH:
        return text
    return text[: LOG_PREVIEW_LENGTH - 3] + "..."
