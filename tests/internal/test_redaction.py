"""Tests for log redaction."""

import json

from jixi_sdk._internal.redaction import (
    LOG_PREVIEW_LENGTH,
    REDACTED_VALUE,
    redact_headers,
    redact_json_text,
    redact_payload,
)


class TestRedactPayload:
    """Tests for redact_payload()."""

    def test_redacts_sensitive_keys(self):
        """Should mask sensitive keys at any depth."""
        payload = {
            "prompt": "a cat",
            "api_key": "secret",
            "nested": {"Token": "t", "items": [{"password": "p", "ok": 1}]},
        }
        result = redact_payload(payload)

        assert result == {
            "prompt": "a cat",
            "api_key": REDACTED_VALUE,
            "nested": {"Token": REDACTED_VALUE, "items": [{"password": REDACTED_VALUE, "ok": 1}]},
        }

    def test_does_not_mutate_original(self):
        """Should return a copy."""
        payload = {"token": "t"}
        redact_payload(payload)
        assert payload == {"token": "t"}

    def test_scalars_pass_through(self):
        """Non-container values should be returned as is."""
        assert redact_payload("text") == "text"
        assert redact_payload(3) == 3


class TestRedactJsonText:
    """Tests for redact_json_text()."""

    def test_redacts_json(self):
        """Should parse, redact and re-serialize JSON text."""
        assert json.loads(redact_json_text('{"secret": "s", "a": 1}')) == {"secret": REDACTED_VALUE, "a": 1}

    def test_non_json_is_truncated(self):
        """Should truncate text that does not parse."""
        result = redact_json_text("x" * 1000)
        assert len(result) == LOG_PREVIEW_LENGTH
        assert result.endswith("...")

    def test_empty(self):
        """Should return an empty string for no text."""
        assert redact_json_text(None) == ""


class TestRedactHeaders:
    """Tests for redact_headers()."""

    def test_masks_bearer_token(self):
        """Should keep the scheme and mask the credential."""
        headers = redact_headers({"Authorization": "Bearer secret", "Accept": "application/json"})
        assert headers == {"Authorization": f"Bearer {REDACTED_VALUE}", "Accept": "application/json"}

    def test_masks_raw_credential(self):
        """Should mask a credential without a scheme entirely."""
        assert redact_headers({"authorization": "secret"}) == {"authorization": REDACTED_VALUE}
