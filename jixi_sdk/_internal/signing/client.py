"""Request building and response normalization for the URL signing endpoint."""

from collections.abc import Sequence

from pydantic import ValidationError

from jixi_sdk._internal.signing.models import (
    DEFAULT_BATCH_EXPIRES_IN,
    DEFAULT_SIGN_ENDPOINT,
    SignedUrlList,
    SignRequest,
)
from jixi_sdk._internal.workflows.extract import (
    URL_FIELD,
    Decoder,
    decode_json_array,
    extract_string_field,
)
from jixi_sdk._internal.workflows.models import DispatchRequest
from jixi_sdk.exceptions import JixiConfigError, JixiDecodeError

MIN_TIMEOUT_SECONDS = 1


def build_sign_payload(urls: Sequence[str], expires_in: int = DEFAULT_BATCH_EXPIRES_IN) -> str:
    """Render ``{"urls": [...], "expiresIn": N}`` for a batch of URLs."""
    return SignRequest(urls=list(urls), expires_in=expires_in).to_json()


def build_sign_request(
    urls: Sequence[str],
    api_key: str | None,
    *,
    endpoint: str = DEFAULT_SIGN_ENDPOINT,
    expires_in: int = DEFAULT_BATCH_EXPIRES_IN,
) -> DispatchRequest:
    """Build the signing POST request.

    Raises:
        JixiConfigError: If the API key is missing or blank.
    """
    key = (api_key or "").strip()
    if not key:
        raise JixiConfigError("Cannot sign URLs: API key is empty.")
    return DispatchRequest(
        url=endpoint,
        auth_token=key,
        json_text=build_sign_payload(urls, expires_in),
    )


def sign_timeout(timeout_seconds: float) -> float:
    return max(MIN_TIMEOUT_SECONDS, timeout_seconds)


def normalize_signed_urls(body: str | None) -> list[str]:
    """Normalize the signing endpoint's response to a list of URLs.

    Accepted shapes, in priority order:
        ["signed1", "signed2", ...]
        {"urls": ["signed1", "signed2", ...]}
        {"url": "signed"}
        "signed"

    Raises:
        JixiDecodeError: For any other shape.
    """
    text = (body or "").strip()
    if not text:
        raise JixiDecodeError("Empty signing response")

    if text.startswith("["):
        return decode_json_array(text, str)

    if '"urls"' in text:
        try:
            envelope = SignedUrlList.model_validate_json(text)
        except ValidationError:
            envelope = None
        if envelope is not None and envelope.urls is not None:
            return envelope.urls

    single = extract_string_field(text, URL_FIELD)
    if single:
        return [single]

    if len(text) > 1 and text.startswith('"') and text.endswith('"'):
        return [text.strip('"')]

    raise JixiDecodeError(f"Unrecognized signing response: {text[:64]!r}")


def make_sign_decoder(expected_count: int) -> Decoder:
    """Decoder that also checks the batch kept its length, so callers can match by index."""

    def decode(body: str) -> list[str]:
        signed = normalize_signed_urls(body)
        if len(signed) != expected_count:
            raise JixiDecodeError(f"Expected {expected_count} signed URL(s), got {len(signed)}")
        return signed

    return decode
