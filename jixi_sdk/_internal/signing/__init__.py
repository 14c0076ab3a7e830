"""URL signing for Jixi-hosted assets."""

from jixi_sdk._internal.signing.client import (
    build_sign_payload,
    build_sign_request,
    make_sign_decoder,
    normalize_signed_urls,
    sign_timeout,
)
from jixi_sdk._internal.signing.models import (
    DEFAULT_BATCH_EXPIRES_IN,
    DEFAULT_SIGN_ENDPOINT,
    DEFAULT_SINGLE_EXPIRES_IN,
    SignRequest,
)

__all__ = [
    "DEFAULT_BATCH_EXPIRES_IN",
    "DEFAULT_SIGN_ENDPOINT",
    "DEFAULT_SINGLE_EXPIRES_IN",
    "SignRequest",
    "build_sign_payload",
    "build_sign_request",
    "make_sign_decoder",
    "normalize_signed_urls",
    "sign_timeout",
]
