"""Public exceptions for the Jixi SDK.

Each exception maps to an ``error_kind`` tag carried by failed
``DispatchResult`` values, so callers can branch on either.
"""


class JixiError(Exception):
    """Base exception for all Jixi SDK errors."""

    kind = "error"


class JixiConfigError(JixiError):
    """Configuration error (missing API key, unknown workflow, bad settings)."""

    kind = "config"


class JixiAttachmentError(JixiConfigError):
    """Attachment could not be read before dispatch."""


class JixiTransportError(JixiError):
    """Network-level failure (DNS, connection refused, timeout)."""

    kind = "transport"


class JixiAPIError(JixiError):
    """Non-2xx response from the Jixi API."""

    kind = "protocol"

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class JixiDecodeError(JixiError):
    """Response body did not match the expected shape."""

    kind = "decode"
