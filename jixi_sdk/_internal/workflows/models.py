"""Pydantic models for workflow dispatch.

These models describe what travels through the dispatch engine: the
registry entries supplied by configuration, the per-call request and
the tagged result handed back to callers.
"""

import os
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, model_validator

from jixi_sdk.exceptions import JixiError

# =============================================================================
# Constants
# =============================================================================

DEFAULT_FILE_NAME = "upload.bin"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
JSON_CONTENT_TYPE = "application/json"
DATA_PART_NAME = "data"
FILE_PART_NAME = "file"

MIME_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
}

T = TypeVar("T")


def guess_mime_type(file_name: str | None) -> str:
    """Best-effort content type from a file name extension."""
    if not file_name:
        return DEFAULT_CONTENT_TYPE
    ext = os.path.splitext(file_name)[1].lower()
    return MIME_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


# =============================================================================
# Registry Models
# =============================================================================


class WorkflowEntry(BaseModel):
    """A named workflow endpoint.

    The name is the caller-facing key; url is the endpoint dispatched to.
    """

    name: str
    url: str

    model_config = {"frozen": True}


# =============================================================================
# Request Models
# =============================================================================


class Attachment(BaseModel):
    """Binary payload sent as the ``file`` part of a multipart request."""

    content: bytes
    file_name: str = DEFAULT_FILE_NAME
    content_type: str | None = None

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def fill_defaults(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if not data.get("file_name"):
                data["file_name"] = DEFAULT_FILE_NAME
            if not data.get("content_type"):
                data["content_type"] = guess_mime_type(data["file_name"])
        return data


class DispatchRequest(BaseModel):
    """A single request to a workflow or signing endpoint.

    The credential travels with the request; nothing here touches shared
    client state.
    """

    url: str
    method: Literal["GET", "POST"] = "POST"
    auth_token: str | None = None
    json_text: str | None = None
    attachment: Attachment | None = None

    model_config = {"frozen": True}

    @property
    def is_multipart(self) -> bool:
        return self.attachment is not None

    def headers(self) -> dict[str, str]:
        """Per-request headers, including the bearer credential when set."""
        headers: dict[str, str] = {}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        if self.method == "GET":
            headers["Accept"] = JSON_CONTENT_TYPE
        elif not self.is_multipart:
            headers["Content-Type"] = JSON_CONTENT_TYPE
        return headers

    def httpx_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``httpx.Client.request`` / ``httpx.Request``.

        Multipart bodies are rendered by httpx, whose random boundary keeps
        the ``data`` part intact whatever bytes the attachment holds.
        """
        kwargs: dict[str, Any] = {"headers": self.headers()}
        if self.method == "GET":
            return kwargs

        json_bytes = (self.json_text or "{}").encode("utf-8")
        if self.attachment is None:
            kwargs["content"] = json_bytes
            return kwargs

        files: list[tuple[str, tuple[str | None, bytes, str]]] = [
            (DATA_PART_NAME, (None, json_bytes, JSON_CONTENT_TYPE)),
        ]
        if self.attachment.content:
            files.append(
                (
                    FILE_PART_NAME,
                    (
                        self.attachment.file_name,
                        self.attachment.content,
                        self.attachment.content_type or DEFAULT_CONTENT_TYPE,
                    ),
                )
            )
        kwargs["files"] = files
        return kwargs


# =============================================================================
# Result Models
# =============================================================================


class DispatchResult(BaseModel, Generic[T]):
    """Tagged outcome of one dispatch.

    Failed results carry ``error_detail`` and an ``error_kind`` of
    ``config``, ``transport``, ``protocol`` or ``decode``; ``value`` is None.
    """

    ok: bool
    value: T | None = None
    error_detail: str | None = None
    error_kind: str | None = None
    status_code: int | None = None

    model_config = {"arbitrary_types_allowed": True}

    @classmethod
    def success(cls, value: Any) -> "DispatchResult[Any]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: JixiError) -> "DispatchResult[Any]":
        return cls(
            ok=False,
            error_detail=str(error),
            error_kind=error.kind,
            status_code=getattr(error, "status_code", None),
        )
