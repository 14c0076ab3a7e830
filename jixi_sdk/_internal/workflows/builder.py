"""Request construction for workflow dispatch."""

import json
import logging
import os
from typing import Any

from pydantic import BaseModel

from jixi_sdk._internal.redaction import redact_json_text
from jixi_sdk._internal.workflows.models import Attachment, DispatchRequest
from jixi_sdk.exceptions import JixiAttachmentError

logger = logging.getLogger(__name__)

EMPTY_JSON = "{}"


def to_json_text(payload: Any) -> str:
    """Serialize a workflow payload to JSON text.

    Args:
        payload: None, a dict, a Pydantic model, or a string that is
            already JSON text.

    Returns:
        JSON text; ``"{}"`` for an absent payload.
    """
    if payload is None:
        return EMPTY_JSON
    if isinstance(payload, str):
        return payload or EMPTY_JSON
    if isinstance(payload, BaseModel):
        return payload.model_dump_json()
    return json.dumps(payload, default=str)


def read_attachment(file_path: str) -> Attachment:
    """Load a file from disk as an attachment.

    Raises:
        JixiAttachmentError: If the file does not exist.
    """
    if not file_path or not os.path.isfile(file_path):
        raise JixiAttachmentError(f"File not found: {file_path}")
    with open(file_path, "rb") as f:
        content = f.read()
    return Attachment(content=content, file_name=os.path.basename(file_path))


def build_request(
    url: str,
    payload: Any = None,
    *,
    api_key: str | None = None,
    file_path: str | None = None,
    file_bytes: bytes | None = None,
    file_name: str | None = None,
) -> DispatchRequest:
    """Build a workflow POST request.

    Without an attachment the body is plain JSON. With ``file_path`` or
    ``file_bytes`` the body is multipart with a ``data`` JSON part and a
    ``file`` binary part.

    Args:
        url: The workflow endpoint.
        payload: JSON payload (see ``to_json_text``).
        api_key: Bearer credential; the request is unauthenticated if empty.
        file_path: Path of a file to attach. Read immediately.
        file_bytes: In-memory bytes to attach.
        file_name: Name for ``file_bytes``; defaults to ``upload.bin``.

    Returns:
        The request, ready for a transport.

    Raises:
        JixiAttachmentError: If ``file_path`` does not exist.
    """
    json_text = to_json_text(payload)

    attachment: Attachment | None = None
    if file_path:
        attachment = read_attachment(file_path)
    elif file_bytes is not None:
        attachment = Attachment(content=file_bytes, file_name=file_name or "")

    logger.debug(
        "Built request for %s: %s%s",
        url,
        redact_json_text(json_text),
        f" + {attachment.file_name} ({len(attachment.content)} bytes)" if attachment else "",
    )
    return DispatchRequest(
        url=url,
        auth_token=api_key or None,
        json_text=json_text,
        attachment=attachment,
    )


def build_fetch_request(url: str, *, api_key: str | None = None) -> DispatchRequest:
    """Build a GET request for a JSON resource."""
    return DispatchRequest(url=url, method="GET", auth_token=api_key or None)
