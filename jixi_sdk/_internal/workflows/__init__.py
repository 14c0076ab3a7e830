"""Workflow registry, request building and response decoding."""

from jixi_sdk._internal.workflows.builder import build_request
from jixi_sdk._internal.workflows.extract import (
    coerce_string_result,
    decode_json_array,
    extract_string_field,
    make_decoder,
)
from jixi_sdk._internal.workflows.models import (
    Attachment,
    DispatchRequest,
    DispatchResult,
    WorkflowEntry,
)
from jixi_sdk._internal.workflows.registry import WorkflowRegistry

__all__ = [
    "Attachment",
    "DispatchRequest",
    "DispatchResult",
    "WorkflowEntry",
    "WorkflowRegistry",
    "build_request",
    "coerce_string_result",
    "decode_json_array",
    "extract_string_field",
    "make_decoder",
]
