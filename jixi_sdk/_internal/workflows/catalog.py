"""Fetching the workflow catalog from the Jixi API."""

import json

from jixi_sdk._internal.workflows.builder import build_fetch_request
from jixi_sdk._internal.workflows.extract import decode_json_array
from jixi_sdk._internal.workflows.models import DispatchRequest, WorkflowEntry
from jixi_sdk.exceptions import JixiConfigError, JixiDecodeError

DEFAULT_WORKFLOWS_ENDPOINT = "https://api.jixi.ai/workflows"


def build_catalog_request(api_key: str | None, endpoint: str = DEFAULT_WORKFLOWS_ENDPOINT) -> DispatchRequest:
    """Build the GET request listing the account's workflows.

    Raises:
        JixiConfigError: If the API key is missing or blank.
    """
    key = (api_key or "").strip()
    if not key:
        raise JixiConfigError("Cannot fetch workflows: API key is empty.")
    return build_fetch_request(endpoint, api_key=key)


def decode_catalog(body: str) -> list[WorkflowEntry]:
    """Decode a workflow list.

    The endpoint answers with a root array; an object wrapping the array
    under ``workflows`` is accepted too.
    """
    text = (body or "").strip()
    if text.startswith("["):
        return decode_json_array(text, WorkflowEntry)
    if text.startswith("{"):
        try:
            data = json.loads(text)
        except ValueError as e:
            raise JixiDecodeError(f"Failed to parse workflow list: {e}") from e
        workflows = data.get("workflows")
        if isinstance(workflows, list):
            return decode_json_array(json.dumps(workflows), WorkflowEntry)
    raise JixiDecodeError(f"Unexpected workflow list format: {text[:64]!r}")
