"""Configuration snapshot for the Jixi client."""

import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from jixi_sdk._internal.http import DEFAULT_TIMEOUT
from jixi_sdk._internal.signing.models import DEFAULT_SIGN_ENDPOINT
from jixi_sdk._internal.workflows.catalog import DEFAULT_WORKFLOWS_ENDPOINT
from jixi_sdk._internal.workflows.extract import decode_json_array
from jixi_sdk._internal.workflows.models import WorkflowEntry
from jixi_sdk.exceptions import JixiConfigError, JixiDecodeError

DEFAULT_TIMEOUT_MS = int(DEFAULT_TIMEOUT * 1000)


class JixiConfig(BaseModel):
    """Settings the client is composed from.

    ``api_key`` and ``workflows`` are the externally owned settings
    record; the remaining fields tune the client.
    """

    api_key: str = ""
    workflows: list[WorkflowEntry] = Field(default_factory=list)
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    sign_endpoint: str = DEFAULT_SIGN_ENDPOINT
    workflows_endpoint: str = DEFAULT_WORKFLOWS_ENDPOINT
    debug: bool = False

    @field_validator("api_key", mode="before")
    @classmethod
    def strip_api_key(cls, v: str | None) -> str:
        return (v or "").strip()

    @property
    def timeout(self) -> float:
        """Request timeout in seconds."""
        return self.timeout_ms / 1000

    @classmethod
    def from_env(cls) -> "JixiConfig":
        """Create a configuration from environment variables.

        Environment variables:
            JIXI_API_KEY: Bearer token for the Jixi API.
            JIXI_WORKFLOWS: JSON array of {"name", "url"} objects.
            JIXI_TIMEOUT_MS: Request timeout in milliseconds.
            JIXI_SIGN_URL: URL signing endpoint.
            JIXI_WORKFLOWS_URL: Workflow catalog endpoint.
            JIXI_DEBUG: Set to "1" to enable debug logging.

        Returns:
            A JixiConfig. Missing variables fall back to defaults; an empty
            API key yields a client that cannot sign or refresh.

        Raises:
            ValueError: If JIXI_TIMEOUT_MS is not an integer.
            JixiConfigError: If JIXI_WORKFLOWS is not a valid workflow list.
        """
        workflows_json = os.environ.get("JIXI_WORKFLOWS", "").strip()
        workflows: list[WorkflowEntry] = []
        if workflows_json:
            try:
                workflows = decode_json_array(workflows_json, WorkflowEntry)
            except JixiDecodeError as e:
                raise JixiConfigError(f"JIXI_WORKFLOWS is not a valid workflow list: {e}") from e

        return cls(
            api_key=os.environ.get("JIXI_API_KEY", ""),
            workflows=workflows,
            timeout_ms=int(os.environ.get("JIXI_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS))),
            sign_endpoint=os.environ.get("JIXI_SIGN_URL", DEFAULT_SIGN_ENDPOINT),
            workflows_endpoint=os.environ.get("JIXI_WORKFLOWS_URL", DEFAULT_WORKFLOWS_ENDPOINT),
            debug=os.environ.get("JIXI_DEBUG", "") == "1",
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "JixiConfig":
        """Load a JSON settings snapshot such as ``{"api_key": ..., "workflows": [...]}``.

        Raises:
            JixiConfigError: If the file is missing or malformed.
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise JixiConfigError(f"Cannot read settings file {path}: {e}") from e
        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            raise JixiConfigError(f"Invalid settings file {path}: {e.error_count()} error(s)") from e
