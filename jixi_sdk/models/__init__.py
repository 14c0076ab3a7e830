"""Public models for the Jixi SDK."""

from jixi_sdk._internal.workflows.models import Attachment, DispatchResult, WorkflowEntry

__all__ = ["Attachment", "DispatchResult", "WorkflowEntry"]
