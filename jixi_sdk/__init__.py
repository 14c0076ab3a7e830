"""Jixi SDK for Python.

Dispatches named workflows to the Jixi API and hands every result back
to one controlling thread.

Public API:
    JixiClient - Workflow dispatch and URL signing
    JixiConfig - Client configuration
    DispatchResult - Tagged result passed to callbacks

Internal (not for direct use):
    _internal.transport - Thread-pool and event-loop transports
    _internal.workflows - Registry, request builder, tolerant decoding
    _internal.signing - URL signing payloads and responses
"""

import logging

from jixi_sdk._internal.config import JixiConfig
from jixi_sdk._version import __version__
from jixi_sdk.client import JixiClient, get_client
from jixi_sdk.models import DispatchResult, WorkflowEntry

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "JixiClient",
    "JixiConfig",
    "DispatchResult",
    "WorkflowEntry",
    "get_client",
]
