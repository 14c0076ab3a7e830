"""Transport strategies.

Both implementations give identical results for identical responses and
deliver completions through a ``CompletionRelay``.
"""

from jixi_sdk._internal.transport.base import TransportStrategy
from jixi_sdk._internal.transport.event_loop import EventLoopTransport
from jixi_sdk._internal.transport.threaded import ThreadPoolTransport

__all__ = ["TransportStrategy", "ThreadPoolTransport", "EventLoopTransport"]
