"""Cooperative transport for single-threaded asyncio environments."""

import asyncio
import functools
import logging
from typing import Any

import httpx

from jixi_sdk._internal.http import DEFAULT_TIMEOUT, create_async_http_client
from jixi_sdk._internal.redaction import redact_headers
from jixi_sdk._internal.relay import CompletionRelay
from jixi_sdk._internal.transport.base import (
    CompletionCallback,
    cancelled,
    deadline_exceeded,
    interpret_response,
    request_kwargs,
    transport_failure,
)
from jixi_sdk._internal.workflows.extract import Decoder
from jixi_sdk._internal.workflows.models import DispatchRequest, DispatchResult

logger = logging.getLogger(__name__)


class EventLoopTransport:
    """Runs each exchange as a task on the controlling thread's event loop.

    The task suspends only while awaiting network I/O and resumes on the
    same thread. Completions still go through the relay so callers see
    the same contract as with ``ThreadPoolTransport``.

    ``submit`` must be called while the loop is running.
    """

    def __init__(
        self,
        relay: CompletionRelay | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.relay = relay or CompletionRelay()
        self._timeout = timeout
        self._client = client
        self._tasks: set[asyncio.Task[None]] = set()

    def _get_client(self) -> httpx.AsyncClient:
        # Created lazily so it binds to the loop that runs the tasks.
        if self._client is None:
            self._client = create_async_http_client(timeout=self._timeout)
        return self._client

    async def _fetch(self, request: DispatchRequest, timeout: float | None) -> tuple[int, str]:
        response = await self._get_client().request(
            request.method, request.url, **request_kwargs(request, timeout)
        )
        return response.status_code, response.text

    async def execute(
        self,
        request: DispatchRequest,
        decoder: Decoder,
        *,
        timeout: float | None = None,
    ) -> DispatchResult[Any]:
        """Run one exchange and return its result.

        With ``timeout`` set, the whole exchange must finish within it,
        including a body that arrives slowly.
        """
        try:
            if timeout is None:
                status_code, body = await self._fetch(request, timeout)
            else:
                status_code, body = await asyncio.wait_for(self._fetch(request, timeout), timeout)
            return interpret_response(status_code, body, decoder)
        except asyncio.TimeoutError:
            return transport_failure(request, deadline_exceeded(request, timeout))
        except Exception as e:
            return transport_failure(request, e)

    async def _run(
        self,
        request: DispatchRequest,
        decoder: Decoder,
        on_complete: CompletionCallback,
        timeout: float | None,
    ) -> None:
        result = await self.execute(request, decoder, timeout=timeout)
        self.relay.post(functools.partial(on_complete, result))

    def _finish(
        self,
        request: DispatchRequest,
        on_complete: CompletionCallback,
        task: asyncio.Task[None],
    ) -> None:
        self._tasks.discard(task)
        # A task cancelled before or during its exchange never reached _run's post.
        if task.cancelled():
            result = transport_failure(request, cancelled(request))
            self.relay.post(functools.partial(on_complete, result))

    def submit(
        self,
        request: DispatchRequest,
        decoder: Decoder,
        on_complete: CompletionCallback,
        *,
        timeout: float | None = None,
    ) -> None:
        """Schedule an exchange on the running loop; completion goes through the relay.

        Raises:
            RuntimeError: If no event loop is running in this thread.
        """
        loop = asyncio.get_running_loop()
        logger.debug(
            "[jixi] Dispatching %s %s %s", request.method, request.url, redact_headers(request.headers())
        )
        task = loop.create_task(self._run(request, decoder, on_complete, timeout))
        self._tasks.add(task)
        task.add_done_callback(functools.partial(self._finish, request, on_complete))

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def wait(self) -> None:
        """Wait until scheduled exchanges finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Cancel exchanges still in flight. Use ``aclose`` to also close the client.

        Each cancelled exchange still delivers a ``transport`` failure
        through the relay.
        """
        for task in list(self._tasks):
            task.cancel()

    async def aclose(self) -> None:
        """Cancel in-flight exchanges and close the HTTP client."""
        self.close()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        if self._client is not None:
            await self._client.aclose()
            self._client = None
