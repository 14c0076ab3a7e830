"""Blocking transport running exchanges on a worker thread pool."""

import concurrent.futures
import functools
import logging
import threading
import time
from typing import Any

import httpx

from jixi_sdk._internal.http import DEFAULT_TIMEOUT, create_http_client
from jixi_sdk._internal.redaction import redact_headers
from jixi_sdk._internal.relay import CompletionRelay
from jixi_sdk._internal.transport.base import (
    CompletionCallback,
    deadline_exceeded,
    interpret_response,
    request_kwargs,
    transport_failure,
)
from jixi_sdk._internal.workflows.extract import Decoder
from jixi_sdk._internal.workflows.models import DispatchRequest, DispatchResult

logger = logging.getLogger(__name__)


class ThreadPoolTransport:
    """Runs each exchange on a worker thread with a shared ``httpx.Client``.

    Results never reach the caller from the worker: the completion
    callback is posted to the relay and runs when the controlling thread
    drains it.
    """

    def __init__(
        self,
        relay: CompletionRelay | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_workers: int | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            relay: Relay to deliver completions through. A new one is created if omitted.
            timeout: Default request timeout in seconds.
            max_workers: Worker thread cap, passed to the executor.
            client: Preconfigured HTTP client; the transport owns and closes it.
        """
        self.relay = relay or CompletionRelay()
        self._client = client or create_http_client(timeout=timeout)
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="jixi-dispatch"
        )
        self._futures: set[concurrent.futures.Future[None]] = set()
        self._lock = threading.Lock()
        self._closed = False

    def execute(
        self,
        request: DispatchRequest,
        decoder: Decoder,
        *,
        timeout: float | None = None,
    ) -> DispatchResult[Any]:
        """Run one exchange on the calling thread and return its result.

        With ``timeout`` set, the whole exchange must finish within it,
        including a body that arrives slowly.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        try:
            with self._client.stream(request.method, request.url, **request_kwargs(request, timeout)) as response:
                chunks = []
                for chunk in response.iter_bytes():
                    chunks.append(chunk)
                    if deadline is not None and time.monotonic() > deadline:
                        raise deadline_exceeded(request, timeout)
                body = b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")
            return interpret_response(response.status_code, body, decoder)
        except Exception as e:
            return transport_failure(request, e)

    def submit(
        self,
        request: DispatchRequest,
        decoder: Decoder,
        on_complete: CompletionCallback,
        *,
        timeout: float | None = None,
    ) -> None:
        """Queue an exchange on the pool; completion goes through the relay."""

        def work() -> None:
            result = self.execute(request, decoder, timeout=timeout)
            self.relay.post(functools.partial(on_complete, result))

        logger.debug(
            "[jixi] Dispatching %s %s %s", request.method, request.url, redact_headers(request.headers())
        )
        future = None
        # Same lock as close().
        with self._lock:
            if not self._closed:
                future = self._executor.submit(work)
                self._futures.add(future)
        if future is None:
            result = transport_failure(request, RuntimeError("transport is closed"))
            self.relay.post(functools.partial(on_complete, result))
            return
        future.add_done_callback(self._forget)

    def _forget(self, future: concurrent.futures.Future[None]) -> None:
        with self._lock:
            self._futures.discard(future)

    @property
    def in_flight(self) -> int:
        with self._lock:
            return len(self._futures)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until submitted exchanges finish.

        Returns:
            True if nothing is left in flight.
        """
        with self._lock:
            futures = list(self._futures)
        _, not_done = concurrent.futures.wait(futures, timeout=timeout)
        return not not_done

    def close(self) -> None:
        """Finish in-flight exchanges, then release the pool and client."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=True)
        self._client.close()
