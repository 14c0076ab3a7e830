"""User-facing client for dispatching Jixi workflows.

Results are never delivered from a worker thread. Every callback is
queued and runs when the controlling thread calls ``tick()``.

Example usage (threaded environment):
    from jixi_sdk import JixiClient, JixiConfig

    client = JixiClient.threaded(JixiConfig.from_env())
    client.start_workflow("caption", {"prompt": "a cat"}, on_caption)

    while running:
        client.tick()  # once per frame / loop iteration

Example usage (asyncio environment):
    client = JixiClient.event_loop(config)
    client.sign_urls(["s3://bucket/a.png"], on_signed)
    while running:
        client.tick()
        await asyncio.sleep(0)
"""

import functools
import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from jixi_sdk._internal.config import JixiConfig
from jixi_sdk._internal.http import DEFAULT_SIGN_TIMEOUT
from jixi_sdk._internal.log import enable_debug_logging
from jixi_sdk._internal.relay import CompletionRelay
from jixi_sdk._internal.signing.client import build_sign_request, make_sign_decoder, sign_timeout
from jixi_sdk._internal.signing.models import DEFAULT_BATCH_EXPIRES_IN, DEFAULT_SINGLE_EXPIRES_IN
from jixi_sdk._internal.transport.base import CompletionCallback, TransportStrategy
from jixi_sdk._internal.transport.event_loop import EventLoopTransport
from jixi_sdk._internal.transport.threaded import ThreadPoolTransport
from jixi_sdk._internal.workflows.builder import build_request
from jixi_sdk._internal.workflows.catalog import build_catalog_request, decode_catalog
from jixi_sdk._internal.workflows.extract import Decoder, make_decoder
from jixi_sdk._internal.workflows.models import DispatchRequest, DispatchResult, WorkflowEntry
from jixi_sdk._internal.workflows.registry import WorkflowRegistry
from jixi_sdk.exceptions import JixiConfigError, JixiError

logger = logging.getLogger(__name__)

ErrorReporter = Callable[[DispatchResult[Any]], None]


class JixiClient:
    """Dispatches workflows and signs URLs against the Jixi API.

    The transport is chosen when the client is composed: use
    ``JixiClient.threaded()`` for blocking environments and
    ``JixiClient.event_loop()`` inside a running asyncio loop, or pass
    any ``TransportStrategy``.

    No method raises for network, HTTP or decode failures. Callbacks
    receive a ``DispatchResult`` whose ``ok`` is False and whose
    ``error_detail`` explains why; the optional ``error_reporter`` sees
    every failed result too.
    """

    def __init__(
        self,
        *,
        config: JixiConfig | None = None,
        registry: WorkflowRegistry | None = None,
        transport: TransportStrategy | None = None,
        error_reporter: ErrorReporter | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Settings snapshot. Defaults to an empty configuration.
            registry: Workflow registry. Built from ``config`` if omitted.
            transport: Transport strategy. A ``ThreadPoolTransport`` if omitted.
            error_reporter: Called on the controlling thread with each failed result.
        """
        self._config = config or JixiConfig()
        if self._config.debug:
            enable_debug_logging()
        self._registry = registry or WorkflowRegistry.from_config(self._config)
        self._transport = transport or ThreadPoolTransport(timeout=self._config.timeout)
        self._error_reporter = error_reporter
        self._registry.log_summary()

    @classmethod
    def threaded(
        cls,
        config: JixiConfig | None = None,
        *,
        max_workers: int | None = None,
        error_reporter: ErrorReporter | None = None,
    ) -> "JixiClient":
        """Create a client that runs requests on a worker thread pool."""
        config = config or JixiConfig()
        transport = ThreadPoolTransport(timeout=config.timeout, max_workers=max_workers)
        return cls(config=config, transport=transport, error_reporter=error_reporter)

    @classmethod
    def event_loop(
        cls,
        config: JixiConfig | None = None,
        *,
        error_reporter: ErrorReporter | None = None,
    ) -> "JixiClient":
        """Create a client that runs requests as tasks on the running asyncio loop."""
        config = config or JixiConfig()
        transport = EventLoopTransport(timeout=config.timeout)
        return cls(config=config, transport=transport, error_reporter=error_reporter)

    @classmethod
    def from_env(cls) -> "JixiClient":
        """Create a threaded client from ``JIXI_*`` environment variables."""
        return cls.threaded(JixiConfig.from_env())

    # =========================================================================
    # Settings
    # =========================================================================

    @property
    def config(self) -> JixiConfig:
        return self._config

    @property
    def registry(self) -> WorkflowRegistry:
        return self._registry

    @property
    def transport(self) -> TransportStrategy:
        return self._transport

    @property
    def relay(self) -> CompletionRelay:
        return self._transport.relay

    def load_settings(self, api_key: str | None, workflows: Iterable[WorkflowEntry]) -> None:
        """Replace the registry with one built from a new settings snapshot."""
        self._registry = WorkflowRegistry(api_key=api_key, entries=workflows)
        self._registry.log_summary()

    def resolve(self, name: str) -> str | None:
        return self._registry.resolve(name)

    # =========================================================================
    # Tick
    # =========================================================================

    def tick(self) -> int:
        """Run completed callbacks. Call once per cycle on the controlling thread.

        Returns:
            Number of callbacks invoked.
        """
        return self.relay.drain()

    # =========================================================================
    # Workflows
    # =========================================================================

    def start_workflow(
        self,
        name: str,
        payload: Any = None,
        on_complete: CompletionCallback | None = None,
        *,
        file_path: str | None = None,
        result_type: Any = str,
    ) -> bool:
        """Dispatch a workflow by name.

        Args:
            name: Workflow name, matched exactly.
            payload: JSON payload: None, dict, Pydantic model or JSON text.
            on_complete: Receives the DispatchResult during a later ``tick()``.
            file_path: Optional file sent as the multipart ``file`` part.
            result_type: Expected result: str, a Pydantic model, list[X] or dict.

        Returns:
            True if a request was sent, False if it short-circuited
            (unknown workflow or missing file). The callback runs either way.
        """
        decoder = make_decoder(result_type)
        url = self._resolve_or_fail(name, on_complete)
        if url is None:
            return False
        try:
            request = build_request(url, payload, api_key=self._registry.api_key, file_path=file_path)
        except JixiError as e:
            self._fail(e, on_complete)
            return False
        self._dispatch(request, decoder, on_complete)
        return True

    def start_workflow_bytes(
        self,
        name: str,
        payload: Any,
        file_bytes: bytes,
        file_name: str | None = None,
        on_complete: CompletionCallback | None = None,
        *,
        result_type: Any = str,
    ) -> bool:
        """Dispatch a workflow with an in-memory attachment.

        Args:
            name: Workflow name, matched exactly.
            payload: JSON payload: None, dict, Pydantic model or JSON text.
            file_bytes: Attachment content.
            file_name: Attachment name; defaults to ``upload.bin``. Its
                extension sets the part's content type.
            on_complete: Receives the DispatchResult during a later ``tick()``.
            result_type: Expected result: str, a Pydantic model, list[X] or dict.

        Returns:
            True if a request was sent, False for an unknown workflow.
        """
        decoder = make_decoder(result_type)
        url = self._resolve_or_fail(name, on_complete)
        if url is None:
            return False
        request = build_request(
            url,
            payload,
            api_key=self._registry.api_key,
            file_bytes=file_bytes or b"",
            file_name=file_name,
        )
        self._dispatch(request, decoder, on_complete)
        return True

    def refresh_workflows(self, on_complete: CompletionCallback | None = None) -> bool:
        """Fetch the workflow catalog and swap in a rebuilt registry.

        The swap happens on the controlling thread, just before
        ``on_complete`` receives the list of entries. On failure the
        current registry is kept.

        Returns:
            True if a request was sent, False if the API key is missing.
        """
        try:
            request = build_catalog_request(self._registry.api_key, self._config.workflows_endpoint)
        except JixiConfigError as e:
            self._fail(e, on_complete)
            return False

        def apply(result: DispatchResult[Any]) -> None:
            if result.ok:
                self.load_settings(self._registry.api_key, result.value)
            if on_complete is not None:
                on_complete(result)

        self._dispatch(request, decode_catalog, apply)
        return True

    # =========================================================================
    # URL Signing
    # =========================================================================

    def sign_urls(
        self,
        urls: Sequence[str],
        on_complete: CompletionCallback,
        *,
        endpoint: str | None = None,
        timeout_seconds: float = DEFAULT_SIGN_TIMEOUT,
        expires_in_seconds: int = DEFAULT_BATCH_EXPIRES_IN,
    ) -> bool:
        """Sign a batch of URLs.

        The signed URLs keep the input order, so callers can match them
        by index.

        Args:
            urls: URLs to sign.
            on_complete: Receives DispatchResult[list[str]].
            endpoint: Signing endpoint; defaults to the configured one.
            timeout_seconds: Request timeout, at least one second.
            expires_in_seconds: Lifetime requested for the signatures.

        Returns:
            True if a request was sent. An empty batch completes with an
            empty list and sends nothing; a missing API key fails without
            sending.
        """
        urls = list(urls)
        if not urls:
            self.relay.post(functools.partial(on_complete, DispatchResult.success([])))
            return False
        try:
            request = build_sign_request(
                urls,
                self._registry.api_key,
                endpoint=endpoint or self._config.sign_endpoint,
                expires_in=expires_in_seconds,
            )
        except JixiConfigError as e:
            self._fail(e, on_complete)
            return False
        self._dispatch(request, make_sign_decoder(len(urls)), on_complete, timeout=sign_timeout(timeout_seconds))
        return True

    def sign_url(
        self,
        url: str,
        on_complete: CompletionCallback,
        *,
        endpoint: str | None = None,
        timeout_seconds: float = DEFAULT_SIGN_TIMEOUT,
        expires_in_seconds: int = DEFAULT_SINGLE_EXPIRES_IN,
    ) -> bool:
        """Sign one URL. ``on_complete`` receives DispatchResult[str]."""
        if not url or not url.strip():
            self._fail(JixiConfigError("Cannot sign a blank URL."), on_complete)
            return False

        def first(result: DispatchResult[Any]) -> None:
            if result.ok:
                on_complete(DispatchResult.success(result.value[0]))
            else:
                on_complete(result)

        return self.sign_urls(
            [url],
            first,
            endpoint=endpoint,
            timeout_seconds=timeout_seconds,
            expires_in_seconds=expires_in_seconds,
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _resolve_or_fail(self, name: str, on_complete: CompletionCallback | None) -> str | None:
        url = self._registry.resolve(name)
        if not url:
            self._fail(JixiConfigError(f"No workflow {name} found in settings."), on_complete)
            return None
        return url

    def _dispatch(
        self,
        request: DispatchRequest,
        decoder: Decoder,
        on_complete: CompletionCallback | None,
        *,
        timeout: float | None = None,
    ) -> None:
        self._transport.submit(request, decoder, self._deliverer(on_complete), timeout=timeout)

    def _fail(self, error: JixiError, on_complete: CompletionCallback | None) -> None:
        """Deliver a failure found before any request was sent."""
        logger.warning("[jixi] %s", error)
        result = DispatchResult.failure(error)
        self.relay.post(functools.partial(self._deliverer(on_complete), result))

    def _deliverer(self, on_complete: CompletionCallback | None) -> CompletionCallback:
        def deliver(result: DispatchResult[Any]) -> None:
            if not result.ok and self._error_reporter is not None:
                self._error_reporter(result)
            if on_complete is not None:
                on_complete(result)

        return deliver

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Release the transport. Completions already queued stay drainable."""
        self._transport.close()

    async def aclose(self) -> None:
        aclose = getattr(self._transport, "aclose", None)
        if aclose is not None:
            await aclose()
        else:
            self._transport.close()

    def __enter__(self) -> "JixiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    async def __aenter__(self) -> "JixiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def get_client() -> JixiClient:
    """Get a new threaded client configured from environment variables.

    Each call returns a fresh client; keeping one alive for the
    application is the caller's choice.
    """
    return JixiClient.from_env()
