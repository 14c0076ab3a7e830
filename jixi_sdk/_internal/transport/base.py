"""Transport strategy contract and the outcome rules shared by all transports."""

import logging
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

import httpx

from jixi_sdk._internal.relay import CompletionRelay
from jixi_sdk._internal.workflows.extract import Decoder
from jixi_sdk._internal.workflows.models import DispatchRequest, DispatchResult
from jixi_sdk.exceptions import JixiAPIError, JixiDecodeError, JixiError, JixiTransportError

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[DispatchResult[Any]], None]


@runtime_checkable
class TransportStrategy(Protocol):
    """Executes one request/response exchange per ``submit``.

    Implementations never raise across this boundary: every failure is
    reported as a failed ``DispatchResult``, delivered through ``relay``.
    """

    relay: CompletionRelay

    def submit(
        self,
        request: DispatchRequest,
        decoder: Decoder,
        on_complete: CompletionCallback,
        *,
        timeout: float | None = None,
    ) -> None: ...

    def close(self) -> None: ...


def request_kwargs(request: DispatchRequest, timeout: float | None) -> dict[str, Any]:
    """httpx keyword arguments for a request, with an optional per-call timeout.

    httpx applies ``timeout`` to each phase (connect, read, write, pool).
    Transports enforce it as a total deadline on top of that.
    """
    kwargs = request.httpx_kwargs()
    if timeout is not None:
        kwargs["timeout"] = timeout
    return kwargs


def interpret_response(status_code: int, body: str, decoder: Decoder) -> DispatchResult[Any]:
    """Turn a completed exchange into a tagged result."""
    if not 200 <= status_code < 300:
        error = JixiAPIError(f"HTTP {status_code}: {body}", status_code=status_code, body=body)
        logger.error("[jixi] HTTP %d\n%s", status_code, body)
        return DispatchResult.failure(error)

    try:
        value = decoder(body)
    except JixiDecodeError as e:
        logger.error("[jixi] Decode error: %s", e)
        return DispatchResult.failure(e)
    except Exception as e:
        error = JixiDecodeError(f"Failed to decode response: {e!r}")
        logger.error("[jixi] Decode error: %s", error)
        return DispatchResult.failure(error)
    return DispatchResult.success(value)


def deadline_exceeded(request: DispatchRequest, timeout: float) -> JixiTransportError:
    """Error for an exchange that outlived its total deadline."""
    return JixiTransportError(f"Request to {request.url} exceeded the {timeout}s deadline")


def cancelled(request: DispatchRequest) -> JixiTransportError:
    return JixiTransportError(f"Request to {request.url} was cancelled")


def transport_failure(request: DispatchRequest, exc: Exception) -> DispatchResult[Any]:
    """Map a raised exception to a failed result."""
    if isinstance(exc, JixiError):
        error: JixiError = exc
    elif isinstance(exc, httpx.TimeoutException):
        error = JixiTransportError(f"Request to {request.url} timed out: {exc}")
    elif isinstance(exc, httpx.HTTPError):
        error = JixiTransportError(f"Request to {request.url} failed: {exc}")
    else:
        error = JixiTransportError(f"Unexpected error calling {request.url}: {exc!r}")
    logger.error("[jixi] %s", error)
    return DispatchResult.failure(error)
