"""Shared HTTP client configuration."""

import httpx

from jixi_sdk._version import __version__

DEFAULT_TIMEOUT = 30.0
DEFAULT_SIGN_TIMEOUT = 15


def _default_headers() -> dict[str, str]:
    return {"User-Agent": f"jixi-sdk/{__version__}"}


def create_http_client(*, timeout: float = DEFAULT_TIMEOUT) -> httpx.Client:
    """Create configured blocking HTTP client.

    The client carries no credentials; authorization travels with each
    request so one client can be shared across worker threads.

    Args:
        timeout: Default request timeout in seconds.

    Returns:
        Configured httpx.Client instance.
    """
    return httpx.Client(timeout=timeout, headers=_default_headers())


def create_async_http_client(*, timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    """Create configured async HTTP client for the event-loop transport."""
    return httpx.AsyncClient(timeout=timeout, headers=_default_headers())
