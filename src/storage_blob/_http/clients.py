"""Factories for the httpx clients underneath the blob transports."""

from __future__ import annotations

import httpx

from .config import DEFAULT_TIMEOUT


def _timeout(timeout: float | None) -> httpx.Timeout:
    effective_timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
    return httpx.Timeout(effective_timeout)


def create_base_client(timeout: float | None = None) -> httpx.Client:
    """Create a sync httpx client with basic configuration (no auth).

    Auth is applied per request by the credential interceptor, and URLs are
    absolute, so no base_url is set on the client itself.

    Args:
        timeout: Request timeout in seconds. Defaults to DEFAULT_TIMEOUT.

    Returns:
        An httpx.Client with basic configuration.
    """
    return httpx.Client(timeout=_timeout(timeout))


def create_base_async_client(timeout: float | None = None) -> httpx.AsyncClient:
    """Create an async httpx client with basic configuration (no auth).

    Args:
        timeout: Request timeout in seconds. Defaults to DEFAULT_TIMEOUT.

    Returns:
        An httpx.AsyncClient with basic configuration.
    """
    return httpx.AsyncClient(timeout=_timeout(timeout))


__all__ = ["create_base_client", "create_base_async_client"]
