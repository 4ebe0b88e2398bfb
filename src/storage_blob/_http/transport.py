"""HTTP transport implementations for sync and async clients."""

from __future__ import annotations

import abc
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from .._helpers import debug
from ..cancellation import CancellationToken
from ..errors import BlobError, BlobTransportError, DeserializationError, OperationCancelledError

if TYPE_CHECKING:
    from ..interceptors import Interceptor


@dataclass(frozen=True, slots=True)
class BytesBody:
    """Raw bytes request body with explicit content type."""

    data: bytes
    content_type: str = "application/octet-stream"


RequestBody = BytesBody | None


def _request_error(exc: httpx.RequestError) -> BlobError:
    if isinstance(exc, httpx.DecodingError):
        return DeserializationError(f"could not decode the response body: {exc}")
    return BlobTransportError(str(exc))


class BaseTransport(abc.ABC):
    """Sends one request through the interceptor chain.

    Subclasses differ only in the httpx client they drive. The shared
    ``send`` signature is a coroutine so the same operation code can run on
    either transport.
    """

    def __init__(
        self,
        base_url: str,
        interceptors: Sequence[Interceptor] = (),
        *,
        owns_client: bool = True,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._interceptors = tuple(interceptors)
        self._owns_client = owns_client

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def interceptors(self) -> tuple[Interceptor, ...]:
        return self._interceptors

    def _build_url(self, path: str) -> str:
        return self._base_url + "/" + path.lstrip("/")

    def _before_send(self, request: httpx.Request) -> None:
        for interceptor in self._interceptors:
            interceptor.on_request(request)

    def _after_receive(self, response: httpx.Response) -> None:
        for interceptor in self._interceptors:
            interceptor.on_response(response)

    @staticmethod
    def _check_cancelled(token: CancellationToken, operation: str) -> None:
        if token.is_cancelled:
            raise OperationCancelledError(operation)

    @staticmethod
    def _request_kwargs(
        params: dict[str, Any] | None,
        headers: dict[str, str] | None,
        body: RequestBody,
    ) -> dict[str, Any]:
        request_headers = dict(headers or {})
        raw_content: bytes | None = None
        if isinstance(body, BytesBody):
            raw_content = body.data
            request_headers["Content-Type"] = body.content_type
        return {
            "params": params or None,
            "headers": request_headers,
            "content": raw_content,
        }

    @abc.abstractmethod
    async def send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: RequestBody = None,
        headers: dict[str, str] | None = None,
        cancellation_token: CancellationToken | None = None,
        operation: str = "request",
        stream: bool = False,
    ) -> httpx.Response:
        """Send an HTTP request and return the response.

        With ``stream=True`` the body is left unread; pass the response to
        ``read_raw`` to get it.
        """
        ...

    @abc.abstractmethod
    async def read_raw(self, response: httpx.Response) -> bytes:
        """Read a streamed body as sent, without undoing ``Content-Encoding``."""
        ...


class BlockingTransport(BaseTransport):
    """
    Synchronous HTTP transport using httpx.Client.

    ``send`` is declared async but never awaits, allowing it to be executed
    via iter_coroutine().
    """

    def __init__(
        self,
        client: httpx.Client,
        base_url: str,
        interceptors: Sequence[Interceptor] = (),
        *,
        owns_client: bool = True,
    ) -> None:
        super().__init__(base_url, interceptors, owns_client=owns_client)
        self._client = client

    @property
    def client(self) -> httpx.Client:
        return self._client

    async def send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: RequestBody = None,
        headers: dict[str, str] | None = None,
        cancellation_token: CancellationToken | None = None,
        operation: str = "request",
        stream: bool = False,
    ) -> httpx.Response:
        token = cancellation_token or CancellationToken.NONE
        self._check_cancelled(token, operation)
        request = self._client.build_request(
            method, self._build_url(path), **self._request_kwargs(params, headers, body)
        )
        self._before_send(request)
        debug("%s %s %s", operation, method, request.url.path)
        try:
            response = self._client.send(request, stream=stream)
        except httpx.RequestError as exc:
            raise _request_error(exc) from exc
        self._after_receive(response)
        if stream and token.is_cancelled:
            response.close()
        self._check_cancelled(token, operation)
        return response

    async def read_raw(self, response: httpx.Response) -> bytes:
        try:
            return b"".join(response.iter_raw())
        except httpx.RequestError as exc:
            raise _request_error(exc) from exc
        finally:
            response.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this transport created it."""
        if self._owns_client:
            self._client.close()


class AsyncTransport(BaseTransport):
    """Asynchronous HTTP transport using httpx.AsyncClient."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        interceptors: Sequence[Interceptor] = (),
        *,
        owns_client: bool = True,
    ) -> None:
        super().__init__(base_url, interceptors, owns_client=owns_client)
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: RequestBody = None,
        headers: dict[str, str] | None = None,
        cancellation_token: CancellationToken | None = None,
        operation: str = "request",
        stream: bool = False,
    ) -> httpx.Response:
        token = cancellation_token or CancellationToken.NONE
        self._check_cancelled(token, operation)
        request = self._client.build_request(
            method, self._build_url(path), **self._request_kwargs(params, headers, body)
        )
        self._before_send(request)
        debug("%s %s %s", operation, method, request.url.path)
        try:
            response = await self._client.send(request, stream=stream)
        except httpx.RequestError as exc:
            raise _request_error(exc) from exc
        self._after_receive(response)
        if stream and token.is_cancelled:
            await response.aclose()
        self._check_cancelled(token, operation)
        return response

    async def read_raw(self, response: httpx.Response) -> bytes:
        try:
            return b"".join([chunk async for chunk in response.aiter_raw()])
        except httpx.RequestError as exc:
            raise _request_error(exc) from exc
        finally:
            await response.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()


__all__ = [
    "BaseTransport",
    "BlockingTransport",
    "AsyncTransport",
    "BytesBody",
    "RequestBody",
]
