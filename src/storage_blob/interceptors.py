"""Request/response interceptors applied by the transport around every call.

The builder installs the standard interceptors in a fixed order ahead of
anything the caller adds: ``RequestIdInterceptor``, ``AddDateInterceptor``,
``MetadataInterceptor``, ``NormalizeEtagInterceptor``. The credential
interceptor always runs last on the way out so it sees the final request.
"""

from __future__ import annotations

import urllib.parse
import uuid
from collections.abc import Sequence
from email.utils import formatdate

import httpx

from ._serialization import METADATA_PREFIX


class Interceptor:
    """Base class; override either hook."""

    def on_request(self, request: httpx.Request) -> None:
        return None

    def on_response(self, response: httpx.Response) -> None:
        return None


class RequestIdInterceptor(Interceptor):
    """Tags each request with a fresh ``x-ms-client-request-id``."""

    header = "x-ms-client-request-id"

    def on_request(self, request: httpx.Request) -> None:
        request.headers.setdefault(self.header, str(uuid.uuid4()))


class AddDateInterceptor(Interceptor):
    def on_request(self, request: httpx.Request) -> None:
        request.headers["Date"] = formatdate(usegmt=True)


class MetadataInterceptor(Interceptor):
    """Trims surrounding whitespace from outbound ``x-ms-meta-*`` values.

    The service stores metadata values trimmed; sending them untrimmed would
    make the stored value differ from what a signature was computed over.
    """

    def on_request(self, request: httpx.Request) -> None:
        prefix = METADATA_PREFIX.encode("ascii")
        raw = request.headers.raw
        if not any(
            key.lower().startswith(prefix) and value != value.strip() for key, value in raw
        ):
            return
        # Rebuilt from the raw pairs; item assignment would lower-case the name.
        request.headers = httpx.Headers(
            [
                (key, value.strip() if key.lower().startswith(prefix) else value)
                for key, value in raw
            ],
            encoding=request.headers.encoding,
        )


class NormalizeEtagInterceptor(Interceptor):
    """Strips the quotes the service wraps around ``ETag`` values."""

    def on_response(self, response: httpx.Response) -> None:
        etag = response.headers.get("etag")
        if etag is not None and '"' in etag:
            response.headers["etag"] = etag.replace('"', "")


class SasTokenCredential:
    def __init__(self, sas_token: str) -> None:
        token = (sas_token or "").lstrip("?")
        if not token:
            raise ValueError("sas_token cannot be empty")
        self.sas_token = token

    def query_params(self) -> list[tuple[str, str]]:
        return urllib.parse.parse_qsl(self.sas_token, keep_blank_values=True)


class SasTokenCredentialInterceptor(Interceptor):
    """Appends a shared access signature to the request query string."""

    def __init__(self, credential: SasTokenCredential) -> None:
        self.credential = credential

    def on_request(self, request: httpx.Request) -> None:
        request.url = request.url.copy_merge_params(self.credential.query_params())


def standard_interceptors() -> list[Interceptor]:
    return [
        RequestIdInterceptor(),
        AddDateInterceptor(),
        MetadataInterceptor(),
        NormalizeEtagInterceptor(),
    ]


def build_chain(
    interceptors: Sequence[Interceptor],
    credential_interceptor: Interceptor | None,
) -> tuple[Interceptor, ...]:
    chain = [*standard_interceptors(), *interceptors]
    if credential_interceptor is not None:
        chain.append(credential_interceptor)
    return tuple(chain)


__all__ = [
    "Interceptor",
    "RequestIdInterceptor",
    "AddDateInterceptor",
    "MetadataInterceptor",
    "NormalizeEtagInterceptor",
    "SasTokenCredential",
    "SasTokenCredentialInterceptor",
    "standard_interceptors",
    "build_chain",
]
