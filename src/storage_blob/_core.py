"""Operation logic shared by the blocking and async blob clients.

Every operation is written once as a coroutine over ``BaseTransport.send``.
``StorageBlobClient`` drives these coroutines with ``iter_coroutine`` on a
``BlockingTransport``; ``AsyncStorageBlobClient`` awaits them on an
``AsyncTransport``. Option checks, request-condition validation and response
decoding never await, so both clients fail the same way before any I/O.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx

from ._helpers import blob_path, compute_md5, container_path, debug
from ._http import BaseTransport, BytesBody, RequestBody, get_storage_env
from ._http.config import default_blob_service_url
from ._serialization import (
    blob_http_headers,
    build_blob_properties,
    build_block_blob_item,
    build_container_properties,
    build_download_headers,
    condition_headers,
    cpk_headers,
    decode_error,
    decode_list_blobs,
    decode_tags,
    encode_base64,
    encode_block_list,
    encode_tags,
    metadata_headers,
    timeout_params,
)
from ._validation import overwrite_conditions, validate_request_conditions
from .cancellation import CancellationToken
from .errors import BlobServiceError, InvalidArgumentError
from .interceptors import (
    Interceptor,
    SasTokenCredential,
    SasTokenCredentialInterceptor,
    build_chain,
)
from .models import (
    BlobDownloadResult,
    BlobGetPropertiesHeaders,
    BlobRange,
    BlobsPage,
    BlobServiceVersion,
    BlockBlobItem,
    ContainerGetPropertiesHeaders,
    Response,
)
from .options import (
    BlobDeleteOptions,
    BlobGetPropertiesOptions,
    BlobGetTagsOptions,
    BlobRawDownloadOptions,
    BlobSetAccessTierOptions,
    BlobSetHttpHeadersOptions,
    BlobSetMetadataOptions,
    BlobSetTagsOptions,
    BlockBlobCommitBlockListOptions,
    BlockBlobStageBlockOptions,
    ContainerCreateOptions,
    ContainerDeleteOptions,
    ContainerGetPropertiesOptions,
    ListBlobsOptions,
)

O = TypeVar("O")

XML_CONTENT_TYPE = "application/xml; charset=utf-8"


def _require_options(options: O | None, kind: type[O]) -> O:
    if options is None:
        raise InvalidArgumentError(f"{kind.__name__} is required")
    if not isinstance(options, kind):
        raise InvalidArgumentError(f"expected {kind.__name__}, got {type(options).__name__}")
    return options


def map_service_error(response: httpx.Response, content: bytes | None = None) -> BlobServiceError:
    code, message = decode_error(response.content if content is None else content)
    code = response.headers.get("x-ms-error-code") or code
    error = BlobServiceError(
        message or response.reason_phrase or "request failed",
        status_code=response.status_code,
        error_code=code,
        headers=response.headers,
    )
    debug("service error %s %s", response.status_code, code)
    return error


def build_list_params(
    page_id: str | None,
    options: ListBlobsOptions,
) -> dict[str, str]:
    params: dict[str, str] = {"restype": "container", "comp": "list"}
    if options.prefix:
        params["prefix"] = options.prefix
    if page_id:
        params["marker"] = page_id
    if options.max_results is not None:
        params["maxresults"] = str(options.max_results)
    if options.details:
        params["include"] = ",".join(item.value for item in options.details)
    params.update(timeout_params(options.timeout))
    return params


class BaseStorageBlobClient:
    """Base blob client with shared async operation logic."""

    def __init__(self, transport: BaseTransport, service_version: BlobServiceVersion):
        self._transport = transport
        self._service_version = service_version

    @property
    def blob_service_url(self) -> str:
        return self._transport.base_url

    @property
    def service_version(self) -> BlobServiceVersion:
        return self._service_version

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        body: RequestBody = None,
        cancellation_token: CancellationToken | None = None,
        stream: bool = False,
    ) -> httpx.Response:
        request_headers = {"x-ms-version": self._service_version.value}
        if headers:
            request_headers.update(headers)
        response = await self._transport.send(
            method,
            path,
            params=params,
            headers=request_headers,
            body=body,
            cancellation_token=cancellation_token,
            operation=operation,
            stream=stream,
        )
        if not (200 <= response.status_code < 300):
            content = await self._transport.read_raw(response) if stream else None
            raise map_service_error(response, content)
        return response

    # Containers

    async def _create_container_with_response(
        self, options: ContainerCreateOptions
    ) -> Response[None]:
        options = _require_options(options, ContainerCreateOptions)
        headers = metadata_headers(options.metadata)
        if options.public_access_type is not None:
            headers["x-ms-blob-public-access"] = options.public_access_type.value
        response = await self._send(
            "create_container",
            "PUT",
            container_path(options.container_name),
            params={"restype": "container", **timeout_params(options.timeout)},
            headers=headers,
            cancellation_token=options.cancellation_token,
        )
        return Response(response.status_code, response.headers, None)

    async def _delete_container_with_response(
        self, options: ContainerDeleteOptions
    ) -> Response[None]:
        options = _require_options(options, ContainerDeleteOptions)
        conditions = validate_request_conditions(options.request_conditions, "delete_container")
        response = await self._send(
            "delete_container",
            "DELETE",
            container_path(options.container_name),
            params={"restype": "container", **timeout_params(options.timeout)},
            headers=condition_headers(conditions),
            cancellation_token=options.cancellation_token,
        )
        return Response(response.status_code, response.headers, None)

    async def _get_container_properties_with_response(
        self, options: ContainerGetPropertiesOptions
    ) -> Response[ContainerGetPropertiesHeaders]:
        options = _require_options(options, ContainerGetPropertiesOptions)
        conditions = validate_request_conditions(
            options.request_conditions, "get_container_properties"
        )
        response = await self._send(
            "get_container_properties",
            "GET",
            container_path(options.container_name),
            params={"restype": "container", **timeout_params(options.timeout)},
            headers=condition_headers(conditions),
            cancellation_token=options.cancellation_token,
        )
        return Response(
            response.status_code, response.headers, build_container_properties(response.headers)
        )

    # Listing

    async def _get_blobs_in_page_with_response(
        self,
        page_id: str | None,
        container_name: str,
        options: ListBlobsOptions | None = None,
    ) -> Response[BlobsPage]:
        if not container_name:
            raise InvalidArgumentError("container_name is required")
        options = options if options is not None else ListBlobsOptions()
        response = await self._send(
            "list_blobs",
            "GET",
            container_path(container_name),
            params=build_list_params(page_id, options),
            cancellation_token=options.cancellation_token,
        )
        result = decode_list_blobs(response.content)
        page = BlobsPage(result.blob_items, page_id, result.next_marker)
        return Response(response.status_code, response.headers, page)

    # Blobs

    async def _get_blob_properties_with_response(
        self, options: BlobGetPropertiesOptions
    ) -> Response[BlobGetPropertiesHeaders]:
        options = _require_options(options, BlobGetPropertiesOptions)
        conditions = validate_request_conditions(options.request_conditions, "get_blob_properties")
        params = timeout_params(options.timeout)
        if options.snapshot is not None:
            params["snapshot"] = options.snapshot
        response = await self._send(
            "get_blob_properties",
            "HEAD",
            blob_path(options.container_name, options.blob_name),
            params=params,
            headers={**condition_headers(conditions), **cpk_headers(options.cpk_info)},
            cancellation_token=options.cancellation_token,
        )
        return Response(
            response.status_code, response.headers, build_blob_properties(response.headers)
        )

    async def _set_blob_http_headers_with_response(
        self, options: BlobSetHttpHeadersOptions
    ) -> Response[None]:
        options = _require_options(options, BlobSetHttpHeadersOptions)
        conditions = validate_request_conditions(
            options.request_conditions, "set_blob_http_headers"
        )
        response = await self._send(
            "set_blob_http_headers",
            "PUT",
            blob_path(options.container_name, options.blob_name),
            params={"comp": "properties", **timeout_params(options.timeout)},
            headers={**blob_http_headers(options.headers), **condition_headers(conditions)},
            cancellation_token=options.cancellation_token,
        )
        return Response(response.status_code, response.headers, None)

    async def _set_blob_metadata_with_response(
        self, options: BlobSetMetadataOptions
    ) -> Response[None]:
        options = _require_options(options, BlobSetMetadataOptions)
        conditions = validate_request_conditions(options.request_conditions, "set_blob_metadata")
        response = await self._send(
            "set_blob_metadata",
            "PUT",
            blob_path(options.container_name, options.blob_name),
            params={"comp": "metadata", **timeout_params(options.timeout)},
            headers={
                **metadata_headers(options.metadata),
                **condition_headers(conditions),
                **cpk_headers(options.cpk_info),
            },
            cancellation_token=options.cancellation_token,
        )
        return Response(response.status_code, response.headers, None)

    async def _set_blob_access_tier_with_response(
        self, options: BlobSetAccessTierOptions
    ) -> Response[None]:
        options = _require_options(options, BlobSetAccessTierOptions)
        conditions = validate_request_conditions(options.request_conditions, "set_blob_access_tier")
        params = {"comp": "tier", **timeout_params(options.timeout)}
        if options.snapshot is not None:
            params["snapshot"] = options.snapshot
        headers = {"x-ms-access-tier": options.access_tier.value}
        if options.rehydrate_priority is not None:
            headers["x-ms-rehydrate-priority"] = options.rehydrate_priority.value
        headers.update(condition_headers(conditions))
        response = await self._send(
            "set_blob_access_tier",
            "PUT",
            blob_path(options.container_name, options.blob_name),
            params=params,
            headers=headers,
            cancellation_token=options.cancellation_token,
        )
        return Response(response.status_code, response.headers, None)

    async def _raw_download_with_response(
        self, options: BlobRawDownloadOptions
    ) -> Response[BlobDownloadResult]:
        options = _require_options(options, BlobRawDownloadOptions)
        conditions = validate_request_conditions(options.request_conditions, "raw_download")
        blob_range = options.range if options.range is not None else BlobRange(0)
        params = timeout_params(options.timeout)
        if options.snapshot is not None:
            params["snapshot"] = options.snapshot
        headers = {"x-ms-range": blob_range.to_header_value()}
        if options.retrieve_content_range_md5:
            headers["x-ms-range-get-content-md5"] = "true"
        if options.retrieve_content_range_crc64:
            headers["x-ms-range-get-content-crc64"] = "true"
        headers.update(condition_headers(conditions))
        headers.update(cpk_headers(options.cpk_info))
        response = await self._send(
            "raw_download",
            "GET",
            blob_path(options.container_name, options.blob_name),
            params=params,
            headers=headers,
            cancellation_token=options.cancellation_token,
            stream=True,
        )
        # Stored bytes are returned as-is, even for blobs saved with a Content-Encoding.
        content = await self._transport.read_raw(response)
        result = BlobDownloadResult(content, build_download_headers(response.headers))
        return Response(response.status_code, response.headers, result)

    async def _stage_block_with_response(
        self, options: BlockBlobStageBlockOptions
    ) -> Response[None]:
        options = _require_options(options, BlockBlobStageBlockOptions)
        conditions = validate_request_conditions(options.request_conditions, "stage_block")
        data = bytes(options.data)
        content_md5 = compute_md5(data) if options.compute_md5 else options.content_md5
        headers: dict[str, str] = {}
        if content_md5 is not None:
            headers["Content-MD5"] = encode_base64(content_md5)
        if options.content_crc64 is not None:
            headers["x-ms-content-crc64"] = encode_base64(options.content_crc64)
        headers.update(condition_headers(conditions))
        headers.update(cpk_headers(options.cpk_info))
        response = await self._send(
            "stage_block",
            "PUT",
            blob_path(options.container_name, options.blob_name),
            params={
                "comp": "block",
                "blockid": options.base64_block_id,
                **timeout_params(options.timeout),
            },
            headers=headers,
            body=BytesBody(data),
            cancellation_token=options.cancellation_token,
        )
        return Response(response.status_code, response.headers, None)

    async def _commit_block_list_with_response(
        self, options: BlockBlobCommitBlockListOptions
    ) -> Response[BlockBlobItem]:
        options = _require_options(options, BlockBlobCommitBlockListOptions)
        conditions = validate_request_conditions(options.request_conditions, "commit_block_list")
        headers: dict[str, str] = {}
        if options.content_md5 is not None:
            headers["Content-MD5"] = encode_base64(options.content_md5)
        if options.content_crc64 is not None:
            headers["x-ms-content-crc64"] = encode_base64(options.content_crc64)
        if options.access_tier is not None:
            headers["x-ms-access-tier"] = options.access_tier.value
        headers.update(blob_http_headers(options.headers))
        headers.update(metadata_headers(options.metadata))
        headers.update(condition_headers(conditions))
        headers.update(cpk_headers(options.cpk_info))
        response = await self._send(
            "commit_block_list",
            "PUT",
            blob_path(options.container_name, options.blob_name),
            params={"comp": "blocklist", **timeout_params(options.timeout)},
            headers=headers,
            body=BytesBody(encode_block_list(options.base64_block_ids or []), XML_CONTENT_TYPE),
            cancellation_token=options.cancellation_token,
        )
        return Response(
            response.status_code, response.headers, build_block_blob_item(response.headers)
        )

    async def _commit_block_list(
        self,
        container_name: str,
        blob_name: str,
        base64_block_ids: Sequence[str] | None,
        overwrite: bool,
    ) -> BlockBlobItem:
        options = commit_block_list_options(container_name, blob_name, base64_block_ids, overwrite)
        return (await self._commit_block_list_with_response(options)).value

    async def _delete_blob_with_response(self, options: BlobDeleteOptions) -> Response[None]:
        options = _require_options(options, BlobDeleteOptions)
        conditions = validate_request_conditions(options.request_conditions, "delete_blob")
        params = timeout_params(options.timeout)
        if options.snapshot is not None:
            params["snapshot"] = options.snapshot
        headers = condition_headers(conditions)
        if options.delete_snapshots is not None:
            headers["x-ms-delete-snapshots"] = options.delete_snapshots.value
        response = await self._send(
            "delete_blob",
            "DELETE",
            blob_path(options.container_name, options.blob_name),
            params=params,
            headers=headers,
            cancellation_token=options.cancellation_token,
        )
        return Response(response.status_code, response.headers, None)

    async def _get_blob_tags_with_response(
        self, options: BlobGetTagsOptions
    ) -> Response[dict[str, str]]:
        options = _require_options(options, BlobGetTagsOptions)
        conditions = validate_request_conditions(options.request_conditions, "get_blob_tags")
        params = {"comp": "tags", **timeout_params(options.timeout)}
        if options.snapshot is not None:
            params["snapshot"] = options.snapshot
        response = await self._send(
            "get_blob_tags",
            "GET",
            blob_path(options.container_name, options.blob_name),
            params=params,
            headers=condition_headers(conditions),
            cancellation_token=options.cancellation_token,
        )
        return Response(response.status_code, response.headers, decode_tags(response.content))

    async def _set_blob_tags_with_response(self, options: BlobSetTagsOptions) -> Response[None]:
        options = _require_options(options, BlobSetTagsOptions)
        conditions = validate_request_conditions(options.request_conditions, "set_blob_tags")
        response = await self._send(
            "set_blob_tags",
            "PUT",
            blob_path(options.container_name, options.blob_name),
            params={"comp": "tags", **timeout_params(options.timeout)},
            headers=condition_headers(conditions),
            body=BytesBody(encode_tags(options.tags), XML_CONTENT_TYPE),
            cancellation_token=options.cancellation_token,
        )
        return Response(response.status_code, response.headers, None)


def commit_block_list_options(
    container_name: str,
    blob_name: str,
    base64_block_ids: Sequence[str] | None,
    overwrite: bool,
) -> BlockBlobCommitBlockListOptions:
    """Options for a plain commit; ``overwrite=False`` refuses to replace an existing blob."""
    return BlockBlobCommitBlockListOptions(
        container_name,
        blob_name,
        base64_block_ids=list(base64_block_ids or []),
        request_conditions=overwrite_conditions(overwrite),
    )


# Builders


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Configuration a client was built from, kept so it can be cloned."""

    blob_service_url: str
    service_version: BlobServiceVersion
    interceptors: tuple[Interceptor, ...]
    credential_interceptor: Interceptor | None
    timeout: float | None


class BaseBuilder:
    """Mutable staging object shared by the sync and async client builders."""

    def __init__(self) -> None:
        self._blob_service_url: str | None = None
        self._service_version: BlobServiceVersion | None = None
        self._credential_interceptor: Interceptor | None = None
        self._interceptors: list[Interceptor] = []
        self._timeout: float | None = None
        self._http_client: Any = None

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        *,
        use_https: bool = True,
    ):
        """Start a builder from ``AZURE_STORAGE_ACCOUNT_NAME`` / ``AZURE_STORAGE_SAS_TOKEN``."""
        settings = get_storage_env(env)
        if not settings.account_name:
            raise InvalidArgumentError(
                "Missing storage account name. Set AZURE_STORAGE_ACCOUNT_NAME."
            )
        builder = cls()
        builder.set_blob_service_url(default_blob_service_url(settings.account_name, use_https))
        if settings.sas_token:
            builder.set_credential_interceptor(
                SasTokenCredentialInterceptor(SasTokenCredential(settings.sas_token))
            )
        return builder

    def _copy_from(self, config: ClientConfig, http_client: Any) -> None:
        self._blob_service_url = config.blob_service_url
        self._service_version = config.service_version
        self._credential_interceptor = config.credential_interceptor
        self._interceptors = list(config.interceptors)
        self._timeout = config.timeout
        self._http_client = http_client

    def set_blob_service_url(self, blob_service_url: str):
        if not blob_service_url:
            raise InvalidArgumentError("blob_service_url cannot be empty")
        self._blob_service_url = blob_service_url
        return self

    def set_service_version(self, service_version: BlobServiceVersion | None):
        self._service_version = service_version
        return self

    def set_credential_interceptor(self, credential_interceptor: Interceptor | None):
        self._credential_interceptor = credential_interceptor
        return self

    def add_interceptor(self, interceptor: Interceptor):
        if interceptor is None:
            raise InvalidArgumentError("interceptor cannot be None")
        self._interceptors.append(interceptor)
        return self

    def set_timeout(self, timeout: float | None):
        self._timeout = timeout
        return self

    def set_http_client(self, http_client: Any):
        """Use an existing httpx client; the built client will not close it."""
        self._http_client = http_client
        return self

    def _config(self) -> ClientConfig:
        if not self._blob_service_url:
            raise InvalidArgumentError("blob_service_url must be set before build()")
        return ClientConfig(
            blob_service_url=self._blob_service_url,
            service_version=self._service_version or BlobServiceVersion.latest(),
            interceptors=tuple(self._interceptors),
            credential_interceptor=self._credential_interceptor,
            timeout=self._timeout,
        )

    @staticmethod
    def _chain(config: ClientConfig) -> tuple[Interceptor, ...]:
        return build_chain(config.interceptors, config.credential_interceptor)


__all__ = [
    "BaseStorageBlobClient",
    "BaseBuilder",
    "ClientConfig",
    "build_list_params",
    "commit_block_list_options",
    "map_service_error",
]
