"""Blocking blob service client."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence

import httpx

from ._core import BaseBuilder, BaseStorageBlobClient, ClientConfig, commit_block_list_options
from ._http import BlockingTransport, create_base_client, iter_coroutine
from .models import (
    AccessTier,
    BlobGetPropertiesHeaders,
    BlobHttpHeaders,
    BlobItem,
    BlobsPage,
    BlockBlobItem,
    BlobDownloadResult,
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


class StorageBlobClient(BaseStorageBlobClient):
    """Synchronous client for one blob service endpoint.

    Build instances with ``StorageBlobClient.Builder``. Every method makes at
    most one HTTP call; invalid arguments and unsupported request conditions
    are rejected before anything is sent.

    Example:
        >>> client = (
        ...     StorageBlobClient.Builder()
        ...     .set_blob_service_url("https://account.blob.core.windows.net")
        ...     .build()
        ... )
        >>> client.create_container("photos")
    """

    Builder: type[StorageBlobClientBuilder]

    def __init__(
        self,
        transport: BlockingTransport,
        config: ClientConfig,
    ):
        super().__init__(transport, config.service_version)
        self._transport: BlockingTransport = transport
        self._config = config

    def new_builder(self) -> StorageBlobClientBuilder:
        """Builder pre-populated from this client; clones share its httpx client."""
        builder = StorageBlobClientBuilder()
        builder._copy_from(self._config, self._transport.client)
        return builder

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> StorageBlobClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # Containers

    def create_container(self, container_name: str) -> None:
        self.create_container_with_response(ContainerCreateOptions(container_name))

    def create_container_with_response(self, options: ContainerCreateOptions) -> Response[None]:
        return iter_coroutine(self._create_container_with_response(options))

    def delete_container(self, container_name: str) -> None:
        self.delete_container_with_response(ContainerDeleteOptions(container_name))

    def delete_container_with_response(self, options: ContainerDeleteOptions) -> Response[None]:
        return iter_coroutine(self._delete_container_with_response(options))

    def get_container_properties(self, container_name: str) -> ContainerGetPropertiesHeaders:
        options = ContainerGetPropertiesOptions(container_name)
        return self.get_container_properties_with_response(options).value

    def get_container_properties_with_response(
        self, options: ContainerGetPropertiesOptions
    ) -> Response[ContainerGetPropertiesHeaders]:
        return iter_coroutine(self._get_container_properties_with_response(options))

    # Listing

    def get_blobs_in_page(
        self,
        page_id: str | None,
        container_name: str,
        options: ListBlobsOptions | None = None,
    ) -> BlobsPage:
        return self.get_blobs_in_page_with_response(page_id, container_name, options).value

    def get_blobs_in_page_with_response(
        self,
        page_id: str | None,
        container_name: str,
        options: ListBlobsOptions | None = None,
    ) -> Response[BlobsPage]:
        return iter_coroutine(
            self._get_blobs_in_page_with_response(page_id, container_name, options)
        )

    def iter_blobs(
        self,
        container_name: str,
        options: ListBlobsOptions | None = None,
    ) -> Iterator[BlobItem]:
        """Yield every blob in the container, fetching pages lazily."""
        page_id: str | None = None
        while True:
            page = self.get_blobs_in_page(page_id, container_name, options)
            yield from page.items
            if not page.has_more:
                return
            page_id = page.next_page_id

    # Blobs

    def get_blob_properties(
        self, container_name: str, blob_name: str
    ) -> BlobGetPropertiesHeaders:
        options = BlobGetPropertiesOptions(container_name, blob_name)
        return self.get_blob_properties_with_response(options).value

    def get_blob_properties_with_response(
        self, options: BlobGetPropertiesOptions
    ) -> Response[BlobGetPropertiesHeaders]:
        return iter_coroutine(self._get_blob_properties_with_response(options))

    def set_blob_http_headers(
        self, container_name: str, blob_name: str, headers: BlobHttpHeaders | None
    ) -> None:
        options = BlobSetHttpHeadersOptions(container_name, blob_name, headers=headers)
        self.set_blob_http_headers_with_response(options)

    def set_blob_http_headers_with_response(
        self, options: BlobSetHttpHeadersOptions
    ) -> Response[None]:
        return iter_coroutine(self._set_blob_http_headers_with_response(options))

    def set_blob_metadata(
        self, container_name: str, blob_name: str, metadata: Mapping[str, str] | None
    ) -> None:
        options = BlobSetMetadataOptions(container_name, blob_name, metadata=metadata)
        self.set_blob_metadata_with_response(options)

    def set_blob_metadata_with_response(self, options: BlobSetMetadataOptions) -> Response[None]:
        return iter_coroutine(self._set_blob_metadata_with_response(options))

    def set_blob_access_tier(
        self, container_name: str, blob_name: str, access_tier: AccessTier
    ) -> None:
        self.set_blob_access_tier_with_response(
            BlobSetAccessTierOptions(container_name, blob_name, access_tier)
        )

    def set_blob_access_tier_with_response(
        self, options: BlobSetAccessTierOptions
    ) -> Response[None]:
        return iter_coroutine(self._set_blob_access_tier_with_response(options))

    def raw_download(self, container_name: str, blob_name: str) -> bytes:
        options = BlobRawDownloadOptions(container_name, blob_name)
        return self.raw_download_with_response(options).value.content

    def raw_download_with_response(
        self, options: BlobRawDownloadOptions
    ) -> Response[BlobDownloadResult]:
        return iter_coroutine(self._raw_download_with_response(options))

    def stage_block(
        self,
        container_name: str,
        blob_name: str,
        base64_block_id: str,
        data: bytes,
        content_md5: bytes | None = None,
    ) -> None:
        options = BlockBlobStageBlockOptions(
            container_name, blob_name, base64_block_id, data, content_md5=content_md5
        )
        self.stage_block_with_response(options)

    def stage_block_with_response(self, options: BlockBlobStageBlockOptions) -> Response[None]:
        return iter_coroutine(self._stage_block_with_response(options))

    def commit_block_list(
        self,
        container_name: str,
        blob_name: str,
        base64_block_ids: Sequence[str] | None,
        overwrite: bool = False,
    ) -> BlockBlobItem:
        """Commit staged blocks as the blob's content.

        With ``overwrite=False`` the commit fails with a 412
        ``BlobServiceError`` if the blob already exists.
        """
        options = commit_block_list_options(container_name, blob_name, base64_block_ids, overwrite)
        return self.commit_block_list_with_response(options).value

    def commit_block_list_with_response(
        self, options: BlockBlobCommitBlockListOptions
    ) -> Response[BlockBlobItem]:
        return iter_coroutine(self._commit_block_list_with_response(options))

    def delete_blob(self, container_name: str, blob_name: str) -> None:
        self.delete_blob_with_response(BlobDeleteOptions(container_name, blob_name))

    def delete_blob_with_response(self, options: BlobDeleteOptions) -> Response[None]:
        return iter_coroutine(self._delete_blob_with_response(options))

    def get_blob_tags(self, container_name: str, blob_name: str) -> dict[str, str]:
        return self.get_blob_tags_with_response(BlobGetTagsOptions(container_name, blob_name)).value

    def get_blob_tags_with_response(self, options: BlobGetTagsOptions) -> Response[dict[str, str]]:
        return iter_coroutine(self._get_blob_tags_with_response(options))

    def set_blob_tags(
        self, container_name: str, blob_name: str, tags: Mapping[str, str] | None
    ) -> None:
        self.set_blob_tags_with_response(BlobSetTagsOptions(container_name, blob_name, tags=tags))

    def set_blob_tags_with_response(self, options: BlobSetTagsOptions) -> Response[None]:
        return iter_coroutine(self._set_blob_tags_with_response(options))


class StorageBlobClientBuilder(BaseBuilder):
    """Fluent builder for ``StorageBlobClient``."""

    def build(self) -> StorageBlobClient:
        config = self._config()
        http_client: httpx.Client | None = self._http_client
        owns_client = http_client is None
        if http_client is None:
            http_client = create_base_client(config.timeout)
        transport = BlockingTransport(
            http_client,
            config.blob_service_url,
            self._chain(config),
            owns_client=owns_client,
        )
        return StorageBlobClient(transport, config)


StorageBlobClient.Builder = StorageBlobClientBuilder


__all__ = ["StorageBlobClient", "StorageBlobClientBuilder"]
