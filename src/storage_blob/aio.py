"""Async blob service client.

Same operations as ``StorageBlobClient``, as coroutines over
``httpx.AsyncClient``.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping, Sequence

import httpx

from ._core import BaseBuilder, BaseStorageBlobClient, ClientConfig, commit_block_list_options
from ._http import AsyncTransport, create_base_async_client
from .models import (
    AccessTier,
    BlobDownloadResult,
    BlobGetPropertiesHeaders,
    BlobHttpHeaders,
    BlobItem,
    BlobsPage,
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


class AsyncStorageBlobClient(BaseStorageBlobClient):
    Builder: type[AsyncStorageBlobClientBuilder]

    def __init__(
        self,
        transport: AsyncTransport,
        config: ClientConfig,
    ):
        super().__init__(transport, config.service_version)
        self._transport: AsyncTransport = transport
        self._config = config

    def new_builder(self) -> AsyncStorageBlobClientBuilder:
        builder = AsyncStorageBlobClientBuilder()
        builder._copy_from(self._config, self._transport.client)
        return builder

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> AsyncStorageBlobClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    # Containers

    async def create_container(self, container_name: str) -> None:
        await self.create_container_with_response(ContainerCreateOptions(container_name))

    async def create_container_with_response(
        self, options: ContainerCreateOptions
    ) -> Response[None]:
        return await self._create_container_with_response(options)

    async def delete_container(self, container_name: str) -> None:
        await self.delete_container_with_response(ContainerDeleteOptions(container_name))

    async def delete_container_with_response(
        self, options: ContainerDeleteOptions
    ) -> Response[None]:
        return await self._delete_container_with_response(options)

    async def get_container_properties(
        self, container_name: str
    ) -> ContainerGetPropertiesHeaders:
        options = ContainerGetPropertiesOptions(container_name)
        return (await self.get_container_properties_with_response(options)).value

    async def get_container_properties_with_response(
        self, options: ContainerGetPropertiesOptions
    ) -> Response[ContainerGetPropertiesHeaders]:
        return await self._get_container_properties_with_response(options)

    # Listing

    async def get_blobs_in_page(
        self,
        page_id: str | None,
        container_name: str,
        options: ListBlobsOptions | None = None,
    ) -> BlobsPage:
        response = await self.get_blobs_in_page_with_response(page_id, container_name, options)
        return response.value

    async def get_blobs_in_page_with_response(
        self,
        page_id: str | None,
        container_name: str,
        options: ListBlobsOptions | None = None,
    ) -> Response[BlobsPage]:
        return await self._get_blobs_in_page_with_response(page_id, container_name, options)

    async def iter_blobs(
        self,
        container_name: str,
        options: ListBlobsOptions | None = None,
    ) -> AsyncIterator[BlobItem]:
        page_id: str | None = None
        while True:
            page = await self.get_blobs_in_page(page_id, container_name, options)
            for item in page.items:
                yield item
            if not page.has_more:
                return
            page_id = page.next_page_id

    # Blobs

    async def get_blob_properties(
        self, container_name: str, blob_name: str
    ) -> BlobGetPropertiesHeaders:
        options = BlobGetPropertiesOptions(container_name, blob_name)
        return (await self.get_blob_properties_with_response(options)).value

    async def get_blob_properties_with_response(
        self, options: BlobGetPropertiesOptions
    ) -> Response[BlobGetPropertiesHeaders]:
        return await self._get_blob_properties_with_response(options)

    async def set_blob_http_headers(
        self, container_name: str, blob_name: str, headers: BlobHttpHeaders | None
    ) -> None:
        options = BlobSetHttpHeadersOptions(container_name, blob_name, headers=headers)
        await self.set_blob_http_headers_with_response(options)

    async def set_blob_http_headers_with_response(
        self, options: BlobSetHttpHeadersOptions
    ) -> Response[None]:
        return await self._set_blob_http_headers_with_response(options)

    async def set_blob_metadata(
        self, container_name: str, blob_name: str, metadata: Mapping[str, str] | None
    ) -> None:
        options = BlobSetMetadataOptions(container_name, blob_name, metadata=metadata)
        await self.set_blob_metadata_with_response(options)

    async def set_blob_metadata_with_response(
        self, options: BlobSetMetadataOptions
    ) -> Response[None]:
        return await self._set_blob_metadata_with_response(options)

    async def set_blob_access_tier(
        self, container_name: str, blob_name: str, access_tier: AccessTier
    ) -> None:
        await self.set_blob_access_tier_with_response(
            BlobSetAccessTierOptions(container_name, blob_name, access_tier)
        )

    async def set_blob_access_tier_with_response(
        self, options: BlobSetAccessTierOptions
    ) -> Response[None]:
        return await self._set_blob_access_tier_with_response(options)

    async def raw_download(self, container_name: str, blob_name: str) -> bytes:
        options = BlobRawDownloadOptions(container_name, blob_name)
        return (await self.raw_download_with_response(options)).value.content

    async def raw_download_with_response(
        self, options: BlobRawDownloadOptions
    ) -> Response[BlobDownloadResult]:
        return await self._raw_download_with_response(options)

    async def stage_block(
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
        await self.stage_block_with_response(options)

    async def stage_block_with_response(
        self, options: BlockBlobStageBlockOptions
    ) -> Response[None]:
        return await self._stage_block_with_response(options)

    async def commit_block_list(
        self,
        container_name: str,
        blob_name: str,
        base64_block_ids: Sequence[str] | None,
        overwrite: bool = False,
    ) -> BlockBlobItem:
        options = commit_block_list_options(container_name, blob_name, base64_block_ids, overwrite)
        return (await self.commit_block_list_with_response(options)).value

    async def commit_block_list_with_response(
        self, options: BlockBlobCommitBlockListOptions
    ) -> Response[BlockBlobItem]:
        return await self._commit_block_list_with_response(options)

    async def delete_blob(self, container_name: str, blob_name: str) -> None:
        await self.delete_blob_with_response(BlobDeleteOptions(container_name, blob_name))

    async def delete_blob_with_response(self, options: BlobDeleteOptions) -> Response[None]:
        return await self._delete_blob_with_response(options)

    async def get_blob_tags(self, container_name: str, blob_name: str) -> dict[str, str]:
        options = BlobGetTagsOptions(container_name, blob_name)
        return (await self.get_blob_tags_with_response(options)).value

    async def get_blob_tags_with_response(
        self, options: BlobGetTagsOptions
    ) -> Response[dict[str, str]]:
        return await self._get_blob_tags_with_response(options)

    async def set_blob_tags(
        self, container_name: str, blob_name: str, tags: Mapping[str, str] | None
    ) -> None:
        await self.set_blob_tags_with_response(
            BlobSetTagsOptions(container_name, blob_name, tags=tags)
        )

    async def set_blob_tags_with_response(self, options: BlobSetTagsOptions) -> Response[None]:
        return await self._set_blob_tags_with_response(options)


class AsyncStorageBlobClientBuilder(BaseBuilder):
    def build(self) -> AsyncStorageBlobClient:
        config = self._config()
        http_client: httpx.AsyncClient | None = self._http_client
        owns_client = http_client is None
        if http_client is None:
            http_client = create_base_async_client(config.timeout)
        transport = AsyncTransport(
            http_client,
            config.blob_service_url,
            self._chain(config),
            owns_client=owns_client,
        )
        return AsyncStorageBlobClient(transport, config)


AsyncStorageBlobClient.Builder = AsyncStorageBlobClientBuilder


__all__ = ["AsyncStorageBlobClient", "AsyncStorageBlobClientBuilder"]
