"""Per-operation parameter bundles.

Every options record is immutable. Required fields are checked when the
record is built, so a missing container or blob name fails before any call
is attempted. Optional fields left as ``None`` are defaulted when the
operation runs: no ``timeout`` query parameter is sent, an empty
``BlobRequestConditions`` applies, and ``CancellationToken.NONE`` is used.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from .cancellation import CancellationToken
from .errors import InvalidArgumentError
from .models import (
    AccessTier,
    BlobHttpHeaders,
    BlobRange,
    BlobRequestConditions,
    CpkInfo,
    DeleteSnapshotsOptionType,
    ListBlobsIncludeItem,
    PublicAccessType,
    RehydratePriority,
)


def _require(value: Any, name: str) -> None:
    if value is None:
        raise InvalidArgumentError(f"{name} is required")
    if isinstance(value, str) and not value:
        raise InvalidArgumentError(f"{name} cannot be empty")


def _require_names(container_name: str, blob_name: str | None = None, *, blob: bool = False) -> None:
    _require(container_name, "container_name")
    if blob:
        _require(blob_name, "blob_name")


E = TypeVar("E", bound=Enum)


def _as_enum(value: Any, enum: type[E], name: str) -> E:
    if isinstance(value, enum):
        return value
    try:
        return enum(value)
    except ValueError as exc:
        raise InvalidArgumentError(f"{name} has an unsupported value: {value!r}") from exc


def _coerce(options: Any, name: str, enum: type[Enum]) -> None:
    value = getattr(options, name)
    if value is not None:
        object.__setattr__(options, name, _as_enum(value, enum, name))


def _require_timeout(timeout: int | None) -> None:
    if timeout is not None and timeout <= 0:
        raise InvalidArgumentError("timeout must be a positive number of seconds")


@dataclass(frozen=True, slots=True)
class ContainerCreateOptions:
    container_name: str
    metadata: Mapping[str, str] | None = None
    public_access_type: PublicAccessType | None = None
    timeout: int | None = None
    cancellation_token: CancellationToken | None = None

    def __post_init__(self) -> None:
        _require_names(self.container_name)
        _coerce(self, "public_access_type", PublicAccessType)
        _require_timeout(self.timeout)


@dataclass(frozen=True, slots=True)
class ContainerDeleteOptions:
    container_name: str
    request_conditions: BlobRequestConditions | None = None
    timeout: int | None = None
    cancellation_token: CancellationToken | None = None

    def __post_init__(self) -> None:
        _require_names(self.container_name)
        _require_timeout(self.timeout)


@dataclass(frozen=True, slots=True)
class ContainerGetPropertiesOptions:
    container_name: str
    request_conditions: BlobRequestConditions | None = None
    timeout: int | None = None
    cancellation_token: CancellationToken | None = None

    def __post_init__(self) -> None:
        _require_names(self.container_name)
        _require_timeout(self.timeout)


@dataclass(frozen=True, slots=True)
class ListBlobsOptions:
    """Listing filters shared by every page of one listing."""

    prefix: str | None = None
    max_results: int | None = None
    details: Sequence[ListBlobsIncludeItem] = ()
    timeout: int | None = None
    cancellation_token: CancellationToken | None = None

    def __post_init__(self) -> None:
        if self.max_results is not None and self.max_results <= 0:
            raise InvalidArgumentError("max_results must be greater than 0")
        object.__setattr__(
            self,
            "details",
            tuple(_as_enum(item, ListBlobsIncludeItem, "details") for item in self.details),
        )
        _require_timeout(self.timeout)


@dataclass(frozen=True, slots=True)
class BlobGetPropertiesOptions:
    container_name: str
    blob_name: str
    snapshot: str | None = None
    request_conditions: BlobRequestConditions | None = None
    cpk_info: CpkInfo | None = None
    timeout: int | None = None
    cancellation_token: CancellationToken | None = None

    def __post_init__(self) -> None:
        _require_names(self.container_name, self.blob_name, blob=True)
        _require_timeout(self.timeout)


@dataclass(frozen=True, slots=True)
class BlobSetHttpHeadersOptions:
    container_name: str
    blob_name: str
    headers: BlobHttpHeaders | None = None
    request_conditions: BlobRequestConditions | None = None
    timeout: int | None = None
    cancellation_token: CancellationToken | None = None

    def __post_init__(self) -> None:
        _require_names(self.container_name, self.blob_name, blob=True)
        _require_timeout(self.timeout)


@dataclass(frozen=True, slots=True)
class BlobSetMetadataOptions:
    container_name: str
    blob_name: str
    metadata: Mapping[str, str] | None = None
    request_conditions: BlobRequestConditions | None = None
    cpk_info: CpkInfo | None = None
    timeout: int | None = None
    cancellation_token: CancellationToken | None = None

    def __post_init__(self) -> None:
        _require_names(self.container_name, self.blob_name, blob=True)
        _require_timeout(self.timeout)


@dataclass(frozen=True, slots=True)
class BlobSetAccessTierOptions:
    container_name: str
    blob_name: str
    access_tier: AccessTier
    snapshot: str | None = None
    rehydrate_priority: RehydratePriority | None = None
    request_conditions: BlobRequestConditions | None = None
    timeout: int | None = None
    cancellation_token: CancellationToken | None = None

    def __post_init__(self) -> None:
        _require_names(self.container_name, self.blob_name, blob=True)
        _require(self.access_tier, "access_tier")
        _coerce(self, "access_tier", AccessTier)
        _coerce(self, "rehydrate_priority", RehydratePriority)
        _require_timeout(self.timeout)


@dataclass(frozen=True, slots=True)
class BlobRawDownloadOptions:
    container_name: str
    blob_name: str
    range: BlobRange | None = None
    snapshot: str | None = None
    retrieve_content_range_md5: bool = False
    retrieve_content_range_crc64: bool = False
    request_conditions: BlobRequestConditions | None = None
    cpk_info: CpkInfo | None = None
    timeout: int | None = None
    cancellation_token: CancellationToken | None = None

    def __post_init__(self) -> None:
        _require_names(self.container_name, self.blob_name, blob=True)
        if self.retrieve_content_range_md5 and self.retrieve_content_range_crc64:
            raise InvalidArgumentError(
                "retrieve_content_range_md5 and retrieve_content_range_crc64 cannot both be set"
            )
        _require_timeout(self.timeout)


@dataclass(frozen=True, slots=True)
class BlockBlobStageBlockOptions:
    container_name: str
    blob_name: str
    base64_block_id: str
    data: bytes
    content_md5: bytes | None = None
    content_crc64: bytes | None = None
    compute_md5: bool = False
    request_conditions: BlobRequestConditions | None = None
    cpk_info: CpkInfo | None = None
    timeout: int | None = None
    cancellation_token: CancellationToken | None = None

    def __post_init__(self) -> None:
        _require_names(self.container_name, self.blob_name, blob=True)
        _require(self.base64_block_id, "base64_block_id")
        _require(self.data, "data")
        if self.compute_md5 and self.content_md5 is not None:
            raise InvalidArgumentError("content_md5 cannot be set when compute_md5 is enabled")
        _require_timeout(self.timeout)


@dataclass(frozen=True, slots=True)
class BlockBlobCommitBlockListOptions:
    container_name: str
    blob_name: str
    base64_block_ids: Sequence[str] | None = None
    content_md5: bytes | None = None
    content_crc64: bytes | None = None
    headers: BlobHttpHeaders | None = None
    metadata: Mapping[str, str] | None = None
    request_conditions: BlobRequestConditions | None = None
    cpk_info: CpkInfo | None = None
    access_tier: AccessTier | None = None
    timeout: int | None = None
    cancellation_token: CancellationToken | None = None

    def __post_init__(self) -> None:
        _require_names(self.container_name, self.blob_name, blob=True)
        _coerce(self, "access_tier", AccessTier)
        _require_timeout(self.timeout)


@dataclass(frozen=True, slots=True)
class BlobDeleteOptions:
    container_name: str
    blob_name: str
    snapshot: str | None = None
    delete_snapshots: DeleteSnapshotsOptionType | None = None
    request_conditions: BlobRequestConditions | None = None
    timeout: int | None = None
    cancellation_token: CancellationToken | None = None

    def __post_init__(self) -> None:
        _require_names(self.container_name, self.blob_name, blob=True)
        if self.snapshot is not None and self.delete_snapshots is not None:
            raise InvalidArgumentError("delete_snapshots cannot be set when deleting a snapshot")
        _coerce(self, "delete_snapshots", DeleteSnapshotsOptionType)
        _require_timeout(self.timeout)


@dataclass(frozen=True, slots=True)
class BlobGetTagsOptions:
    container_name: str
    blob_name: str
    snapshot: str | None = None
    request_conditions: BlobRequestConditions | None = None
    timeout: int | None = None
    cancellation_token: CancellationToken | None = None

    def __post_init__(self) -> None:
        _require_names(self.container_name, self.blob_name, blob=True)
        _require_timeout(self.timeout)


@dataclass(frozen=True, slots=True)
class BlobSetTagsOptions:
    container_name: str
    blob_name: str
    tags: Mapping[str, str] | None = None
    request_conditions: BlobRequestConditions | None = None
    timeout: int | None = None
    cancellation_token: CancellationToken | None = None

    def __post_init__(self) -> None:
        _require_names(self.container_name, self.blob_name, blob=True)
        _require_timeout(self.timeout)


__all__ = [
    "ContainerCreateOptions",
    "ContainerDeleteOptions",
    "ContainerGetPropertiesOptions",
    "ListBlobsOptions",
    "BlobGetPropertiesOptions",
    "BlobSetHttpHeadersOptions",
    "BlobSetMetadataOptions",
    "BlobSetAccessTierOptions",
    "BlobRawDownloadOptions",
    "BlockBlobStageBlockOptions",
    "BlockBlobCommitBlockListOptions",
    "BlobDeleteOptions",
    "BlobGetTagsOptions",
    "BlobSetTagsOptions",
]
