from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import InvalidArgumentError

T = TypeVar("T")


class BlobServiceVersion(str, Enum):
    V2019_02_02 = "2019-02-02"
    V2019_07_07 = "2019-07-07"
    V2019_12_12 = "2019-12-12"

    @classmethod
    def latest(cls) -> BlobServiceVersion:
        return cls.V2019_12_12


class _ExpandableStrEnum(str, Enum):
    """A string enum that also accepts values the service introduces later.

    Unknown values become pseudo-members, so ``AccessTier("Cold")`` compares
    equal to ``"Cold"`` instead of failing the whole response.
    """

    @classmethod
    def _missing_(cls, value: object) -> Any:
        if not isinstance(value, str) or not value:
            return None
        member = str.__new__(cls, value)
        member._name_ = value.upper().replace("-", "_")
        member._value_ = value
        return member


class AccessTier(_ExpandableStrEnum):
    P4 = "P4"
    P6 = "P6"
    P10 = "P10"
    P15 = "P15"
    P20 = "P20"
    P30 = "P30"
    P40 = "P40"
    P50 = "P50"
    P60 = "P60"
    P70 = "P70"
    P80 = "P80"
    HOT = "Hot"
    COOL = "Cool"
    ARCHIVE = "Archive"


class RehydratePriority(_ExpandableStrEnum):
    HIGH = "High"
    STANDARD = "Standard"


class PublicAccessType(_ExpandableStrEnum):
    CONTAINER = "container"
    BLOB = "blob"


class DeleteSnapshotsOptionType(str, Enum):
    INCLUDE = "include"
    ONLY = "only"


class ListBlobsIncludeItem(str, Enum):
    COPY = "copy"
    DELETED = "deleted"
    METADATA = "metadata"
    SNAPSHOTS = "snapshots"
    UNCOMMITTEDBLOBS = "uncommittedblobs"
    VERSIONS = "versions"
    TAGS = "tags"


class BlobType(_ExpandableStrEnum):
    BLOCK_BLOB = "BlockBlob"
    PAGE_BLOB = "PageBlob"
    APPEND_BLOB = "AppendBlob"


class LeaseStatus(_ExpandableStrEnum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"


class LeaseState(_ExpandableStrEnum):
    AVAILABLE = "available"
    LEASED = "leased"
    EXPIRED = "expired"
    BREAKING = "breaking"
    BROKEN = "broken"


class LeaseDuration(_ExpandableStrEnum):
    INFINITE = "infinite"
    FIXED = "fixed"


class ArchiveStatus(_ExpandableStrEnum):
    REHYDRATE_PENDING_TO_HOT = "rehydrate-pending-to-hot"
    REHYDRATE_PENDING_TO_COOL = "rehydrate-pending-to-cool"


# Request-side value records


@dataclass(frozen=True, slots=True)
class BlobRequestConditions:
    """Conditions a request must satisfy on the service to succeed.

    Which of these fields an operation accepts is checked before the request
    is sent; see ``storage_blob._validation``.
    """

    if_match: str | None = None
    if_none_match: str | None = None
    if_modified_since: datetime | None = None
    if_unmodified_since: datetime | None = None
    lease_id: str | None = None
    tags_conditions: str | None = None


@dataclass(frozen=True, slots=True)
class BlobHttpHeaders:
    cache_control: str | None = None
    content_type: str | None = None
    content_md5: bytes | None = None
    content_encoding: str | None = None
    content_language: str | None = None
    content_disposition: str | None = None


@dataclass(frozen=True, slots=True)
class BlobRange:
    """A byte range of a blob; ``count=None`` reads to the end."""

    offset: int = 0
    count: int | None = None

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise InvalidArgumentError("BlobRange offset must be greater than or equal to 0")
        if self.count is not None and self.count <= 0:
            raise InvalidArgumentError("BlobRange count must be greater than 0")

    def to_header_value(self) -> str:
        if self.count is None:
            return f"bytes={self.offset}-"
        return f"bytes={self.offset}-{self.offset + self.count - 1}"


@dataclass(frozen=True, slots=True)
class CpkInfo:
    """Customer-provided encryption key for a request."""

    encryption_key: str
    encryption_key_sha256: str
    encryption_algorithm: str = "AES256"


# Wire models decoded from XML bodies


def _strip_quotes(value: str | None) -> str | None:
    if value is None:
        return None
    return value.replace('"', "")


def _parse_http_date(value: Any) -> Any:
    if isinstance(value, str) and value:
        return parsedate_to_datetime(value)
    return value or None


class BlobItemProperties(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    creation_time: datetime | None = Field(default=None, alias="Creation-Time")
    last_modified: datetime | None = Field(default=None, alias="Last-Modified")
    etag: str | None = Field(default=None, alias="Etag")
    content_length: int | None = Field(default=None, alias="Content-Length")
    content_type: str | None = Field(default=None, alias="Content-Type")
    content_encoding: str | None = Field(default=None, alias="Content-Encoding")
    content_language: str | None = Field(default=None, alias="Content-Language")
    content_md5: str | None = Field(default=None, alias="Content-MD5")
    content_disposition: str | None = Field(default=None, alias="Content-Disposition")
    cache_control: str | None = Field(default=None, alias="Cache-Control")
    blob_type: BlobType | None = Field(default=None, alias="BlobType")
    access_tier: AccessTier | None = Field(default=None, alias="AccessTier")
    access_tier_inferred: bool | None = Field(default=None, alias="AccessTierInferred")
    archive_status: ArchiveStatus | None = Field(default=None, alias="ArchiveStatus")
    lease_status: LeaseStatus | None = Field(default=None, alias="LeaseStatus")
    lease_state: LeaseState | None = Field(default=None, alias="LeaseState")
    lease_duration: LeaseDuration | None = Field(default=None, alias="LeaseDuration")
    server_encrypted: bool | None = Field(default=None, alias="ServerEncrypted")
    tag_count: int | None = Field(default=None, alias="TagCount")

    @field_validator("creation_time", "last_modified", mode="before")
    @classmethod
    def _http_date(cls, value: Any) -> Any:
        return _parse_http_date(value)

    @field_validator("etag")
    @classmethod
    def _unquote_etag(cls, value: str | None) -> str | None:
        return _strip_quotes(value)


class BlobItem(BaseModel):
    """One ``<Blob>`` entry of a listing."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(alias="Name", min_length=1)
    deleted: bool = Field(default=False, alias="Deleted")
    snapshot: str | None = Field(default=None, alias="Snapshot")
    version_id: str | None = Field(default=None, alias="VersionId")
    is_current_version: bool | None = Field(default=None, alias="IsCurrentVersion")
    properties: BlobItemProperties = Field(default_factory=BlobItemProperties, alias="Properties")
    metadata: dict[str, str] = Field(default_factory=dict, alias="Metadata")
    tags: dict[str, str] = Field(default_factory=dict, alias="Tags")


class BlobFlatListSegment(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    blob_items: list[BlobItem] = Field(default_factory=list, alias="Blob")

    @field_validator("blob_items", mode="before")
    @classmethod
    def _default_items(cls, value: Any) -> Any:
        return [] if value is None else value


class ListBlobsFlatSegmentResponse(BaseModel):
    """The ``<EnumerationResults>`` envelope of a flat blob listing."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    service_endpoint: str | None = Field(default=None, alias="ServiceEndpoint")
    container_name: str | None = Field(default=None, alias="ContainerName")
    prefix: str | None = Field(default=None, alias="Prefix")
    marker: str | None = Field(default=None, alias="Marker")
    max_results: int | None = Field(default=None, alias="MaxResults")
    segment: BlobFlatListSegment | None = Field(default=None, alias="Blobs")
    next_marker: str | None = Field(default=None, alias="NextMarker")

    @property
    def blob_items(self) -> list[BlobItem]:
        if self.segment is None:
            return []
        return list(self.segment.blob_items)


# Response-side records built from headers


@dataclass(slots=True)
class ContainerGetPropertiesHeaders:
    etag: str | None = None
    last_modified: datetime | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    lease_duration: LeaseDuration | None = None
    lease_state: LeaseState | None = None
    lease_status: LeaseStatus | None = None
    public_access: PublicAccessType | None = None
    has_immutability_policy: bool | None = None
    has_legal_hold: bool | None = None
    request_id: str | None = None
    version: str | None = None
    date: datetime | None = None


@dataclass(slots=True)
class BlobGetPropertiesHeaders:
    etag: str | None = None
    last_modified: datetime | None = None
    creation_time: datetime | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    blob_type: BlobType | None = None
    content_length: int | None = None
    content_type: str | None = None
    content_md5: bytes | None = None
    content_encoding: str | None = None
    content_disposition: str | None = None
    content_language: str | None = None
    cache_control: str | None = None
    lease_duration: LeaseDuration | None = None
    lease_state: LeaseState | None = None
    lease_status: LeaseStatus | None = None
    access_tier: AccessTier | None = None
    access_tier_inferred: bool | None = None
    archive_status: ArchiveStatus | None = None
    server_encrypted: bool | None = None
    tag_count: int | None = None
    version_id: str | None = None
    request_id: str | None = None
    version: str | None = None
    date: datetime | None = None


@dataclass(slots=True)
class BlobDownloadHeaders:
    etag: str | None = None
    last_modified: datetime | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    blob_type: BlobType | None = None
    content_length: int | None = None
    content_type: str | None = None
    content_range: str | None = None
    content_md5: bytes | None = None
    content_encoding: str | None = None
    content_disposition: str | None = None
    content_language: str | None = None
    cache_control: str | None = None
    server_encrypted: bool | None = None
    tag_count: int | None = None
    request_id: str | None = None
    version: str | None = None
    date: datetime | None = None


@dataclass(slots=True)
class BlobDownloadResult:
    content: bytes
    headers: BlobDownloadHeaders


@dataclass(slots=True)
class BlockBlobItem:
    """Properties of a block blob after a commit."""

    etag: str | None = None
    last_modified: datetime | None = None
    content_md5: bytes | None = None
    is_server_encrypted: bool | None = None
    encryption_key_sha256: str | None = None
    version_id: str | None = None


# Envelopes


@dataclass(slots=True)
class BlobsPage:
    """One page of a blob listing.

    ``next_page_id`` is ``None`` once the listing is exhausted; an empty
    marker from the service is treated the same as a missing one.
    """

    items: list[BlobItem]
    page_id: str | None
    next_page_id: str | None = None

    def __post_init__(self) -> None:
        if self.items is None:
            self.items = []
        if not self.next_page_id:
            self.next_page_id = None

    @property
    def has_more(self) -> bool:
        return self.next_page_id is not None


@dataclass(slots=True)
class Response(Generic[T]):
    status_code: int
    headers: Mapping[str, str]
    value: T

    @property
    def request_id(self) -> str | None:
        return self.headers.get("x-ms-request-id")


__all__ = [
    "BlobServiceVersion",
    "AccessTier",
    "RehydratePriority",
    "PublicAccessType",
    "DeleteSnapshotsOptionType",
    "ListBlobsIncludeItem",
    "BlobType",
    "LeaseStatus",
    "LeaseState",
    "LeaseDuration",
    "ArchiveStatus",
    "BlobRequestConditions",
    "BlobHttpHeaders",
    "BlobRange",
    "CpkInfo",
    "BlobItemProperties",
    "BlobItem",
    "BlobFlatListSegment",
    "ListBlobsFlatSegmentResponse",
    "ContainerGetPropertiesHeaders",
    "BlobGetPropertiesHeaders",
    "BlobDownloadHeaders",
    "BlobDownloadResult",
    "BlockBlobItem",
    "BlobsPage",
    "Response",
]
