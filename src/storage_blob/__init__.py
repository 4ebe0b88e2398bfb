from .errors import (
    BlobError,
    InvalidArgumentError,
    UnsupportedRequestConditionError,
    OperationCancelledError,
    BlobServiceError,
    BlobTransportError,
    DeserializationError,
)
from .cancellation import CancellationToken
from .models import (
    BlobServiceVersion,
    AccessTier,
    RehydratePriority,
    PublicAccessType,
    DeleteSnapshotsOptionType,
    ListBlobsIncludeItem,
    BlobType,
    LeaseStatus,
    LeaseState,
    LeaseDuration,
    ArchiveStatus,
    BlobRequestConditions,
    BlobHttpHeaders,
    BlobRange,
    CpkInfo,
    BlobItemProperties,
    BlobItem,
    ListBlobsFlatSegmentResponse,
    ContainerGetPropertiesHeaders,
    BlobGetPropertiesHeaders,
    BlobDownloadHeaders,
    BlobDownloadResult,
    BlockBlobItem,
    BlobsPage,
    Response,
)
from .options import (
    ContainerCreateOptions,
    ContainerDeleteOptions,
    ContainerGetPropertiesOptions,
    ListBlobsOptions,
    BlobGetPropertiesOptions,
    BlobSetHttpHeadersOptions,
    BlobSetMetadataOptions,
    BlobSetAccessTierOptions,
    BlobRawDownloadOptions,
    BlockBlobStageBlockOptions,
    BlockBlobCommitBlockListOptions,
    BlobDeleteOptions,
    BlobGetTagsOptions,
    BlobSetTagsOptions,
)
from .interceptors import (
    Interceptor,
    RequestIdInterceptor,
    AddDateInterceptor,
    MetadataInterceptor,
    NormalizeEtagInterceptor,
    SasTokenCredential,
    SasTokenCredentialInterceptor,
)
from ._validation import (
    RequestConditionSupport,
    validate_request_conditions,
    overwrite_conditions,
)
from .client import StorageBlobClient, StorageBlobClientBuilder
from .aio import AsyncStorageBlobClient, AsyncStorageBlobClientBuilder

__version__ = "0.1.0"

__all__ = [
    "BlobError",
    "InvalidArgumentError",
    "UnsupportedRequestConditionError",
    "OperationCancelledError",
    "BlobServiceError",
    "BlobTransportError",
    "DeserializationError",
    "CancellationToken",
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
    "ListBlobsFlatSegmentResponse",
    "ContainerGetPropertiesHeaders",
    "BlobGetPropertiesHeaders",
    "BlobDownloadHeaders",
    "BlobDownloadResult",
    "BlockBlobItem",
    "BlobsPage",
    "Response",
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
    "Interceptor",
    "RequestIdInterceptor",
    "AddDateInterceptor",
    "MetadataInterceptor",
    "NormalizeEtagInterceptor",
    "SasTokenCredential",
    "SasTokenCredentialInterceptor",
    "RequestConditionSupport",
    "validate_request_conditions",
    "overwrite_conditions",
    "StorageBlobClient",
    "StorageBlobClientBuilder",
    "AsyncStorageBlobClient",
    "AsyncStorageBlobClientBuilder",
]
