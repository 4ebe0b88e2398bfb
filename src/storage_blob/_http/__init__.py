"""Shared HTTP infrastructure for the blob clients."""

from .clients import create_base_async_client, create_base_client
from .config import (
    DEFAULT_TIMEOUT,
    StorageEnv,
    default_blob_service_url,
    get_storage_env,
)
from .iter_coroutine import iter_coroutine
from .transport import (
    AsyncTransport,
    BaseTransport,
    BlockingTransport,
    BytesBody,
    RequestBody,
)

__all__ = [
    "DEFAULT_TIMEOUT",
    "StorageEnv",
    "default_blob_service_url",
    "get_storage_env",
    "iter_coroutine",
    "BaseTransport",
    "BlockingTransport",
    "AsyncTransport",
    "BytesBody",
    "RequestBody",
    "create_base_client",
    "create_base_async_client",
]
