"""HTTP and environment configuration for the blob clients."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass

DEFAULT_TIMEOUT = 60.0
ACCOUNT_NAME_ENV = "AZURE_STORAGE_ACCOUNT_NAME"
SAS_TOKEN_ENV = "AZURE_STORAGE_SAS_TOKEN"


@dataclass(frozen=True)
class StorageEnv:
    """Storage settings read from the environment at client-construction time."""

    account_name: str | None = None
    sas_token: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return asdict(self)


def _get(env: Mapping[str, str], key: str) -> str | None:
    value = env.get(key)
    if value == "":
        return None
    return value


def get_storage_env(env: Mapping[str, str] | None = None) -> StorageEnv:
    """Return the storage settings; empty strings are normalized to ``None``."""
    if env is None:
        env = os.environ
    return StorageEnv(
        account_name=_get(env, ACCOUNT_NAME_ENV),
        sas_token=_get(env, SAS_TOKEN_ENV),
    )


def default_blob_service_url(account_name: str, use_https: bool = True) -> str:
    scheme = "https" if use_https else "http"
    return f"{scheme}://{account_name}.blob.core.windows.net"


__all__ = [
    "DEFAULT_TIMEOUT",
    "ACCOUNT_NAME_ENV",
    "SAS_TOKEN_ENV",
    "StorageEnv",
    "get_storage_env",
    "default_blob_service_url",
]
