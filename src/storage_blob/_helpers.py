from __future__ import annotations

import hashlib
import logging
import urllib.parse
from typing import Any

logger = logging.getLogger("storage_blob")


def debug(message: str, *args: Any) -> None:
    logger.debug("storage-blob: " + message, *args)


def container_path(container_name: str) -> str:
    return "/" + urllib.parse.quote(container_name, safe="")


def blob_path(container_name: str, blob_name: str) -> str:
    # "/" in blob names is a virtual directory separator and stays unescaped.
    return f"{container_path(container_name)}/{urllib.parse.quote(blob_name, safe='/')}"


def compute_md5(data: bytes) -> bytes:
    return hashlib.md5(data).digest()


__all__ = ["logger", "debug", "container_path", "blob_path", "compute_md5"]
