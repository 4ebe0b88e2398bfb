"""Marshaling between typed records and the service's headers, query strings and XML bodies."""

from __future__ import annotations

import base64
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from enum import Enum
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from .errors import DeserializationError
from .models import (
    AccessTier,
    ArchiveStatus,
    BlobDownloadHeaders,
    BlobGetPropertiesHeaders,
    BlobHttpHeaders,
    BlobRequestConditions,
    BlobType,
    BlockBlobItem,
    ContainerGetPropertiesHeaders,
    CpkInfo,
    LeaseDuration,
    LeaseState,
    LeaseStatus,
    ListBlobsFlatSegmentResponse,
    PublicAccessType,
)

E = TypeVar("E", bound=Enum)

METADATA_PREFIX = "x-ms-meta-"


# Outbound


def format_http_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def encode_base64(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


def timeout_params(timeout: int | None) -> dict[str, str]:
    if timeout is None:
        return {}
    return {"timeout": str(int(timeout))}


def condition_headers(conditions: BlobRequestConditions | None) -> dict[str, str]:
    if conditions is None:
        return {}
    headers: dict[str, str] = {}
    if conditions.if_match is not None:
        headers["If-Match"] = conditions.if_match
    if conditions.if_none_match is not None:
        headers["If-None-Match"] = conditions.if_none_match
    if conditions.if_modified_since is not None:
        headers["If-Modified-Since"] = format_http_date(conditions.if_modified_since)
    if conditions.if_unmodified_since is not None:
        headers["If-Unmodified-Since"] = format_http_date(conditions.if_unmodified_since)
    if conditions.lease_id is not None:
        headers["x-ms-lease-id"] = conditions.lease_id
    if conditions.tags_conditions is not None:
        headers["x-ms-if-tags"] = conditions.tags_conditions
    return headers


def metadata_headers(metadata: Mapping[str, str] | None) -> dict[str, str]:
    if not metadata:
        return {}
    return {f"{METADATA_PREFIX}{key}": value for key, value in metadata.items()}


def blob_http_headers(headers: BlobHttpHeaders | None) -> dict[str, str]:
    if headers is None:
        return {}
    out: dict[str, str] = {}
    if headers.cache_control is not None:
        out["x-ms-blob-cache-control"] = headers.cache_control
    if headers.content_type is not None:
        out["x-ms-blob-content-type"] = headers.content_type
    if headers.content_md5 is not None:
        out["x-ms-blob-content-md5"] = encode_base64(headers.content_md5)
    if headers.content_encoding is not None:
        out["x-ms-blob-content-encoding"] = headers.content_encoding
    if headers.content_language is not None:
        out["x-ms-blob-content-language"] = headers.content_language
    if headers.content_disposition is not None:
        out["x-ms-blob-content-disposition"] = headers.content_disposition
    return out


def cpk_headers(cpk_info: CpkInfo | None) -> dict[str, str]:
    if cpk_info is None:
        return {}
    return {
        "x-ms-encryption-key": cpk_info.encryption_key,
        "x-ms-encryption-key-sha256": cpk_info.encryption_key_sha256,
        "x-ms-encryption-algorithm": cpk_info.encryption_algorithm,
    }


def encode_block_list(base64_block_ids: Iterable[str]) -> bytes:
    root = ET.Element("BlockList")
    for block_id in base64_block_ids:
        ET.SubElement(root, "Latest").text = block_id
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def encode_tags(tags: Mapping[str, str] | None) -> bytes:
    root = ET.Element("Tags")
    tag_set = ET.SubElement(root, "TagSet")
    for key, value in (tags or {}).items():
        tag = ET.SubElement(tag_set, "Tag")
        ET.SubElement(tag, "Key").text = key
        ET.SubElement(tag, "Value").text = value
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


# Inbound headers


def _header_datetime(headers: Mapping[str, str], name: str) -> datetime | None:
    value = headers.get(name)
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError) as exc:
        raise DeserializationError(f"header {name!r} is not an HTTP date: {value!r}") from exc


def _header_int(headers: Mapping[str, str], name: str) -> int | None:
    value = headers.get(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise DeserializationError(f"header {name!r} is not an integer: {value!r}") from exc


def _header_bool(headers: Mapping[str, str], name: str) -> bool | None:
    value = headers.get(name)
    if value is None or value == "":
        return None
    lowered = value.lower()
    if lowered not in ("true", "false"):
        raise DeserializationError(f"header {name!r} is not a boolean: {value!r}")
    return lowered == "true"


def _header_enum(headers: Mapping[str, str], name: str, enum: type[E]) -> E | None:
    value = headers.get(name)
    if not value:
        return None
    return enum(value)


def _header_bytes(headers: Mapping[str, str], name: str) -> bytes | None:
    value = headers.get(name)
    if not value:
        return None
    try:
        return base64.b64decode(value, validate=True)
    except ValueError as exc:
        raise DeserializationError(f"header {name!r} is not base64: {value!r}") from exc


def _etag(headers: Mapping[str, str]) -> str | None:
    value = headers.get("etag")
    if value is None:
        return None
    return value.replace('"', "")


def extract_metadata(headers: Mapping[str, str]) -> dict[str, str]:
    # httpx lower-cases keys in items(); raw keeps the casing the service sent.
    if isinstance(headers, httpx.Headers):
        pairs = [(key.decode("latin-1"), value.decode("latin-1")) for key, value in headers.raw]
    else:
        pairs = list(headers.items())
    metadata: dict[str, str] = {}
    for key, value in pairs:
        if key.lower().startswith(METADATA_PREFIX):
            metadata[key[len(METADATA_PREFIX):]] = value
    return metadata


def build_container_properties(headers: Mapping[str, str]) -> ContainerGetPropertiesHeaders:
    return ContainerGetPropertiesHeaders(
        etag=_etag(headers),
        last_modified=_header_datetime(headers, "last-modified"),
        metadata=extract_metadata(headers),
        lease_duration=_header_enum(headers, "x-ms-lease-duration", LeaseDuration),
        lease_state=_header_enum(headers, "x-ms-lease-state", LeaseState),
        lease_status=_header_enum(headers, "x-ms-lease-status", LeaseStatus),
        public_access=_header_enum(headers, "x-ms-blob-public-access", PublicAccessType),
        has_immutability_policy=_header_bool(headers, "x-ms-has-immutability-policy"),
        has_legal_hold=_header_bool(headers, "x-ms-has-legal-hold"),
        request_id=headers.get("x-ms-request-id"),
        version=headers.get("x-ms-version"),
        date=_header_datetime(headers, "date"),
    )


def build_blob_properties(headers: Mapping[str, str]) -> BlobGetPropertiesHeaders:
    return BlobGetPropertiesHeaders(
        etag=_etag(headers),
        last_modified=_header_datetime(headers, "last-modified"),
        creation_time=_header_datetime(headers, "x-ms-creation-time"),
        metadata=extract_metadata(headers),
        blob_type=_header_enum(headers, "x-ms-blob-type", BlobType),
        content_length=_header_int(headers, "content-length"),
        content_type=headers.get("content-type"),
        content_md5=_header_bytes(headers, "content-md5"),
        content_encoding=headers.get("content-encoding"),
        content_disposition=headers.get("content-disposition"),
        content_language=headers.get("content-language"),
        cache_control=headers.get("cache-control"),
        lease_duration=_header_enum(headers, "x-ms-lease-duration", LeaseDuration),
        lease_state=_header_enum(headers, "x-ms-lease-state", LeaseState),
        lease_status=_header_enum(headers, "x-ms-lease-status", LeaseStatus),
        access_tier=_header_enum(headers, "x-ms-access-tier", AccessTier),
        access_tier_inferred=_header_bool(headers, "x-ms-access-tier-inferred"),
        archive_status=_header_enum(headers, "x-ms-archive-status", ArchiveStatus),
        server_encrypted=_header_bool(headers, "x-ms-server-encrypted"),
        tag_count=_header_int(headers, "x-ms-tag-count"),
        version_id=headers.get("x-ms-version-id"),
        request_id=headers.get("x-ms-request-id"),
        version=headers.get("x-ms-version"),
        date=_header_datetime(headers, "date"),
    )


def build_download_headers(headers: Mapping[str, str]) -> BlobDownloadHeaders:
    return BlobDownloadHeaders(
        etag=_etag(headers),
        last_modified=_header_datetime(headers, "last-modified"),
        metadata=extract_metadata(headers),
        blob_type=_header_enum(headers, "x-ms-blob-type", BlobType),
        content_length=_header_int(headers, "content-length"),
        content_type=headers.get("content-type"),
        content_range=headers.get("content-range"),
        content_md5=_header_bytes(headers, "content-md5"),
        content_encoding=headers.get("content-encoding"),
        content_disposition=headers.get("content-disposition"),
        content_language=headers.get("content-language"),
        cache_control=headers.get("cache-control"),
        server_encrypted=_header_bool(headers, "x-ms-server-encrypted"),
        tag_count=_header_int(headers, "x-ms-tag-count"),
        request_id=headers.get("x-ms-request-id"),
        version=headers.get("x-ms-version"),
        date=_header_datetime(headers, "date"),
    )


def build_block_blob_item(headers: Mapping[str, str]) -> BlockBlobItem:
    return BlockBlobItem(
        etag=_etag(headers),
        last_modified=_header_datetime(headers, "last-modified"),
        content_md5=_header_bytes(headers, "content-md5"),
        is_server_encrypted=_header_bool(headers, "x-ms-request-server-encrypted"),
        encryption_key_sha256=headers.get("x-ms-encryption-key-sha256"),
        version_id=headers.get("x-ms-version-id"),
    )


# Inbound XML


def _parse_xml(content: bytes, root_name: str) -> ET.Element:
    if not content:
        raise DeserializationError(f"expected <{root_name}> but the body was empty")
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise DeserializationError(f"malformed XML: {exc}") from exc
    if root.tag != root_name:
        raise DeserializationError(f"expected <{root_name}> but got <{root.tag}>")
    return root


def _text_children(element: ET.Element) -> dict[str, str | None]:
    return {child.tag: child.text for child in element}


def _decode_tag_set(element: ET.Element | None) -> dict[str, str]:
    tags: dict[str, str] = {}
    if element is None:
        return tags
    tag_set = element.find("TagSet")
    if tag_set is None:
        return tags
    for tag in tag_set.findall("Tag"):
        key = tag.findtext("Key")
        if not key:
            raise DeserializationError("tag without a <Key>")
        tags[key] = tag.findtext("Value") or ""
    return tags


def _decode_blob_item(element: ET.Element) -> dict[str, Any]:
    item: dict[str, Any] = {}
    for child in element:
        if child.tag == "Properties":
            item["Properties"] = _text_children(child)
        elif child.tag == "Metadata":
            item["Metadata"] = {entry.tag: entry.text or "" for entry in child}
        elif child.tag == "Tags":
            item["Tags"] = _decode_tag_set(child)
        else:
            item[child.tag] = child.text
    return item


def decode_list_blobs(content: bytes) -> ListBlobsFlatSegmentResponse:
    root = _parse_xml(content, "EnumerationResults")
    data: dict[str, Any] = dict(root.attrib)
    for child in root:
        if child.tag == "Blobs":
            data["Blobs"] = {"Blob": [_decode_blob_item(blob) for blob in child.findall("Blob")]}
        else:
            data[child.tag] = child.text
    try:
        return ListBlobsFlatSegmentResponse.model_validate(data)
    except ValidationError as exc:
        raise DeserializationError(str(exc)) from exc


def decode_tags(content: bytes) -> dict[str, str]:
    return _decode_tag_set(_parse_xml(content, "Tags"))


def decode_error(content: bytes) -> tuple[str | None, str | None]:
    """Return ``(code, message)`` from an ``<Error>`` body, if it has one."""
    if not content:
        return None, None
    try:
        root = ET.fromstring(content)
    except ET.ParseError:
        return None, None
    if root.tag != "Error":
        return None, None
    return root.findtext("Code"), root.findtext("Message")


__all__ = [
    "METADATA_PREFIX",
    "format_http_date",
    "encode_base64",
    "timeout_params",
    "condition_headers",
    "metadata_headers",
    "blob_http_headers",
    "cpk_headers",
    "encode_block_list",
    "encode_tags",
    "extract_metadata",
    "build_container_properties",
    "build_blob_properties",
    "build_download_headers",
    "build_block_blob_item",
    "decode_list_blobs",
    "decode_tags",
    "decode_error",
]
