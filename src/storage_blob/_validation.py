from __future__ import annotations

from dataclasses import dataclass

from .errors import UnsupportedRequestConditionError
from .models import BlobRequestConditions


@dataclass(frozen=True, slots=True)
class RequestConditionSupport:
    """Which groups of ``BlobRequestConditions`` fields an operation accepts."""

    etag: bool = True
    modified_since: bool = True
    lease: bool = True
    tags: bool = True


ALL_CONDITIONS = RequestConditionSupport()
NO_CONDITIONS = RequestConditionSupport(etag=False, modified_since=False, lease=False, tags=False)

OPERATION_CONDITIONS: dict[str, RequestConditionSupport] = {
    "create_container": NO_CONDITIONS,
    "delete_container": RequestConditionSupport(etag=False, tags=False),
    "get_container_properties": RequestConditionSupport(etag=False, modified_since=False, tags=False),
    "get_blob_properties": ALL_CONDITIONS,
    "set_blob_http_headers": ALL_CONDITIONS,
    "set_blob_metadata": ALL_CONDITIONS,
    "set_blob_access_tier": RequestConditionSupport(etag=False, modified_since=False),
    "raw_download": ALL_CONDITIONS,
    "stage_block": RequestConditionSupport(etag=False, modified_since=False, tags=False),
    "commit_block_list": ALL_CONDITIONS,
    "delete_blob": ALL_CONDITIONS,
    "get_blob_tags": RequestConditionSupport(etag=False, modified_since=False, lease=False),
    "set_blob_tags": RequestConditionSupport(etag=False, modified_since=False, lease=False),
}


def disallowed_conditions(
    conditions: BlobRequestConditions | None,
    support: RequestConditionSupport,
) -> list[str]:
    if conditions is None:
        return []
    fields: list[str] = []
    if not support.etag:
        if conditions.if_match is not None:
            fields.append("if_match")
        if conditions.if_none_match is not None:
            fields.append("if_none_match")
    if not support.modified_since:
        if conditions.if_modified_since is not None:
            fields.append("if_modified_since")
        if conditions.if_unmodified_since is not None:
            fields.append("if_unmodified_since")
    if not support.lease and conditions.lease_id is not None:
        fields.append("lease_id")
    if not support.tags and conditions.tags_conditions is not None:
        fields.append("tags_conditions")
    return fields


def validate_request_conditions(
    conditions: BlobRequestConditions | None,
    operation: str,
) -> BlobRequestConditions:
    """Check ``conditions`` against ``operation`` and return them defaulted.

    Raises:
        UnsupportedRequestConditionError: If a field the operation does not
            accept is set.
    """
    fields = disallowed_conditions(conditions, OPERATION_CONDITIONS[operation])
    if fields:
        raise UnsupportedRequestConditionError(operation, fields)
    return conditions if conditions is not None else BlobRequestConditions()


def overwrite_conditions(overwrite: bool) -> BlobRequestConditions | None:
    """Conditions guarding a commit against replacing an existing blob."""
    if overwrite:
        return None
    return BlobRequestConditions(if_none_match="*")


__all__ = [
    "RequestConditionSupport",
    "ALL_CONDITIONS",
    "NO_CONDITIONS",
    "OPERATION_CONDITIONS",
    "disallowed_conditions",
    "validate_request_conditions",
    "overwrite_conditions",
]
