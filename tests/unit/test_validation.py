from datetime import datetime, timezone

import pytest

from storage_blob import (
    BlobRequestConditions,
    UnsupportedRequestConditionError,
    overwrite_conditions,
    validate_request_conditions,
)
from storage_blob._core import commit_block_list_options
from storage_blob._validation import OPERATION_CONDITIONS, disallowed_conditions

WHEN = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

ETAG = BlobRequestConditions(if_match="0x1")
NONE_MATCH = BlobRequestConditions(if_none_match="*")
MODIFIED = BlobRequestConditions(if_modified_since=WHEN)
UNMODIFIED = BlobRequestConditions(if_unmodified_since=WHEN)
LEASE = BlobRequestConditions(lease_id="lease-1")
TAGS = BlobRequestConditions(tags_conditions="\"project\"='alpha'")

# (operation, conditions, allowed)
MATRIX = [
    ("create_container", ETAG, False),
    ("create_container", LEASE, False),
    ("delete_container", ETAG, False),
    ("delete_container", MODIFIED, True),
    ("delete_container", UNMODIFIED, True),
    ("delete_container", LEASE, True),
    ("delete_container", TAGS, False),
    ("get_container_properties", LEASE, True),
    ("get_container_properties", MODIFIED, False),
    ("get_container_properties", NONE_MATCH, False),
    ("set_blob_access_tier", LEASE, True),
    ("set_blob_access_tier", TAGS, True),
    ("set_blob_access_tier", ETAG, False),
    ("set_blob_access_tier", UNMODIFIED, False),
    ("stage_block", LEASE, True),
    ("stage_block", TAGS, False),
    ("stage_block", NONE_MATCH, False),
    ("get_blob_tags", TAGS, True),
    ("get_blob_tags", LEASE, False),
    ("set_blob_tags", TAGS, True),
    ("set_blob_tags", ETAG, False),
    ("commit_block_list", NONE_MATCH, True),
    ("raw_download", MODIFIED, True),
    ("delete_blob", TAGS, True),
    ("set_blob_metadata", LEASE, True),
]


class TestValidateRequestConditions:
    @pytest.mark.parametrize("operation,conditions,allowed", MATRIX)
    def test_matrix(self, operation, conditions, allowed):
        if allowed:
            assert validate_request_conditions(conditions, operation) == conditions
        else:
            with pytest.raises(UnsupportedRequestConditionError) as exc_info:
                validate_request_conditions(conditions, operation)
            assert exc_info.value.operation == operation

    @pytest.mark.parametrize("operation", sorted(OPERATION_CONDITIONS))
    def test_absent_conditions_always_pass(self, operation):
        assert validate_request_conditions(None, operation) == BlobRequestConditions()
        assert validate_request_conditions(BlobRequestConditions(), operation) == (
            BlobRequestConditions()
        )

    def test_names_every_disallowed_field(self):
        conditions = BlobRequestConditions(if_match="0x1", if_none_match="*", lease_id="l1")
        with pytest.raises(UnsupportedRequestConditionError) as exc_info:
            validate_request_conditions(conditions, "get_blob_tags")

        assert exc_info.value.fields == ("if_match", "if_none_match", "lease_id")
        assert "if_match" in str(exc_info.value)

    def test_is_deterministic(self):
        conditions = BlobRequestConditions(if_modified_since=WHEN, tags_conditions="x")
        support = OPERATION_CONDITIONS["delete_container"]

        assert disallowed_conditions(conditions, support) == ["tags_conditions"]
        assert disallowed_conditions(conditions, support) == ["tags_conditions"]

    def test_unsupported_condition_is_a_value_error(self):
        with pytest.raises(ValueError):
            validate_request_conditions(ETAG, "stage_block")


class TestOverwriteConditions:
    def test_no_overwrite_requires_absent_blob(self):
        assert overwrite_conditions(False) == BlobRequestConditions(if_none_match="*")

    def test_overwrite_has_no_conditions(self):
        assert overwrite_conditions(True) is None


class TestCommitOptions:
    def test_plain_commit_refuses_to_overwrite(self):
        options = commit_block_list_options("c1", "b1", ["AAAA"], overwrite=False)

        assert options.request_conditions == BlobRequestConditions(if_none_match="*")
        assert list(options.base64_block_ids) == ["AAAA"]

    def test_overwriting_commit_has_no_precondition(self):
        options = commit_block_list_options("c1", "b1", ["AAAA"], overwrite=True)

        assert options.request_conditions is None
