"""Sync/Async API parity tests.

Validates that the blocking and async clients expose the same operations
with matching signatures.
"""

import inspect
from collections.abc import Callable
from typing import Any

import pytest

from storage_blob import (
    AsyncStorageBlobClient,
    AsyncStorageBlobClientBuilder,
    StorageBlobClient,
    StorageBlobClientBuilder,
)

# close() and aclose() follow each protocol's naming.
LIFECYCLE = {"close", "aclose"}


def get_param_names(func: Callable) -> list[str]:
    """Extract parameter names from a function signature."""
    sig = inspect.signature(func)
    return [
        name
        for name, param in sig.parameters.items()
        if param.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]


def get_param_defaults(func: Callable) -> dict[str, Any]:
    """Extract parameter defaults from a function signature."""
    sig = inspect.signature(func)
    return {
        name: param.default
        for name, param in sig.parameters.items()
        if param.default is not inspect.Parameter.empty
    }


def compare_signatures(sync_func: Callable, async_func: Callable) -> list[str]:
    """Compare signatures of sync and async functions.

    Returns a list of differences (empty if signatures match).
    """
    differences = []

    sync_params = get_param_names(sync_func)
    async_params = get_param_names(async_func)

    if sync_params != async_params:
        differences.append(f"Parameter names differ: sync={sync_params}, async={async_params}")

    sync_defaults = get_param_defaults(sync_func)
    async_defaults = get_param_defaults(async_func)

    for name in set(sync_defaults.keys()) & set(async_defaults.keys()):
        if sync_defaults[name] != async_defaults[name]:
            differences.append(
                f"Default for '{name}' differs: "
                f"sync={sync_defaults[name]}, async={async_defaults[name]}"
            )

    return differences


def public_methods(cls: type) -> set[str]:
    return {
        name
        for name, member in inspect.getmembers(cls, inspect.isfunction)
        if not name.startswith("_") and name not in LIFECYCLE
    }


OPERATIONS = sorted(public_methods(StorageBlobClient))


class TestClientSignatureParity:
    """Test StorageBlobClient/AsyncStorageBlobClient parity."""

    def test_same_operations(self):
        assert public_methods(StorageBlobClient) == public_methods(AsyncStorageBlobClient)

    def test_every_operation_has_with_response_variant(self):
        simple = [name for name in OPERATIONS if not name.endswith("_with_response")]
        extras = {"iter_blobs", "new_builder"}
        for name in simple:
            if name in extras:
                continue
            assert f"{name}_with_response" in OPERATIONS, name

    @pytest.mark.parametrize("name", OPERATIONS)
    def test_signature(self, name):
        differences = compare_signatures(
            getattr(StorageBlobClient, name), getattr(AsyncStorageBlobClient, name)
        )
        assert not differences, differences

    @pytest.mark.parametrize("name", [n for n in OPERATIONS if n not in ("iter_blobs", "new_builder")])
    def test_async_operations_are_coroutines(self, name):
        assert inspect.iscoroutinefunction(getattr(AsyncStorageBlobClient, name))
        assert not inspect.iscoroutinefunction(getattr(StorageBlobClient, name))

    def test_async_iter_blobs_is_async_generator(self):
        assert inspect.isasyncgenfunction(AsyncStorageBlobClient.iter_blobs)
        assert inspect.isgeneratorfunction(StorageBlobClient.iter_blobs)

    def test_lifecycle(self):
        assert not inspect.iscoroutinefunction(StorageBlobClient.close)
        assert inspect.iscoroutinefunction(AsyncStorageBlobClient.aclose)


class TestBuilderParity:
    def test_same_setters(self):
        assert public_methods(StorageBlobClientBuilder) == public_methods(
            AsyncStorageBlobClientBuilder
        )

    def test_builder_attribute(self):
        assert StorageBlobClient.Builder is StorageBlobClientBuilder
        assert AsyncStorageBlobClient.Builder is AsyncStorageBlobClientBuilder
