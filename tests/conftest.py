"""Shared fixtures for all tests."""

import time
import uuid
import xml.etree.ElementTree as ET
from collections.abc import Generator

import httpx
import pytest
import respx

from storage_blob import StorageBlobClient

ACCOUNT_URL = "https://testaccount.blob.core.windows.net"


@pytest.fixture
def mock_env_clear(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear storage environment variables for testing.

    This ensures tests don't accidentally use real credentials from the environment.
    """
    for var in ("AZURE_STORAGE_ACCOUNT_NAME", "AZURE_STORAGE_SAS_TOKEN"):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def account_url() -> str:
    return ACCOUNT_URL


@pytest.fixture
def blob_api() -> Generator[respx.MockRouter, None, None]:
    """Mock blob endpoint; tests register the routes they need."""
    with respx.mock(base_url=ACCOUNT_URL, assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def client(blob_api: respx.MockRouter) -> Generator[StorageBlobClient, None, None]:
    with StorageBlobClient.Builder().set_blob_service_url(ACCOUNT_URL).build() as blob_client:
        yield blob_client


@pytest.fixture
def unique_container_name() -> str:
    """Generate a unique, service-legal container name."""
    return f"sbtest{int(time.time())}{uuid.uuid4().hex[:8]}"


def error_response(status_code: int, code: str, message: str = "") -> httpx.Response:
    body = (
        '<?xml version="1.0" encoding="utf-8"?>'
        f"<Error><Code>{code}</Code><Message>{message}</Message></Error>"
    )
    return httpx.Response(
        status_code,
        headers={"x-ms-error-code": code, "x-ms-request-id": "req-error"},
        content=body.encode(),
    )


class FakeBlobService:
    """Small in-memory blob endpoint for multi-step scenarios.

    Understands containers, staged and committed block blobs, and flat
    listings; everything else answers 400.
    """

    def __init__(self) -> None:
        self.containers: dict[str, dict[str, bytes]] = {}
        self.staged: dict[tuple[str, str], dict[str, bytes]] = {}
        self.etag_counter = 0

    def _etag(self) -> str:
        self.etag_counter += 1
        return f'"0x{self.etag_counter:04X}"'

    def handle(self, request: httpx.Request) -> httpx.Response:
        container, _, blob = request.url.path.lstrip("/").partition("/")
        if not blob:
            return self._container(request, container)
        if container not in self.containers:
            return error_response(404, "ContainerNotFound")
        return self._blob(request, container, blob)

    def _container(self, request: httpx.Request, container: str) -> httpx.Response:
        params = request.url.params
        if request.method == "PUT":
            if container in self.containers:
                return error_response(409, "ContainerAlreadyExists")
            self.containers[container] = {}
            return httpx.Response(201, headers={"etag": self._etag()})
        if container not in self.containers:
            return error_response(404, "ContainerNotFound")
        if request.method == "DELETE":
            del self.containers[container]
            return httpx.Response(202)
        if request.method == "GET" and params.get("comp") == "list":
            return self._list(container, params.get("prefix") or "")
        return error_response(400, "UnsupportedHttpVerb")

    def _list(self, container: str, prefix: str) -> httpx.Response:
        root = ET.Element("EnumerationResults", ContainerName=container)
        blobs = ET.SubElement(root, "Blobs")
        for name, data in sorted(self.containers[container].items()):
            if not name.startswith(prefix):
                continue
            blob = ET.SubElement(blobs, "Blob")
            ET.SubElement(blob, "Name").text = name
            properties = ET.SubElement(blob, "Properties")
            ET.SubElement(properties, "Content-Length").text = str(len(data))
            ET.SubElement(properties, "BlobType").text = "BlockBlob"
        ET.SubElement(root, "NextMarker")
        return httpx.Response(200, content=ET.tostring(root))

    def _blob(self, request: httpx.Request, container: str, blob: str) -> httpx.Response:
        params = request.url.params
        comp = params.get("comp")
        if request.method == "PUT" and comp == "block":
            staged = self.staged.setdefault((container, blob), {})
            staged[params["blockid"]] = request.content
            return httpx.Response(201)
        if request.method == "PUT" and comp == "blocklist":
            exists = blob in self.containers[container]
            if request.headers.get("if-none-match") == "*" and exists:
                return error_response(412, "BlobAlreadyExists", "The specified blob already exists.")
            staged = self.staged.get((container, blob), {})
            ids = [element.text for element in ET.fromstring(request.content).iter("Latest")]
            if any(block_id not in staged for block_id in ids):
                return error_response(400, "InvalidBlockList")
            self.containers[container][blob] = b"".join(staged[block_id] for block_id in ids)
            return httpx.Response(
                201,
                headers={
                    "etag": self._etag(),
                    "last-modified": "Tue, 20 Oct 2026 10:00:00 GMT",
                    "x-ms-request-server-encrypted": "true",
                },
            )
        if request.method == "GET" and comp is None:
            if blob not in self.containers[container]:
                return error_response(404, "BlobNotFound")
            data = self.containers[container][blob]
            return httpx.Response(
                206 if "x-ms-range" in request.headers else 200,
                headers={"x-ms-blob-type": "BlockBlob"},
                content=data,
            )
        if request.method == "DELETE":
            if self.containers[container].pop(blob, None) is None:
                return error_response(404, "BlobNotFound")
            return httpx.Response(202)
        return error_response(400, "UnsupportedHttpVerb")


@pytest.fixture
def fake_service(blob_api: respx.MockRouter) -> FakeBlobService:
    service = FakeBlobService()
    blob_api.route().mock(side_effect=service.handle)
    return service


@pytest.fixture
def service_error():
    """Factory for ``<Error>`` responses as the service sends them."""
    return error_response
