from __future__ import annotations

from collections.abc import Iterable, Mapping


class BlobError(Exception):
    """Base class for every error raised by the blob client."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Storage Blob: {message}")


class InvalidArgumentError(BlobError, ValueError):
    def __init__(self, message: str) -> None:
        super().__init__(message)


class UnsupportedRequestConditionError(BlobError, ValueError):
    """A request condition was set that the target operation does not accept."""

    def __init__(self, operation: str, fields: Iterable[str]) -> None:
        self.operation = operation
        self.fields = tuple(fields)
        super().__init__(
            f"{operation} does not support the request condition(s): {', '.join(self.fields)}"
        )


class OperationCancelledError(BlobError):
    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} was cancelled")


class BlobServiceError(BlobError):
    """The service answered with a non-2xx status, or could not be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_code: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.service_message = message
        self.headers = dict(headers or {})
        prefix = f"{status_code} " if status_code is not None else ""
        code = f"{error_code}: " if error_code else ""
        super().__init__(f"{prefix}{code}{message}")

    @property
    def request_id(self) -> str | None:
        return self.headers.get("x-ms-request-id")


class BlobTransportError(BlobServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(f"Failed to reach the service: {message}")


class DeserializationError(BlobError):
    def __init__(self, message: str) -> None:
        super().__init__(f"Unexpected response body: {message}")


__all__ = [
    "BlobError",
    "InvalidArgumentError",
    "UnsupportedRequestConditionError",
    "OperationCancelledError",
    "BlobServiceError",
    "BlobTransportError",
    "DeserializationError",
]
