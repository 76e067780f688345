"""Storage error taxonomy and backend error translation.

Every backend failure surfaced by a driver is one of the error kinds defined
here. Translation keys off the backend's symbolic error name (for S3, the
``Error.Code`` of a botocore ``ClientError``).
"""

from __future__ import annotations

from typing import Any


class StorageError(RuntimeError):
    """Raised when object storage operations fail."""

    def __init__(self, message: str, *, original: BaseException | None = None):
        super().__init__(message)
        self.original = original


class StorageBackendNotConfiguredError(StorageError):
    """Raised when the storage backend is not properly configured."""


class BucketNotFoundError(StorageError):
    """The configured bucket does not exist or cannot be reached by name."""

    def __init__(self, bucket: str, *, original: BaseException | None = None):
        super().__init__(f"Bucket not found: {bucket}", original=original)
        self.bucket = bucket


class ObjectNotFoundError(StorageError):
    """The requested key does not exist."""

    def __init__(self, location: str, *, original: BaseException | None = None):
        super().__init__(f"Object not found: {location}", original=original)
        self.location = location


class PermissionDeniedError(StorageError):
    """The backend denied the operation due to access restrictions."""

    def __init__(self, location: str, *, original: BaseException | None = None):
        super().__init__(
            f"Permission denied for location: {location}", original=original
        )
        self.location = location


class UnknownStorageError(StorageError):
    """A backend failure that is not one of the recognized kinds."""

    def __init__(
        self, code: str, location: str, *, original: BaseException | None = None
    ):
        super().__init__(
            f"Storage operation failed with {code} for location: {location}",
            original=original,
        )
        self.code = code
        self.location = location


ERROR_KINDS: dict[str, type[StorageError]] = {
    "NoSuchBucket": BucketNotFoundError,
    "NoSuchKey": ObjectNotFoundError,
    "AllAccessDisabled": PermissionDeniedError,
}


def error_kind_for(name: str | None) -> type[StorageError]:
    """Return the error kind for a backend error name, defaulting to unknown."""
    return ERROR_KINDS.get(name or "", UnknownStorageError)


def error_name(error: BaseException) -> str:
    """Extract the backend's symbolic error name from a raised exception.

    botocore ``ClientError`` instances carry it in ``response["Error"]["Code"]``;
    anything else (connection errors, parameter validation) is named by class.
    """
    response: Any = getattr(error, "response", None)
    if isinstance(response, dict):
        code = (response.get("Error") or {}).get("Code")
        if code:
            return str(code)
    return type(error).__name__


def status_code(error: BaseException) -> int | None:
    response: Any = getattr(error, "response", None)
    if not isinstance(response, dict):
        return None
    status = (response.get("ResponseMetadata") or {}).get("HTTPStatusCode")
    return int(status) if status is not None else None


def translate_error(error: BaseException, location: str, bucket: str) -> StorageError:
    """Map a backend error to a storage error kind.

    Args:
        error: The exception raised by the backend client.
        location: Object key (or listing prefix) involved in the call.
        bucket: Name of the bucket the driver is bound to.

    Returns:
        A StorageError subclass instance holding ``error`` as ``original``.
        Callers raise it ``from error`` so the chain is kept.
    """
    name = error_name(error)
    kind = error_kind_for(name)
    if kind is BucketNotFoundError:
        return BucketNotFoundError(bucket, original=error)
    if kind is ObjectNotFoundError:
        return ObjectNotFoundError(location, original=error)
    if kind is PermissionDeniedError:
        return PermissionDeniedError(location, original=error)
    return UnknownStorageError(name, location, original=error)
