"""Object storage abstraction layer.

This module provides a protocol-based storage driver abstraction with an
S3 implementation that also covers MinIO and other S3-compatible services.
"""

from .client import (
    ContentResponse,
    DeleteResponse,
    ExistsResponse,
    FileListEntry,
    Response,
    SignedUrlResponse,
    StatResponse,
    StorageDriver,
)
from .errors import (
    BucketNotFoundError,
    ObjectNotFoundError,
    PermissionDeniedError,
    StorageBackendNotConfiguredError,
    StorageError,
    UnknownStorageError,
    translate_error,
)
from .factory import build_storage_driver
from .s3_driver import S3StorageConfig, S3StorageDriver

__all__ = [
    "BucketNotFoundError",
    "ContentResponse",
    "DeleteResponse",
    "ExistsResponse",
    "FileListEntry",
    "ObjectNotFoundError",
    "PermissionDeniedError",
    "Response",
    "S3StorageConfig",
    "S3StorageDriver",
    "SignedUrlResponse",
    "StatResponse",
    "StorageBackendNotConfiguredError",
    "StorageDriver",
    "StorageError",
    "UnknownStorageError",
    "build_storage_driver",
    "translate_error",
]
