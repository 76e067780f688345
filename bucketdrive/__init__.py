"""Bucket-backed object storage driver."""

from bucketdrive.infra.storage import (
    BucketNotFoundError,
    ObjectNotFoundError,
    PermissionDeniedError,
    S3StorageConfig,
    S3StorageDriver,
    StorageDriver,
    StorageError,
    UnknownStorageError,
    build_storage_driver,
)

__version__ = "0.1.0"

__all__ = [
    "BucketNotFoundError",
    "ObjectNotFoundError",
    "PermissionDeniedError",
    "S3StorageConfig",
    "S3StorageDriver",
    "StorageDriver",
    "StorageError",
    "UnknownStorageError",
    "build_storage_driver",
]
