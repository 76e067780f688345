from __future__ import annotations

from bucketdrive.common.config import Settings, get_settings
from bucketdrive.infra.storage.client import StorageDriver
from bucketdrive.infra.storage.errors import StorageBackendNotConfiguredError
from bucketdrive.infra.storage.s3_driver import S3StorageConfig, S3StorageDriver

SUPPORTED_BACKENDS: tuple[str, ...] = ("s3",)


def build_storage_driver(settings: Settings | None = None) -> StorageDriver:
    """Build the storage driver selected by ``STORAGE_BACKEND``.

    Raises:
        StorageBackendNotConfiguredError: If the backend is unknown or its
            required settings are missing.
    """
    settings = settings or get_settings()
    backend = (settings.STORAGE_BACKEND or "").strip().lower()
    if backend not in SUPPORTED_BACKENDS:
        raise StorageBackendNotConfiguredError(
            f"Unsupported storage backend: {backend}. Only 's3' is supported."
        )
    if not settings.S3_BUCKET:
        raise StorageBackendNotConfiguredError("S3_BUCKET is required")
    if not settings.S3_ACCESS_KEY_ID or not settings.S3_SECRET_ACCESS_KEY:
        raise StorageBackendNotConfiguredError(
            "S3_ACCESS_KEY_ID and S3_SECRET_ACCESS_KEY are required"
        )
    return S3StorageDriver(
        S3StorageConfig.from_settings(settings),
        enable_metrics=settings.ENABLE_METRICS,
    )
