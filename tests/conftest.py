from __future__ import annotations

from unittest.mock import patch

import pytest

from bucketdrive.common.config import get_settings
from bucketdrive.infra.storage.s3_driver import S3StorageConfig, S3StorageDriver
from tests.infra.fake_s3 import FakeS3Client

STORAGE_ENV_VARS = (
    "STORAGE_BACKEND",
    "S3_BUCKET",
    "S3_ACCESS_KEY_ID",
    "S3_SECRET_ACCESS_KEY",
    "S3_REGION",
    "S3_ENDPOINT_URL",
    "S3_USE_SSL",
    "S3_ADDRESSING_STYLE",
    "STORAGE_PRESIGN_EXPIRES_SECONDS",
    "ENABLE_METRICS",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate tests from the developer's environment and .env file."""
    for name in STORAGE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("bucketdrive.common.config.ENV_FILE", tmp_path / ".env")
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def storage_config() -> S3StorageConfig:
    return S3StorageConfig(
        key="test-key",
        secret="test-secret",
        bucket="test-bucket",
        region="us-east-1",
        endpoint_url="http://localhost:9000",
        use_ssl=False,
    )


@pytest.fixture()
def fake_s3() -> FakeS3Client:
    return FakeS3Client(bucket="test-bucket")


@pytest.fixture()
def driver(fake_s3, storage_config) -> S3StorageDriver:
    """S3StorageDriver talking to the in-memory fake."""
    with patch.object(S3StorageDriver, "_build_client", return_value=fake_s3):
        return S3StorageDriver(storage_config)
