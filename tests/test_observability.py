import asyncio
from unittest.mock import MagicMock, patch

import pytest
from prometheus_client import REGISTRY

from bucketdrive.infra.storage.errors import ObjectNotFoundError, UnknownStorageError
from bucketdrive.infra.storage.s3_driver import S3StorageDriver
from tests.infra.fake_s3 import client_error


def _sample(name: str, labels: dict) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def _driver(storage_config, *, enable_metrics: bool = True):
    client = MagicMock()
    with patch.object(S3StorageDriver, "_build_client", return_value=client):
        return S3StorageDriver(storage_config, enable_metrics=enable_metrics), client


def test_records_successful_operation(storage_config):
    driver, client = _driver(storage_config)
    labels = {"operation": "delete", "outcome": "ok"}
    before = _sample("storage_operations_total", labels)
    histogram_before = _sample(
        "storage_operation_duration_seconds_count", {"operation": "delete"}
    )

    asyncio.run(driver.delete("k"))

    assert _sample("storage_operations_total", labels) == before + 1
    assert (
        _sample("storage_operation_duration_seconds_count", {"operation": "delete"})
        == histogram_before + 1
    )


def test_records_failed_operation(storage_config):
    driver, client = _driver(storage_config)
    client.head_object.side_effect = client_error("SlowDown", "HeadObject", 503)
    labels = {"operation": "exists", "outcome": "error"}
    before = _sample("storage_operations_total", labels)

    with pytest.raises(UnknownStorageError):
        asyncio.run(driver.exists("busy"))

    assert _sample("storage_operations_total", labels) == before + 1


def test_absent_object_is_not_an_error(storage_config):
    driver, client = _driver(storage_config)
    client.head_object.side_effect = client_error("404", "HeadObject", 404)
    not_found = {"operation": "exists", "outcome": "not_found"}
    error = {"operation": "exists", "outcome": "error"}
    before_not_found = _sample("storage_operations_total", not_found)
    before_error = _sample("storage_operations_total", error)

    result = asyncio.run(driver.exists("missing"))

    assert result.exists is False
    assert _sample("storage_operations_total", not_found) == before_not_found + 1
    assert _sample("storage_operations_total", error) == before_error


def test_body_read_failure_counts_as_error(storage_config):
    driver, client = _driver(storage_config)
    body = MagicMock()
    body.read.side_effect = ConnectionResetError("reset")
    client.get_object.return_value = {"Body": body}
    ok = {"operation": "get_buffer", "outcome": "ok"}
    error = {"operation": "get_buffer", "outcome": "error"}
    before_ok = _sample("storage_operations_total", ok)
    before_error = _sample("storage_operations_total", error)

    with pytest.raises(UnknownStorageError):
        asyncio.run(driver.get_buffer("k"))

    assert _sample("storage_operations_total", ok) == before_ok
    assert _sample("storage_operations_total", error) == before_error + 1


def test_metrics_can_be_disabled(storage_config):
    driver, client = _driver(storage_config, enable_metrics=False)
    labels = {"operation": "put", "outcome": "ok"}
    before = _sample("storage_operations_total", labels)

    asyncio.run(driver.put("k", b"v"))

    assert _sample("storage_operations_total", labels) == before


def test_translated_errors_are_logged(storage_config, caplog):
    driver, client = _driver(storage_config, enable_metrics=False)
    client.get_object.side_effect = client_error("NoSuchKey", "GetObject")

    with caplog.at_level("WARNING", logger="storage"):
        with pytest.raises(ObjectNotFoundError):
            asyncio.run(driver.get_buffer("doc.txt"))

    record = next(r for r in caplog.records if r.name == "storage")
    assert "operation=get_buffer" in record.getMessage()
    assert record.extra["code"] == "NoSuchKey"
    assert record.extra["kind"] == "ObjectNotFoundError"
