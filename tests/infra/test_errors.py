"""Tests for backend error translation."""

import pytest
from botocore.exceptions import EndpointConnectionError

from bucketdrive.infra.storage.errors import (
    BucketNotFoundError,
    ObjectNotFoundError,
    PermissionDeniedError,
    StorageError,
    UnknownStorageError,
    error_kind_for,
    error_name,
    status_code,
    translate_error,
)
from tests.infra.fake_s3 import client_error


@pytest.mark.parametrize(
    ("name", "kind"),
    [
        ("NoSuchBucket", BucketNotFoundError),
        ("NoSuchKey", ObjectNotFoundError),
        ("AllAccessDisabled", PermissionDeniedError),
        ("AccessDenied", UnknownStorageError),
        ("404", UnknownStorageError),
        ("", UnknownStorageError),
        (None, UnknownStorageError),
    ],
)
def test_error_kind_for(name, kind):
    assert error_kind_for(name) is kind


def test_error_name_from_client_error():
    assert error_name(client_error("NoSuchKey", "GetObject")) == "NoSuchKey"


def test_error_name_falls_back_to_class_name():
    error = EndpointConnectionError(endpoint_url="http://localhost:9000")

    assert error_name(error) == "EndpointConnectionError"
    assert status_code(error) is None


def test_status_code():
    assert status_code(client_error("404", "HeadObject", 404)) == 404


class TestTranslateError:
    def test_bucket_not_found_references_bucket(self):
        original = client_error("NoSuchBucket", "GetObject")

        translated = translate_error(original, "a/b", "my-bucket")

        assert isinstance(translated, BucketNotFoundError)
        assert translated.bucket == "my-bucket"
        assert translated.original is original

    def test_object_not_found_references_location(self):
        translated = translate_error(
            client_error("NoSuchKey", "GetObject"), "a/b", "my-bucket"
        )

        assert isinstance(translated, ObjectNotFoundError)
        assert translated.location == "a/b"
        assert "a/b" in str(translated)

    def test_permission_denied_references_location(self):
        translated = translate_error(
            client_error("AllAccessDisabled", "GetObject"), "a/b", "my-bucket"
        )

        assert isinstance(translated, PermissionDeniedError)
        assert translated.location == "a/b"

    def test_unknown_keeps_name_and_location(self):
        original = ValueError("boom")

        translated = translate_error(original, "a/b", "my-bucket")

        assert isinstance(translated, UnknownStorageError)
        assert translated.code == "ValueError"
        assert translated.location == "a/b"
        assert translated.original is original

    def test_all_kinds_share_base(self):
        for code in ("NoSuchBucket", "NoSuchKey", "AllAccessDisabled", "Other"):
            translated = translate_error(client_error(code, "GetObject"), "k", "b")
            assert isinstance(translated, StorageError)
