"""S3-compatible storage driver implementation.

This module provides the S3 variant of the ``StorageDriver`` protocol. It
works with AWS S3, MinIO, and other S3-compatible object storage services.

boto3 is synchronous, so each backend call runs in a worker thread via
``asyncio.to_thread``; boto3 clients are safe to share between threads.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, AsyncIterator, Callable, Mapping

import boto3
from botocore.config import Config

from bucketdrive.infra.observability.metrics import record_operation
from bucketdrive.infra.storage.client import (
    DEFAULT_SIGNED_URL_EXPIRES_IN,
    ContentResponse,
    DeleteResponse,
    ExistsResponse,
    FileListEntry,
    PutContent,
    Response,
    SignedUrlResponse,
    StatResponse,
)
from bucketdrive.infra.storage.errors import (
    StorageError,
    error_name,
    status_code,
    translate_error,
)

if TYPE_CHECKING:
    from bucketdrive.common.config import Settings

logger = logging.getLogger("storage")

# Maximum number of keys S3 returns per ListObjectsV2 page
LIST_PAGE_SIZE = 1000

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


@dataclass(frozen=True, slots=True)
class S3StorageConfig:
    """Connection settings for one bucket.

    ``client_options`` is forwarded as-is to ``boto3.client`` and wins over
    the named fields.
    """

    key: str
    secret: str
    bucket: str
    region: str | None = None
    endpoint_url: str | None = None
    use_ssl: bool = True
    addressing_style: str = "path"
    presign_expires_in: int = DEFAULT_SIGNED_URL_EXPIRES_IN
    client_options: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "S3StorageConfig":
        return cls(
            key=settings.S3_ACCESS_KEY_ID or "",
            secret=settings.S3_SECRET_ACCESS_KEY or "",
            bucket=settings.S3_BUCKET or "",
            region=settings.S3_REGION,
            endpoint_url=settings.S3_ENDPOINT_URL,
            use_ssl=bool(settings.S3_USE_SSL),
            addressing_style=settings.S3_ADDRESSING_STYLE,
            presign_expires_in=int(settings.STORAGE_PRESIGN_EXPIRES_SECONDS),
        )


def _is_not_found(error: BaseException) -> bool:
    return status_code(error) == 404 or error_name(error) in _NOT_FOUND_CODES


class S3StorageDriver:
    """S3-compatible storage driver bound to a single bucket.

    Supports AWS S3, MinIO, and other S3-compatible services.
    Uses boto3 for all storage operations.
    """

    def __init__(self, config: S3StorageConfig, *, enable_metrics: bool = True) -> None:
        """Initialize the driver and its boto3 client.

        No network I/O happens here; boto3 only validates the configuration.

        Args:
            config: Credentials, bucket name and connection options.
            enable_metrics: Record Prometheus metrics for backend calls.
        """
        self._bucket = config.bucket
        self._presign_expires_in = int(config.presign_expires_in)
        self._enable_metrics = enable_metrics
        self._client = self._build_client(config)

    @staticmethod
    def _build_client(config: S3StorageConfig) -> Any:
        """Create a boto3 S3 client from the driver config."""
        addressing_style = (config.addressing_style or "path").strip().lower()
        options: dict[str, Any] = {
            "endpoint_url": config.endpoint_url,
            "region_name": config.region,
            "aws_access_key_id": config.key,
            "aws_secret_access_key": config.secret,
            "use_ssl": bool(config.use_ssl),
            "config": Config(s3={"addressing_style": addressing_style}),
        }
        options.update(config.client_options)
        return boto3.client("s3", **options)

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def driver(self) -> Any:
        """The underlying boto3 client, for backend-specific calls."""
        return self._client

    async def _invoke(
        self,
        operation: str,
        location: str,
        method: Callable[..., Any],
        *,
        absent_ok: bool = False,
        **params: Any,
    ) -> Any:
        logger.debug(
            "storage_call operation=%s bucket=%s location=%s",
            operation,
            self._bucket,
            location,
        )
        start = time.perf_counter()
        outcome = "error"
        try:
            result = await asyncio.to_thread(method, **params)
            outcome = "ok"
            return result
        except Exception as exc:
            if absent_ok and _is_not_found(exc):
                outcome = "not_found"
            raise
        finally:
            if self._enable_metrics:
                record_operation(operation, outcome, time.perf_counter() - start)

    def _read_object(self, **params: Any) -> tuple[Any, bytes]:
        """Fetch an object and drain its body in one worker-thread call."""
        result = self._client.get_object(**params)
        return result, result["Body"].read()

    def _fail(self, operation: str, error: BaseException, location: str) -> StorageError:
        translated = translate_error(error, location, self._bucket)
        logger.warning(
            "storage_error operation=%s bucket=%s location=%s code=%s",
            operation,
            self._bucket,
            location,
            error_name(error),
            extra={
                "extra": {
                    "operation": operation,
                    "bucket": self._bucket,
                    "location": location,
                    "code": error_name(error),
                    "kind": type(translated).__name__,
                }
            },
        )
        return translated

    async def copy(self, src: str, dest: str) -> Response:
        """Server-side copy of ``src`` to ``dest`` within the bucket."""
        try:
            result = await self._invoke(
                "copy",
                src,
                self._client.copy_object,
                Bucket=self._bucket,
                Key=dest,
                CopySource=f"{self._bucket}/{src}",
            )
        except Exception as exc:
            raise self._fail("copy", exc, src) from exc
        return Response(raw=result)

    async def move(self, src: str, dest: str) -> Response:
        """Copy ``src`` to ``dest``, then delete ``src``.

        Not atomic: a failed copy leaves ``src`` untouched, a failed delete
        leaves both objects in place. The error of the failing step is raised.
        """
        await self.copy(src, dest)
        await self.delete(src)
        return Response(raw=None)

    async def delete(self, location: str) -> DeleteResponse:
        """Delete an object; S3 does not say whether it existed."""
        try:
            result = await self._invoke(
                "delete",
                location,
                self._client.delete_object,
                Bucket=self._bucket,
                Key=location,
            )
        except Exception as exc:
            raise self._fail("delete", exc, location) from exc
        return DeleteResponse(raw=result, was_deleted=None)

    async def exists(self, location: str) -> ExistsResponse:
        """Probe object metadata; a 404 means the object is absent."""
        try:
            result = await self._invoke(
                "exists",
                location,
                self._client.head_object,
                absent_ok=True,
                Bucket=self._bucket,
                Key=location,
            )
        except Exception as exc:
            if _is_not_found(exc):
                return ExistsResponse(exists=False, raw=exc)
            raise self._fail("exists", exc, location) from exc
        return ExistsResponse(exists=True, raw=result)

    async def get(self, location: str, encoding: str = "utf-8") -> ContentResponse[str]:
        """Read an object and decode it with ``encoding``."""
        buffer = await self.get_buffer(location)
        return ContentResponse(content=buffer.content.decode(encoding), raw=buffer.raw)

    async def get_buffer(self, location: str) -> ContentResponse[bytes]:
        """Read the full object body into memory."""
        try:
            result, body = await self._invoke(
                "get_buffer",
                location,
                self._read_object,
                Bucket=self._bucket,
                Key=location,
            )
        except Exception as exc:
            raise self._fail("get_buffer", exc, location) from exc
        return ContentResponse(content=bytes(body), raw=result)

    async def get_stat(self, location: str) -> StatResponse:
        """Get object size and last modification time."""
        try:
            result = await self._invoke(
                "get_stat",
                location,
                self._client.head_object,
                Bucket=self._bucket,
                Key=location,
            )
        except Exception as exc:
            raise self._fail("get_stat", exc, location) from exc

        size = result.get("ContentLength")
        return StatResponse(
            size=int(size) if size is not None else 0,
            modified=result.get("LastModified"),
            raw=result,
        )

    async def get_stream(self, location: str) -> Any:
        """Return the live ``StreamingBody`` of an object."""
        try:
            result = await self._invoke(
                "get_stream",
                location,
                self._client.get_object,
                Bucket=self._bucket,
                Key=location,
            )
        except Exception as exc:
            raise self._fail("get_stream", exc, location) from exc
        return result["Body"]

    async def put(
        self, location: str, content: PutContent, *, content_type: str | None = None
    ) -> Response:
        """Write or overwrite an object."""
        params: dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": location,
            "Body": content,
        }
        if content_type:
            params["ContentType"] = content_type

        try:
            result = await self._invoke(
                "put", location, self._client.put_object, **params
            )
        except Exception as exc:
            raise self._fail("put", exc, location) from exc
        return Response(raw=result)

    async def get_signed_url(
        self,
        location: str,
        *,
        expires_in: int | None = None,
        filename: str | None = None,
    ) -> SignedUrlResponse:
        """Generate a pre-signed GET URL; signing is local, no request is sent."""
        params: dict[str, Any] = {"Bucket": self._bucket, "Key": location}
        if filename:
            # Escape quotes in filename for Content-Disposition header
            safe_filename = filename.replace('"', '\\"')
            params["ResponseContentDisposition"] = (
                f'attachment; filename="{safe_filename}"'
            )
        if expires_in is None:
            expires_in = self._presign_expires_in

        try:
            url = self._client.generate_presigned_url(
                "get_object",
                Params=params,
                ExpiresIn=int(expires_in),
            )
        except Exception as exc:
            raise self._fail("get_signed_url", exc, location) from exc

        return SignedUrlResponse(signed_url=str(url), raw=url)

    async def flat_list(self, prefix: str = "") -> AsyncIterator[FileListEntry]:
        """Yield every object under ``prefix``, one page fetch at a time."""
        continuation_token: str | None = None
        while True:
            params: dict[str, Any] = {
                "Bucket": self._bucket,
                "Prefix": prefix,
                "MaxKeys": LIST_PAGE_SIZE,
            }
            if continuation_token:
                params["ContinuationToken"] = continuation_token

            try:
                response = await self._invoke(
                    "flat_list", prefix, self._client.list_objects_v2, **params
                )
            except Exception as exc:
                raise self._fail("flat_list", exc, prefix) from exc

            continuation_token = response.get("NextContinuationToken")
            for entry in response.get("Contents") or ():
                yield FileListEntry(path=str(entry["Key"]), raw=entry)

            if not continuation_token:
                return
