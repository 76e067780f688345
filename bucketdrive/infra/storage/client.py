"""Storage driver protocol and response types.

This module defines the generic storage contract consumed by host
applications. Each backend variant implements the ``StorageDriver`` protocol
and returns the response envelopes defined here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import IO, Any, AsyncIterator, Generic, Protocol, TypeVar, Union

ContentT = TypeVar("ContentT", bytes, str)

PutContent = Union[bytes, str, IO[bytes]]

DEFAULT_SIGNED_URL_EXPIRES_IN = 900


@dataclass(frozen=True, slots=True)
class Response:
    """Result of an operation with nothing to report beyond the backend result."""

    raw: Any


@dataclass(frozen=True, slots=True)
class ContentResponse(Generic[ContentT]):
    """Object body returned by read operations."""

    content: ContentT
    raw: Any


@dataclass(frozen=True, slots=True)
class ExistsResponse:
    """Result of an existence probe.

    ``raw`` holds the backend error itself when the object was not found.
    """

    exists: bool
    raw: Any


@dataclass(frozen=True, slots=True)
class StatResponse:
    """Object metadata."""

    size: int
    modified: datetime | None
    raw: Any


@dataclass(frozen=True, slots=True)
class SignedUrlResponse:
    """Time-limited pre-signed retrieval URL."""

    signed_url: str
    raw: Any


@dataclass(frozen=True, slots=True)
class FileListEntry:
    """One object yielded while listing a prefix."""

    path: str
    raw: Any


@dataclass(frozen=True, slots=True)
class DeleteResponse:
    """Result of a delete.

    The backend does not report whether the object existed beforehand, so
    ``was_deleted`` is always ``None`` (unknown).
    """

    raw: Any
    was_deleted: bool | None = None


class StorageDriver(Protocol):
    """Protocol defining the generic storage contract.

    Implementations are bound to a single bucket and must provide all methods
    defined here. Failures are raised as ``StorageError`` subclasses.
    """

    async def copy(self, src: str, dest: str) -> Response:
        """Copy an object within the bucket.

        Args:
            src: Location of the object to copy.
            dest: Location of the new object.

        Raises:
            StorageError: If the copy fails.
        """
        ...

    async def move(self, src: str, dest: str) -> Response:
        """Move an object as a copy followed by a delete of the source.

        The two steps are not atomic. If the copy fails the source is left
        untouched; if the delete fails both objects remain.

        Args:
            src: Location of the object to move.
            dest: Destination location.

        Returns:
            Response whose ``raw`` is ``None``.

        Raises:
            StorageError: From whichever step failed.
        """
        ...

    async def delete(self, location: str) -> DeleteResponse:
        """Delete an object.

        Raises:
            StorageError: If the operation fails.
        """
        ...

    async def exists(self, location: str) -> ExistsResponse:
        """Check whether an object exists.

        Returns:
            ExistsResponse, with ``exists=False`` when the backend reports the
            object as absent.

        Raises:
            StorageError: For any failure other than "not found".
        """
        ...

    async def get(self, location: str, encoding: str = "utf-8") -> ContentResponse[str]:
        """Read an object and decode it as text.

        Raises:
            StorageError: If the read fails.
        """
        ...

    async def get_buffer(self, location: str) -> ContentResponse[bytes]:
        """Read the full object body as bytes.

        Raises:
            StorageError: If the read fails.
        """
        ...

    async def get_stat(self, location: str) -> StatResponse:
        """Get object size and last modification time.

        Raises:
            StorageError: If the object doesn't exist or the operation fails.
        """
        ...

    async def get_stream(self, location: str) -> Any:
        """Return a readable byte stream over the object body.

        The body is not buffered; the caller reads and closes it.

        Raises:
            StorageError: If the read fails.
        """
        ...

    async def put(
        self, location: str, content: PutContent, *, content_type: str | None = None
    ) -> Response:
        """Write or overwrite an object.

        Args:
            location: Object key.
            content: Bytes, text or a binary file-like object.
            content_type: Optional MIME type of the object.

        Raises:
            StorageError: If the write fails.
        """
        ...

    async def get_signed_url(
        self,
        location: str,
        *,
        expires_in: int | None = None,
        filename: str | None = None,
    ) -> SignedUrlResponse:
        """Generate a pre-signed URL for downloading an object.

        Args:
            location: Object key.
            expires_in: URL expiration time in seconds; ``None`` uses the
                driver's configured default (``DEFAULT_SIGNED_URL_EXPIRES_IN``
                unless overridden).
            filename: Optional filename for the Content-Disposition header.

        Raises:
            StorageError: If URL generation fails.
        """
        ...

    def flat_list(self, prefix: str = "") -> AsyncIterator[FileListEntry]:
        """Lazily list every object under ``prefix``.

        Pages are fetched one at a time as the iterator is consumed.

        Raises:
            StorageError: From the page fetch that failed; iteration stops.
        """
        ...
