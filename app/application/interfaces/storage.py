"""File store port.

Storage references are forward-slash relative paths such as
``users/{owner}/cases/{case}/{section}/{file_id}/{filename}``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, BinaryIO, Protocol, TypedDict


class StorageUploadResult(TypedDict):
    storage_ref: str
    checksum: str
    size: int
    uploaded_at: datetime


class IStorageService(Protocol):
    """Protocol implemented by the local and S3 storage backends."""

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> StorageUploadResult:
        """Store a file, verifying its SHA-256 checksum.

        Raises:
            StorageChecksumMismatchError: Content does not match the checksum.
            StorageAlreadyExistsError: The ref exists with different content.
            StorageUploadError: Any other write failure.
        """

    async def download(self, storage_ref: str) -> bytes:
        """Return the file content. Raises StorageNotFoundError."""

    async def delete(self, storage_ref: str) -> bool:
        """Delete a file. Returns False when it did not exist."""

    async def exists(self, storage_ref: str) -> bool:
        """Return whether a file is stored under storage_ref."""

    async def get_metadata(self, storage_ref: str) -> dict[str, Any]:
        """Return size, content type, checksum and timestamps of a stored file."""

    async def resolve_url(self, storage_ref: str) -> str:
        """Return the URL clients use to fetch the file."""
