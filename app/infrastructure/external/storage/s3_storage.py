"""S3-compatible object storage (AWS S3, MinIO, Spaces) with checksums."""

from __future__ import annotations

import asyncio
import hashlib
from typing import Any, BinaryIO
from urllib.parse import quote

import boto3
from botocore.exceptions import ClientError

from app.application.interfaces.storage import StorageUploadResult
from app.infrastructure.exceptions import (
    StorageAlreadyExistsError,
    StorageChecksumMismatchError,
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StorageUploadError,
)
from app.shared.utils.datetime import ensure_utc

_MISSING_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _is_missing(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in _MISSING_CODES


class S3StorageService:
    """S3 storage with server-side encryption; boto3 runs in a worker thread.

    Object keys are the storage references. The SHA-256 of each object is
    kept in its ``sha256`` user metadata.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        public_base_url: str | None = None,
    ) -> None:
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            **extra,
        )

    def _head(self, storage_ref: str) -> dict[str, Any] | None:
        try:
            return self._client.head_object(Bucket=self.bucket, Key=storage_ref)
        except ClientError as e:
            if _is_missing(e):
                return None
            raise

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> StorageUploadResult:
        """Upload with checksum validation. Idempotent for identical content."""

        def _upload() -> StorageUploadResult:
            head = self._head(storage_ref)
            if head is not None:
                existing = (head.get("Metadata") or {}).get("sha256")
                if existing != expected_checksum:
                    raise StorageAlreadyExistsError(storage_ref)
                return {
                    "storage_ref": storage_ref,
                    "checksum": existing,
                    "size": head["ContentLength"],
                    "uploaded_at": ensure_utc(head["LastModified"]),
                }
            body = file_data.read()
            computed = hashlib.sha256(body).hexdigest()
            if computed != expected_checksum:
                raise StorageChecksumMismatchError(storage_ref, expected_checksum, computed)
            meta = {"sha256": computed}
            for k, v in (metadata or {}).items():
                meta[k.lower().replace("_", "-")] = v
            self._client.put_object(
                Bucket=self.bucket,
                Key=storage_ref,
                Body=body,
                ContentType=content_type,
                ServerSideEncryption="AES256",
                Metadata=meta,
            )
            stored = self._client.head_object(Bucket=self.bucket, Key=storage_ref)
            return {
                "storage_ref": storage_ref,
                "checksum": computed,
                "size": len(body),
                "uploaded_at": ensure_utc(stored["LastModified"]),
            }

        try:
            return await asyncio.to_thread(_upload)
        except (StorageChecksumMismatchError, StorageAlreadyExistsError):
            raise
        except ClientError as e:
            raise StorageUploadError(storage_ref, str(e)) from e

    async def download(self, storage_ref: str) -> bytes:
        def _get() -> bytes:
            resp = self._client.get_object(Bucket=self.bucket, Key=storage_ref)
            return resp["Body"].read()

        try:
            return await asyncio.to_thread(_get)
        except ClientError as e:
            if _is_missing(e):
                raise StorageNotFoundError(storage_ref) from e
            raise StorageDownloadError(storage_ref, str(e)) from e

    async def delete(self, storage_ref: str) -> bool:
        """Delete object. False if it did not exist."""

        def _delete() -> bool:
            if self._head(storage_ref) is None:
                return False
            self._client.delete_object(Bucket=self.bucket, Key=storage_ref)
            return True

        try:
            return await asyncio.to_thread(_delete)
        except ClientError as e:
            raise StorageDeleteError(storage_ref, str(e)) from e

    async def exists(self, storage_ref: str) -> bool:
        try:
            return await asyncio.to_thread(self._head, storage_ref) is not None
        except ClientError as e:
            raise StorageDownloadError(storage_ref, str(e)) from e

    async def get_metadata(self, storage_ref: str) -> dict[str, Any]:
        try:
            head = await asyncio.to_thread(self._head, storage_ref)
        except ClientError as e:
            raise StorageDownloadError(storage_ref, str(e)) from e
        if head is None:
            raise StorageNotFoundError(storage_ref)
        meta = head.get("Metadata") or {}
        return {
            "size": head["ContentLength"],
            "content_type": head.get("ContentType", "application/octet-stream"),
            "checksum": meta.get("sha256"),
            "last_modified": head["LastModified"].isoformat(),
            "custom": meta,
        }

    async def resolve_url(self, storage_ref: str) -> str:
        """Stable public URL (CDN base, custom endpoint, or AWS virtual host)."""
        key = quote(storage_ref)
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"
