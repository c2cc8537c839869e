"""Local filesystem storage with path validation and atomic writes."""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any, BinaryIO, cast
from urllib.parse import quote

import aiofiles
import aiofiles.os

from app.application.interfaces.storage import StorageUploadResult
from app.infrastructure.exceptions import (
    StorageAlreadyExistsError,
    StorageChecksumMismatchError,
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageUploadError,
)
from app.shared.utils.datetime import from_timestamp_utc, parse_iso_datetime, utc_now


class LocalStorageService:
    """Files under ``<root>/files``, JSON sidecars under ``<root>/.meta``.

    Only ``files_dir`` is served publicly (StaticFiles mount), so sidecar
    metadata never leaks. References are validated against the root;
    writes go to a temp file that is renamed once its checksum matches.
    """

    CHUNK_SIZE = 64 * 1024

    def __init__(
        self,
        storage_root: str,
        public_path: str = "/uploads",
        base_url: str | None = None,
    ) -> None:
        self.storage_root = Path(storage_root).resolve()
        self.files_dir = self.storage_root / "files"
        self.meta_dir = self.storage_root / ".meta"
        self.public_path = "/" + public_path.strip("/")
        self.base_url = base_url.rstrip("/") if base_url else ""
        self.files_dir.mkdir(parents=True, exist_ok=True, mode=0o750)
        self.meta_dir.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, storage_ref: str) -> Path:
        """Resolve a ref under files_dir. Raises StoragePermissionError on traversal."""
        if not storage_ref or storage_ref.startswith("/"):
            raise StoragePermissionError(storage_ref, "path_validation")
        full_path = (self.files_dir / storage_ref).resolve()
        try:
            full_path.relative_to(self.files_dir)
        except ValueError as e:
            raise StoragePermissionError(storage_ref, "path_validation") from e
        if full_path == self.files_dir:
            raise StoragePermissionError(storage_ref, "path_validation")
        return full_path

    def _meta_path(self, file_path: Path) -> Path:
        relative = file_path.relative_to(self.files_dir)
        return self.meta_dir / relative.parent / (relative.name + ".json")

    async def _compute_checksum(self, file_path: Path) -> str:
        sha256 = hashlib.sha256()
        async with aiofiles.open(file_path, "rb") as f:
            while chunk := await f.read(self.CHUNK_SIZE):
                sha256.update(chunk)
        return sha256.hexdigest()

    async def _write_metadata(self, file_path: Path, metadata: dict[str, Any]) -> None:
        meta_path = self._meta_path(file_path)
        meta_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
        async with aiofiles.open(meta_path, "w") as f:
            await f.write(json.dumps(metadata, indent=2))

    async def _read_metadata(self, file_path: Path) -> dict[str, Any]:
        meta_path = self._meta_path(file_path)
        if not meta_path.exists():
            return {}
        async with aiofiles.open(meta_path) as f:
            result = json.loads(await f.read())
        return cast(dict[str, Any], result) if isinstance(result, dict) else {}

    def _prune_empty_dirs(self, start: Path, stop: Path) -> None:
        parent = start
        while parent != stop and stop in parent.parents:
            try:
                parent.rmdir()
            except OSError:
                break
            parent = parent.parent

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> StorageUploadResult:
        """Atomic write with checksum validation. Idempotent for identical content."""
        target_path = self._get_full_path(storage_ref)
        try:
            if target_path.exists():
                existing_checksum = await self._compute_checksum(target_path)
                if existing_checksum != expected_checksum:
                    raise StorageAlreadyExistsError(storage_ref)
                existing_meta = await self._read_metadata(target_path)
                uploaded_at = existing_meta.get("uploaded_at")
                return {
                    "storage_ref": storage_ref,
                    "checksum": existing_checksum,
                    "size": target_path.stat().st_size,
                    "uploaded_at": parse_iso_datetime(uploaded_at)
                    if uploaded_at
                    else from_timestamp_utc(target_path.stat().st_mtime),
                }

            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            content = file_data.read()
            temp_fd, temp_name = tempfile.mkstemp(
                dir=target_path.parent, prefix=".tmp_", suffix=target_path.suffix
            )
            os.close(temp_fd)
            temp_path = Path(temp_name)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(content)
                computed = await self._compute_checksum(temp_path)
                if computed != expected_checksum:
                    raise StorageChecksumMismatchError(
                        storage_ref, expected_checksum, computed
                    )
                os.chmod(temp_path, 0o640)
                os.replace(temp_path, target_path)
            finally:
                if temp_path.exists():
                    temp_path.unlink()

            uploaded_at = utc_now()
            await self._write_metadata(
                target_path,
                {
                    "storage_ref": storage_ref,
                    "checksum": computed,
                    "size": len(content),
                    "content_type": content_type,
                    "uploaded_at": uploaded_at.isoformat(),
                    "custom": metadata or {},
                },
            )
            return {
                "storage_ref": storage_ref,
                "checksum": computed,
                "size": len(content),
                "uploaded_at": uploaded_at,
            }
        except (StorageChecksumMismatchError, StorageAlreadyExistsError):
            raise
        except OSError as e:
            raise StorageUploadError(storage_ref, str(e)) from e

    async def download(self, storage_ref: str) -> bytes:
        file_path = self._get_full_path(storage_ref)
        if not file_path.is_file():
            raise StorageNotFoundError(storage_ref)
        try:
            async with aiofiles.open(file_path, "rb") as f:
                return cast(bytes, await f.read())
        except OSError as e:
            raise StorageDownloadError(storage_ref, str(e)) from e

    async def delete(self, storage_ref: str) -> bool:
        """Delete file and sidecar, pruning empty directories. False if absent."""
        file_path = self._get_full_path(storage_ref)
        if not file_path.is_file():
            return False
        meta_path = self._meta_path(file_path)
        try:
            await aiofiles.os.remove(file_path)
            if meta_path.exists():
                await aiofiles.os.remove(meta_path)
        except OSError as e:
            raise StorageDeleteError(storage_ref, str(e)) from e
        self._prune_empty_dirs(file_path.parent, self.files_dir)
        self._prune_empty_dirs(meta_path.parent, self.meta_dir)
        return True

    async def exists(self, storage_ref: str) -> bool:
        try:
            return self._get_full_path(storage_ref).is_file()
        except StoragePermissionError:
            return False

    async def get_metadata(self, storage_ref: str) -> dict[str, Any]:
        file_path = self._get_full_path(storage_ref)
        if not file_path.is_file():
            raise StorageNotFoundError(storage_ref)
        stat = file_path.stat()
        stored = await self._read_metadata(file_path)
        return {
            "size": stat.st_size,
            "content_type": stored.get("content_type", "application/octet-stream"),
            "checksum": stored.get("checksum"),
            "last_modified": from_timestamp_utc(stat.st_mtime).isoformat(),
            "custom": stored.get("custom", {}),
        }

    async def resolve_url(self, storage_ref: str) -> str:
        """Public URL under the static mount, e.g. ``/uploads/users/...``."""
        self._get_full_path(storage_ref)
        return f"{self.base_url}{self.public_path}/{quote(storage_ref)}"
