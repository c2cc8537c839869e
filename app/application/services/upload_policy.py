"""Upload batch validation and file helpers.

A batch is validated as a whole before anything is stored: one bad file
rejects every file in the request.
"""

from __future__ import annotations

import asyncio
import hashlib
import os
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, BinaryIO

from app.domain.exceptions import (
    FileTooLargeException,
    UnsupportedMediaTypeException,
    ValidationException,
)

if TYPE_CHECKING:
    from app.application.dtos.case import UploadedFile
    from app.core.config import Settings

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.\- ()]")
_WINDOWS_RESERVED = frozenset(
    {"con", "prn", "aux", "nul"}
    | {f"com{i}" for i in range(1, 10)}
    | {f"lpt{i}" for i in range(1, 10)}
)
MAX_FILENAME_LENGTH = 200


def rewind_if_seekable(file_data: BinaryIO) -> None:
    """Reset file position to start if stream is seekable."""
    if getattr(file_data, "seekable", lambda: False)():
        file_data.seek(0)


def sanitize_filename(filename: str) -> str:
    """Reduce a client filename to a single safe path segment.

    Drops directories (either separator), NUL bytes, leading/trailing dots
    and spaces, and characters outside word chars, ``.-()`` and space.
    Reserved device names get a leading underscore.

    Raises:
        ValueError: If nothing usable is left.
    """
    name = os.path.basename(filename.replace("\\", "/"))
    name = name.replace("\x00", "")
    name = _UNSAFE_FILENAME_CHARS.sub("_", name).strip(". ")
    if not name:
        raise ValueError("Filename is empty or invalid after sanitization")
    stem, ext = os.path.splitext(name)
    if stem.lower() in _WINDOWS_RESERVED:
        name = f"_{name}"
    if len(name) > MAX_FILENAME_LENGTH:
        name = stem[: MAX_FILENAME_LENGTH - len(ext)] + ext
    return name


def compute_checksum_and_size_sync(file_data: BinaryIO) -> tuple[str, int]:
    """Blocking single pass over file_data. Returns (sha256 hex, byte count)."""
    rewind_if_seekable(file_data)
    sha256 = hashlib.sha256()
    total = 0
    while chunk := file_data.read(65536):
        sha256.update(chunk)
        total += len(chunk)
    rewind_if_seekable(file_data)
    return sha256.hexdigest(), total


@dataclass(frozen=True)
class ValidatedUpload:
    """An upload that passed the policy, with its digest and size."""

    source: UploadedFile
    filename: str
    content_type: str
    checksum: str
    size: int


@dataclass(frozen=True)
class UploadPolicy:
    """Limits applied to one upload request."""

    max_file_size: int = 10 * 1024 * 1024
    max_files: int = 10
    allowed_extensions: frozenset[str] = frozenset(
        {"jpeg", "jpg", "png", "gif", "webp", "pdf"}
    )
    allowed_mime_types: frozenset[str] = frozenset(
        {"image/jpeg", "image/png", "image/gif", "image/webp", "application/pdf"}
    )

    @classmethod
    def from_settings(cls, settings: Settings) -> UploadPolicy:
        return cls(
            max_file_size=settings.max_file_size,
            max_files=settings.max_files_per_upload,
            allowed_extensions=settings.upload_extensions,
            allowed_mime_types=settings.upload_mime_types,
        )

    def is_allowed_type(self, filename: str, content_type: str | None) -> bool:
        """Both the extension and the declared MIME type must be accepted."""
        ext = os.path.splitext(filename)[1].lstrip(".").lower()
        mime = (content_type or "").split(";")[0].strip().lower()
        return ext in self.allowed_extensions and mime in self.allowed_mime_types

    async def validate_batch(self, files: list[UploadedFile]) -> list[ValidatedUpload]:
        """Validate every file of the batch; raises on the first violation.

        Raises:
            ValidationException: Empty batch, too many files, or a filename
                that sanitizes to nothing.
            UnsupportedMediaTypeException: A file is not an accepted type.
            FileTooLargeException: A file is larger than max_file_size.
        """
        if not files:
            raise ValidationException("No files uploaded", field="files")
        if len(files) > self.max_files:
            raise ValidationException(
                f"At most {self.max_files} files can be uploaded at once",
                field="files",
            )
        validated: list[ValidatedUpload] = []
        for upload in files:
            try:
                safe_name = sanitize_filename(upload.filename or "")
            except ValueError as e:
                raise ValidationException(str(e), field="files") from e
            if not self.is_allowed_type(safe_name, upload.content_type):
                raise UnsupportedMediaTypeException(upload.filename, upload.content_type)
            checksum, size = await asyncio.to_thread(
                compute_checksum_and_size_sync, upload.file_data
            )
            if size > self.max_file_size:
                raise FileTooLargeException(upload.filename, size, self.max_file_size)
            validated.append(
                ValidatedUpload(
                    source=upload,
                    filename=safe_name,
                    content_type=(upload.content_type or "").split(";")[0].strip().lower(),
                    checksum=checksum,
                    size=size,
                )
            )
        return validated
