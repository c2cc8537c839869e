"""Attachment records embedded in case sections.

An attachment is either a stored file or a reference to a note row. The
two shapes are separate frozen dataclasses sharing a ``type``
discriminator, so a record can never carry a file descriptor and a note
id at the same time. Records are persisted as JSON inside the case row;
``attachment_from_dict`` rejects payloads that do not match their type.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar

from app.domain.enums import AttachmentType
from app.shared.utils.datetime import ensure_utc, parse_iso_datetime


def _as_datetime(value: Any, field_name: str) -> datetime:
    if isinstance(value, datetime):
        result = ensure_utc(value)
    elif isinstance(value, str) and value:
        result = parse_iso_datetime(value)
    else:
        raise ValueError(f"Attachment field '{field_name}' must be a timestamp")
    assert result is not None
    return result


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(f"Attachment field '{key}' must be a non-empty string")
    return value


@dataclass(frozen=True)
class StoredFile:
    """Descriptor of a physical file held by the file store."""

    id: str
    name: str
    url: str
    storage_ref: str
    mimetype: str
    size: int
    uploaded_at: datetime
    checksum: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "storage_ref": self.storage_ref,
            "mimetype": self.mimetype,
            "size": self.size,
            "checksum": self.checksum,
            "uploaded_at": self.uploaded_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoredFile":
        size = data.get("size")
        if not isinstance(size, int) or size < 0:
            raise ValueError("Attachment field 'size' must be a non-negative integer")
        return cls(
            id=_require_str(data, "id"),
            name=_require_str(data, "name"),
            url=_require_str(data, "url"),
            storage_ref=_require_str(data, "storage_ref"),
            mimetype=_require_str(data, "mimetype"),
            size=size,
            uploaded_at=_as_datetime(data.get("uploaded_at"), "uploaded_at"),
            checksum=data.get("checksum"),
        )


@dataclass(frozen=True)
class FileAttachment:
    """An uploaded file shown in a case section."""

    type: ClassVar[AttachmentType] = AttachmentType.FILE

    name: str
    file: StoredFile
    added_at: datetime

    @property
    def ref_id(self) -> str:
        return self.file.id

    def matches(self, ref: str) -> bool:
        """True when ``ref`` is the file id, the full ref or url, or the filename segment.

        Only the last path segment is compared, so owner, case and section
        segments shared by every file in a case never match.
        """
        if not ref:
            return False
        if ref in (self.file.id, self.file.storage_ref, self.file.url):
            return True
        return ref in (
            self.file.storage_ref.rsplit("/", 1)[-1],
            self.file.url.rsplit("/", 1)[-1],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "name": self.name,
            "added_at": self.added_at.isoformat(),
            "file": self.file.to_dict(),
        }


@dataclass(frozen=True)
class NoteAttachment:
    """A note row listed in a case section."""

    type: ClassVar[AttachmentType] = AttachmentType.NOTE

    name: str
    note_id: str
    added_at: datetime

    @property
    def ref_id(self) -> str:
        return self.note_id

    def matches(self, ref: str) -> bool:
        return bool(ref) and ref == self.note_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "name": self.name,
            "added_at": self.added_at.isoformat(),
            "note_id": self.note_id,
        }


Attachment = FileAttachment | NoteAttachment


def attachment_from_dict(data: dict[str, Any]) -> Attachment:
    """Decode one stored attachment record.

    Raises:
        ValueError: If the discriminator is unknown or the payload does not
            match it (a file record without ``file``, a note record carrying
            a file descriptor, and so on).
    """
    if not isinstance(data, dict):
        raise ValueError("Attachment record must be an object")
    raw_type = data.get("type")
    name = _require_str(data, "name")
    added_at = _as_datetime(data.get("added_at"), "added_at")
    if raw_type == AttachmentType.FILE.value:
        if data.get("note_id") is not None:
            raise ValueError("File attachment must not carry a note_id")
        file_data = data.get("file")
        if not isinstance(file_data, dict):
            raise ValueError("File attachment requires a file descriptor")
        return FileAttachment(
            name=name, file=StoredFile.from_dict(file_data), added_at=added_at
        )
    if raw_type == AttachmentType.NOTE.value:
        if data.get("file") is not None:
            raise ValueError("Note attachment must not carry a file descriptor")
        return NoteAttachment(
            name=name, note_id=_require_str(data, "note_id"), added_at=added_at
        )
    raise ValueError(f"Unknown attachment type: {raw_type!r}")
