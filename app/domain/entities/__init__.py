"""Domain entities: cases and their section attachments."""

from app.domain.entities.attachment import (
    Attachment,
    FileAttachment,
    NoteAttachment,
    StoredFile,
    attachment_from_dict,
)
from app.domain.entities.case import CaseEntity, empty_sections, parse_section

__all__ = [
    "Attachment",
    "FileAttachment",
    "NoteAttachment",
    "StoredFile",
    "attachment_from_dict",
    "CaseEntity",
    "empty_sections",
    "parse_section",
]
