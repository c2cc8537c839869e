"""Domain layer: entities, enums and exceptions.

No dependencies on infrastructure or presentation.
"""

from app.domain.entities import CaseEntity, FileAttachment, NoteAttachment
from app.domain.enums import AttachmentType, CaseStatus, OnBehalfOf, SectionName
from app.domain.exceptions import (
    AuthenticationException,
    CaseFileException,
    CaseNumberConflictException,
    FileTooLargeException,
    InvalidSectionException,
    ResourceNotFoundException,
    UnsupportedMediaTypeException,
    ValidationException,
)

__all__ = [
    "CaseEntity",
    "FileAttachment",
    "NoteAttachment",
    "AttachmentType",
    "CaseStatus",
    "OnBehalfOf",
    "SectionName",
    "AuthenticationException",
    "CaseFileException",
    "CaseNumberConflictException",
    "FileTooLargeException",
    "InvalidSectionException",
    "ResourceNotFoundException",
    "UnsupportedMediaTypeException",
    "ValidationException",
]
