"""Application DTOs."""

from app.application.dtos.case import (
    CaseCreate,
    CasePage,
    CaseUpdate,
    SectionItem,
    UploadedFile,
)
from app.application.dtos.note import NoteResult
from app.application.dtos.user import AuthenticatedUser

__all__ = [
    "AuthenticatedUser",
    "CaseCreate",
    "CasePage",
    "CaseUpdate",
    "NoteResult",
    "SectionItem",
    "UploadedFile",
]
