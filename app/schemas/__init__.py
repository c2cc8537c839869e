"""Pydantic request/response schemas for the API."""

from app.schemas.case import (
    AttachmentResponse,
    CaseCreateRequest,
    CaseNoteCreateRequest,
    CaseResponse,
    CaseStatusUpdateRequest,
    CaseUpdateRequest,
    StoredFileResponse,
)
from app.schemas.common import (
    ApiResponse,
    CamelModel,
    ErrorResponse,
    MessageResponse,
    PaginatedResponse,
    Pagination,
)
from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.note import NoteCreateRequest, NoteResponse, NoteUpdateRequest

__all__ = [
    "ApiResponse",
    "AttachmentResponse",
    "CamelModel",
    "CaseCreateRequest",
    "CaseNoteCreateRequest",
    "CaseResponse",
    "CaseStatusUpdateRequest",
    "CaseUpdateRequest",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "NoteCreateRequest",
    "NoteResponse",
    "NoteUpdateRequest",
    "PaginatedResponse",
    "Pagination",
    "ReadinessResponse",
    "StoredFileResponse",
]
