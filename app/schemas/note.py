"""Note API schemas."""

from datetime import datetime

from pydantic import Field

from app.application.dtos.note import NoteResult
from app.schemas.common import CamelModel


class NoteCreateRequest(CamelModel):
    """Body for POST /notes. Both fields are required."""

    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)


class NoteUpdateRequest(CamelModel):
    """Body for PUT /notes/{id}; omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = None


class NoteResponse(CamelModel):
    id: str
    title: str
    content: str
    user_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_result(cls, note: NoteResult) -> "NoteResponse":
        return cls.model_validate(note)
