"""Case API schemas."""

from datetime import date, datetime
from typing import Any

from pydantic import Field, field_validator

from app.application.dtos.case import CaseCreate, CaseUpdate, SectionItem
from app.domain.entities.attachment import FileAttachment, NoteAttachment, StoredFile
from app.domain.entities.case import MAX_CASE_YEAR, MIN_CASE_YEAR, CaseEntity
from app.domain.enums import AttachmentType, CaseStatus, OnBehalfOf, SectionName
from app.schemas.common import CamelModel
from app.schemas.note import NoteResponse
from app.shared.utils.datetime import coerce_date


def _hearing_date(value: Any) -> Any:
    if isinstance(value, str) and value.strip():
        try:
            return coerce_date(value)
        except ValueError:
            return value
    return value


def _status_alias(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return CaseStatus.parse(value)
        except ValueError:
            return value
    return value


class CaseCreateRequest(CamelModel):
    """Body for POST /cases."""

    title: str = Field(..., min_length=1, max_length=255)
    case_no: str = Field(..., min_length=1, max_length=100)
    case_type: str = Field(..., alias="type", min_length=1, max_length=100)
    court_name: str = Field(..., min_length=1, max_length=255)
    case_year: int = Field(..., ge=MIN_CASE_YEAR, le=MAX_CASE_YEAR)
    on_behalf_of: OnBehalfOf
    party_name: str = Field(..., min_length=1, max_length=255)
    contact_number: str = Field(..., min_length=1, max_length=50)
    respondent: str = Field(..., min_length=1, max_length=255)
    lawyer: str = Field(..., min_length=1, max_length=255)
    next_hearing: date
    status: CaseStatus = CaseStatus.PENDING
    advocate_contact_number: str | None = Field(default=None, max_length=50)
    adverse_party_advocate_name: str | None = Field(default=None, max_length=255)
    description: str | None = None

    _hearing = field_validator("next_hearing", mode="before")(_hearing_date)
    _status = field_validator("status", mode="before")(_status_alias)

    def to_dto(self) -> CaseCreate:
        return CaseCreate(**self.model_dump(by_alias=False))


class CaseUpdateRequest(CamelModel):
    """Body for PUT /cases/{id}. Omitted or null fields stay unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    case_no: str | None = Field(default=None, min_length=1, max_length=100)
    case_type: str | None = Field(default=None, alias="type", min_length=1, max_length=100)
    court_name: str | None = Field(default=None, min_length=1, max_length=255)
    case_year: int | None = Field(default=None, ge=MIN_CASE_YEAR, le=MAX_CASE_YEAR)
    on_behalf_of: OnBehalfOf | None = None
    party_name: str | None = Field(default=None, min_length=1, max_length=255)
    contact_number: str | None = Field(default=None, min_length=1, max_length=50)
    respondent: str | None = Field(default=None, min_length=1, max_length=255)
    lawyer: str | None = Field(default=None, min_length=1, max_length=255)
    next_hearing: date | None = None
    advocate_contact_number: str | None = Field(default=None, max_length=50)
    adverse_party_advocate_name: str | None = Field(default=None, max_length=255)
    description: str | None = None

    _hearing = field_validator("next_hearing", mode="before")(_hearing_date)

    def to_dto(self) -> CaseUpdate:
        return CaseUpdate(**self.model_dump(by_alias=False))


class CaseStatusUpdateRequest(CamelModel):
    """Body for PATCH /cases/{id}/status. Checked against CaseStatus by the service."""

    status: str


class CaseNoteCreateRequest(CamelModel):
    """Body for POST /cases/{id}/notes."""

    section_type: str = Field(..., alias="sectionType")
    title: str = Field(..., min_length=1, max_length=255)
    content: str | None = ""


class StoredFileResponse(CamelModel):
    id: str
    name: str
    url: str
    storage_ref: str
    mimetype: str
    size: int
    checksum: str | None = None
    uploaded_at: datetime

    @classmethod
    def from_stored(cls, stored: StoredFile) -> "StoredFileResponse":
        return cls.model_validate(stored)


class AttachmentResponse(CamelModel):
    """One attachment of a section.

    File attachments carry the descriptor under ``fileId``; note
    attachments carry ``noteId`` and, when listed by section, the note.
    """

    name: str
    type: AttachmentType
    added_at: datetime
    file_id: StoredFileResponse | None = Field(default=None, alias="fileId")
    note_id: str | None = None
    note: NoteResponse | None = None

    @classmethod
    def from_item(cls, item: SectionItem) -> "AttachmentResponse":
        attachment = item.attachment
        if isinstance(attachment, FileAttachment):
            return cls(
                name=attachment.name,
                type=AttachmentType.FILE,
                added_at=attachment.added_at,
                file_id=StoredFileResponse.from_stored(attachment.file),
            )
        assert isinstance(attachment, NoteAttachment)
        return cls(
            name=attachment.name,
            type=AttachmentType.NOTE,
            added_at=attachment.added_at,
            note_id=attachment.note_id,
            note=NoteResponse.from_result(item.note) if item.note else None,
        )


class CaseResponse(CamelModel):
    id: str
    user_id: str
    title: str
    case_no: str
    case_type: str = Field(..., alias="type")
    court_name: str
    case_year: int
    on_behalf_of: OnBehalfOf
    party_name: str
    contact_number: str
    respondent: str
    lawyer: str
    next_hearing: date
    status: CaseStatus
    advocate_contact_number: str | None = None
    adverse_party_advocate_name: str | None = None
    description: str | None = None
    drafts: list[AttachmentResponse] = Field(default_factory=list)
    opponent_drafts: list[AttachmentResponse] = Field(default_factory=list)
    court_orders: list[AttachmentResponse] = Field(default_factory=list)
    evidence: list[AttachmentResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, case: CaseEntity) -> "CaseResponse":
        def section(name: SectionName) -> list[AttachmentResponse]:
            return [
                AttachmentResponse.from_item(SectionItem(attachment=a))
                for a in case.sections[name]
            ]

        return cls(
            id=case.id,
            user_id=case.user_id,
            title=case.title,
            case_no=case.case_no,
            case_type=case.case_type,
            court_name=case.court_name,
            case_year=case.case_year,
            on_behalf_of=case.on_behalf_of,
            party_name=case.party_name,
            contact_number=case.contact_number,
            respondent=case.respondent,
            lawyer=case.lawyer,
            next_hearing=case.next_hearing,
            status=case.status,
            advocate_contact_number=case.advocate_contact_number,
            adverse_party_advocate_name=case.adverse_party_advocate_name,
            description=case.description,
            drafts=section(SectionName.DRAFTS),
            opponent_drafts=section(SectionName.OPPONENT_DRAFTS),
            court_orders=section(SectionName.COURT_ORDERS),
            evidence=section(SectionName.EVIDENCE),
            created_at=case.created_at,
            updated_at=case.updated_at,
        )
