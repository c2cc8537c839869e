"""DTOs for case use cases (no dependency on ORM)."""

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, BinaryIO

from app.application.dtos.note import NoteResult
from app.domain.entities.attachment import Attachment
from app.domain.entities.case import CaseEntity
from app.domain.enums import CaseStatus, OnBehalfOf


@dataclass(frozen=True)
class CaseCreate:
    """Input for creating a case. The service assigns id, owner and timestamps."""

    title: str
    case_no: str
    case_type: str
    court_name: str
    case_year: int
    on_behalf_of: OnBehalfOf
    party_name: str
    contact_number: str
    respondent: str
    lawyer: str
    next_hearing: date
    status: CaseStatus = CaseStatus.PENDING
    advocate_contact_number: str | None = None
    adverse_party_advocate_name: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class CaseUpdate:
    """Partial update; None means "leave unchanged"."""

    title: str | None = None
    case_no: str | None = None
    case_type: str | None = None
    court_name: str | None = None
    case_year: int | None = None
    on_behalf_of: OnBehalfOf | None = None
    party_name: str | None = None
    contact_number: str | None = None
    respondent: str | None = None
    lawyer: str | None = None
    next_hearing: date | None = None
    advocate_contact_number: str | None = None
    adverse_party_advocate_name: str | None = None
    description: str | None = None

    def changes(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class CasePage:
    """One page of a user's cases plus the total across all pages."""

    items: list[CaseEntity]
    total: int
    page: int
    page_size: int

    @property
    def pages(self) -> int:
        return -(-self.total // self.page_size) if self.page_size else 0


@dataclass(frozen=True)
class UploadedFile:
    """One file of an upload batch as received from the transport layer."""

    filename: str
    content_type: str | None
    file_data: BinaryIO


@dataclass(frozen=True)
class SectionItem:
    """A section attachment, with the live note when it references one."""

    attachment: Attachment
    note: NoteResult | None = None
