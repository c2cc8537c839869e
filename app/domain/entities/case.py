"""Case domain entity.

A case carries its descriptive fields, a status and four attachment
sections. Sections are a single mapping keyed by SectionName so every
operation that walks them does so in the same fixed order.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from app.domain.entities.attachment import Attachment, attachment_from_dict
from app.domain.enums import CaseStatus, OnBehalfOf, SectionName
from app.domain.exceptions import InvalidSectionException, ValidationException

MIN_CASE_YEAR = 1900
MAX_CASE_YEAR = 2100

REQUIRED_TEXT_FIELDS = (
    "title",
    "case_no",
    "case_type",
    "court_name",
    "party_name",
    "contact_number",
    "respondent",
    "lawyer",
)

UPDATABLE_FIELDS = frozenset({
    *REQUIRED_TEXT_FIELDS,
    "case_year",
    "on_behalf_of",
    "next_hearing",
    "advocate_contact_number",
    "adverse_party_advocate_name",
    "description",
})

Sections = dict[SectionName, list[Attachment]]


def empty_sections() -> Sections:
    """Four empty sections in display order."""
    return {section: [] for section in SectionName}


def parse_section(value: str | SectionName | None) -> SectionName:
    """Resolve a section name or raise InvalidSectionException."""
    if isinstance(value, SectionName):
        return value
    try:
        return SectionName(value)
    except ValueError:
        raise InvalidSectionException(value) from None


def sections_to_json(sections: Sections) -> dict[str, list[dict[str, Any]]]:
    return {
        section.value: [a.to_dict() for a in sections.get(section, [])]
        for section in SectionName
    }


def sections_from_json(data: dict[str, Any] | None) -> Sections:
    """Decode the stored sections map; missing keys become empty sections."""
    sections = empty_sections()
    for key, items in (data or {}).items():
        section = SectionName(key)
        sections[section] = [attachment_from_dict(item) for item in items or []]
    return sections


@dataclass
class CaseEntity:
    """Domain entity for a case owned by a single user.

    Validation runs on construction. Section mutations go through
    ``add_attachment`` and ``remove_attachment`` so the four-key shape of
    ``sections`` is never broken.
    """

    id: str
    user_id: str
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
    sections: Sections = field(default_factory=empty_sections)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check required fields, year range and section shape."""
        if not self.id:
            raise ValidationException("Case ID is required", field="id")
        if not self.user_id:
            raise ValidationException("Case must belong to a user", field="user_id")
        for name in REQUIRED_TEXT_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValidationException(f"{name} is required", field=name)
        if not isinstance(self.case_year, int) or not (
            MIN_CASE_YEAR <= self.case_year <= MAX_CASE_YEAR
        ):
            raise ValidationException(
                f"case_year must be between {MIN_CASE_YEAR} and {MAX_CASE_YEAR}",
                field="case_year",
            )
        if not isinstance(self.on_behalf_of, OnBehalfOf):
            try:
                self.on_behalf_of = OnBehalfOf(self.on_behalf_of)
            except ValueError:
                raise ValidationException(
                    "on_behalf_of must be one of: " + ", ".join(OnBehalfOf.values()),
                    field="on_behalf_of",
                ) from None
        if not isinstance(self.next_hearing, date):
            raise ValidationException("next_hearing must be a date", field="next_hearing")
        if set(self.sections) != set(SectionName):
            raise ValidationException("Case must have exactly four sections", field="sections")

    def belongs_to(self, owner_id: str) -> bool:
        return self.user_id == owner_id

    def apply_changes(self, changes: dict[str, Any]) -> None:
        """Merge non-null descriptive fields, then re-validate.

        Owner, status and sections are not changed here.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0],
            )
        for name, value in changes.items():
            if value is not None:
                setattr(self, name, value)
        self.validate()

    def change_status(self, status: CaseStatus) -> None:
        self.status = status

    def add_attachment(self, section: SectionName, attachment: Attachment) -> None:
        self.sections[section].append(attachment)

    def iter_attachments(self) -> Iterator[tuple[SectionName, Attachment]]:
        """Every attachment with its section, in fixed section order."""
        for section in SectionName:
            for attachment in self.sections[section]:
                yield section, attachment

    def find_attachment(self, ref: str) -> tuple[SectionName, Attachment] | None:
        """First attachment matching ``ref`` scanning drafts to evidence."""
        for section, attachment in self.iter_attachments():
            if attachment.matches(ref):
                return section, attachment
        return None

    def remove_attachment(self, ref: str) -> tuple[SectionName, Attachment] | None:
        """Remove and return the first matching attachment, or None."""
        found = self.find_attachment(ref)
        if found is None:
            return None
        section, attachment = found
        self.sections[section].remove(attachment)
        return found

    def touch(self, now: datetime) -> None:
        self.updated_at = now
