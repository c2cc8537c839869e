"""Tests for domain entities (case, attachments) and enums."""

from datetime import UTC, date, datetime

import pytest

from app.domain.entities.attachment import (
    FileAttachment,
    NoteAttachment,
    StoredFile,
    attachment_from_dict,
)
from app.domain.entities.case import (
    CaseEntity,
    empty_sections,
    parse_section,
    sections_from_json,
    sections_to_json,
)
from app.domain.enums import AttachmentType, CaseStatus, OnBehalfOf, SectionName
from app.domain.exceptions import InvalidSectionException, ValidationException

T0 = datetime(2024, 5, 1, 10, 0, tzinfo=UTC)


def _file(file_id: str = "f1", ref: str | None = None) -> FileAttachment:
    storage_ref = ref or f"users/u1/cases/c1/drafts/{file_id}/brief.pdf"
    return FileAttachment(
        name="brief.pdf",
        file=StoredFile(
            id=file_id,
            name="brief.pdf",
            url=f"/uploads/{storage_ref}",
            storage_ref=storage_ref,
            mimetype="application/pdf",
            size=12,
            uploaded_at=T0,
            checksum="abc",
        ),
        added_at=T0,
    )


def _case(**overrides) -> CaseEntity:
    values = {
        "id": "c1",
        "user_id": "u1",
        "title": "State v. Sharma",
        "case_no": "CR-1",
        "case_type": "Criminal",
        "court_name": "District Court",
        "case_year": 2024,
        "on_behalf_of": OnBehalfOf.ACCUSED,
        "party_name": "Ravi",
        "contact_number": "98000",
        "respondent": "State",
        "lawyer": "Kulkarni",
        "next_hearing": date(2024, 9, 12),
    }
    values.update(overrides)
    return CaseEntity(**values)


class TestEnums:
    def test_section_order_is_fixed(self) -> None:
        assert SectionName.values() == ["drafts", "opponentDrafts", "courtOrders", "evidence"]

    def test_status_parse_accepts_disposed_alias(self) -> None:
        assert CaseStatus.parse("disposed") is CaseStatus.COMPLETED
        assert CaseStatus.parse(" Hearing ") is CaseStatus.HEARING

    def test_status_parse_rejects_unknown(self) -> None:
        with pytest.raises(ValueError):
            CaseStatus.parse("archived")

    def test_on_behalf_of_values(self) -> None:
        assert "DHR" in OnBehalfOf.values()
        assert len(OnBehalfOf.values()) == 8


class TestCaseEntity:
    def test_new_case_has_four_empty_sections(self) -> None:
        case = _case()
        assert list(case.sections) == list(SectionName)
        assert all(items == [] for items in case.sections.values())
        assert case.status is CaseStatus.PENDING

    def test_year_out_of_range_rejected(self) -> None:
        with pytest.raises(ValidationException) as exc_info:
            _case(case_year=1899)
        assert exc_info.value.details == {"field": "case_year"}

    def test_blank_required_field_rejected(self) -> None:
        with pytest.raises(ValidationException, match="lawyer is required"):
            _case(lawyer="   ")

    def test_on_behalf_of_string_is_coerced(self) -> None:
        assert _case(on_behalf_of="Plaintiff").on_behalf_of is OnBehalfOf.PLAINTIFF

    def test_unknown_on_behalf_of_rejected(self) -> None:
        with pytest.raises(ValidationException, match="on_behalf_of"):
            _case(on_behalf_of="Witness")

    def test_apply_changes_skips_none_and_revalidates(self) -> None:
        case = _case()
        case.apply_changes({"title": "Renamed", "lawyer": None})
        assert case.title == "Renamed"
        assert case.lawyer == "Kulkarni"
        with pytest.raises(ValidationException):
            case.apply_changes({"case_year": 3000})

    def test_apply_changes_rejects_protected_fields(self) -> None:
        with pytest.raises(ValidationException, match="user_id"):
            _case().apply_changes({"user_id": "u2"})

    def test_find_scans_sections_in_order(self) -> None:
        case = _case()
        case.add_attachment(SectionName.EVIDENCE, _file("dup"))
        case.add_attachment(SectionName.DRAFTS, _file("dup"))
        section, _ = case.find_attachment("dup")
        assert section is SectionName.DRAFTS

    def test_remove_attachment_returns_section_and_item(self) -> None:
        case = _case()
        note = NoteAttachment(name="Memo", note_id="n1", added_at=T0)
        case.add_attachment(SectionName.COURT_ORDERS, note)
        assert case.remove_attachment("n1") == (SectionName.COURT_ORDERS, note)
        assert case.sections[SectionName.COURT_ORDERS] == []
        assert case.remove_attachment("n1") is None


class TestAttachmentMatching:
    def test_matches_id_and_full_ref(self) -> None:
        att = _file("f1")
        assert att.matches("f1")
        assert att.matches(att.file.storage_ref)

    def test_matches_filename_segment_and_url(self) -> None:
        att = _file("f1")
        assert att.matches("brief.pdf")
        assert att.matches(att.file.url)

    def test_structural_segments_do_not_match(self) -> None:
        att = _file("f1")
        for segment in ("users", "u1", "cases", "c1", "drafts", "uploads"):
            assert not att.matches(segment), segment

    def test_case_id_does_not_remove_a_file(self) -> None:
        case = _case()
        case.add_attachment(SectionName.DRAFTS, _file("f1"))
        assert case.find_attachment(case.id) is None
        assert case.remove_attachment(case.id) is None
        assert len(case.sections[SectionName.DRAFTS]) == 1

    def test_partial_segment_does_not_match(self) -> None:
        att = _file("abc123")
        assert not att.matches("abc")
        assert not att.matches("")

    def test_note_matches_only_its_id(self) -> None:
        note = NoteAttachment(name="Memo", note_id="n1", added_at=T0)
        assert note.matches("n1")
        assert not note.matches("n")


class TestAttachmentCodec:
    def test_file_record_decodes(self) -> None:
        decoded = attachment_from_dict(_file().to_dict())
        assert isinstance(decoded, FileAttachment)
        assert decoded.type is AttachmentType.FILE
        assert decoded.file.uploaded_at == T0

    def test_note_record_with_file_rejected(self) -> None:
        record = {
            "type": "note",
            "name": "Memo",
            "added_at": T0.isoformat(),
            "note_id": "n1",
            "file": _file().file.to_dict(),
        }
        with pytest.raises(ValueError, match="must not carry a file"):
            attachment_from_dict(record)

    def test_file_record_without_descriptor_rejected(self) -> None:
        with pytest.raises(ValueError, match="requires a file descriptor"):
            attachment_from_dict({"type": "file", "name": "x", "added_at": T0.isoformat()})

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown attachment type"):
            attachment_from_dict({"type": "link", "name": "x", "added_at": T0.isoformat()})

    def test_sections_json_fills_missing_keys(self) -> None:
        sections = empty_sections()
        sections[SectionName.EVIDENCE].append(_file())
        stored = sections_to_json(sections)
        del stored["drafts"]
        decoded = sections_from_json(stored)
        assert list(decoded) == list(SectionName)
        assert decoded[SectionName.DRAFTS] == []
        assert decoded[SectionName.EVIDENCE][0].file.id == "f1"


def test_parse_section_rejects_unknown_name() -> None:
    assert parse_section("courtOrders") is SectionName.COURT_ORDERS
    with pytest.raises(InvalidSectionException) as exc_info:
        parse_section("misc")
    assert exc_info.value.error_code == "INVALID_SECTION"
    assert exc_info.value.details["allowed"] == SectionName.values()
