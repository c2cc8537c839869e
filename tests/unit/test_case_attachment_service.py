"""Unit tests for CaseAttachmentService: uploads, case notes, deletes, listing."""

import io

import pytest

from app.application.dtos.case import UploadedFile
from app.application.services.upload_policy import UploadPolicy
from app.application.use_cases.cases import CaseAttachmentService
from app.domain.entities.attachment import FileAttachment, NoteAttachment
from app.domain.enums import SectionName
from app.domain.exceptions import (
    FileTooLargeException,
    InvalidSectionException,
    ResourceNotFoundException,
    StorageException,
    UnsupportedMediaTypeException,
    ValidationException,
)
from tests.fakes import make_case_create

OWNER = "owner-1"
OTHER = "owner-2"


def _pdf(name: str = "brief.pdf", content: bytes = b"%PDF-1.4 body") -> UploadedFile:
    return UploadedFile(filename=name, content_type="application/pdf", file_data=io.BytesIO(content))


@pytest.fixture
async def case(case_service):
    return await case_service.create_case(owner_id=OWNER, data=make_case_create())


async def test_upload_appends_files_to_section(attachment_service, storage, case) -> None:
    updated = await attachment_service.upload_files(
        case_id=case.id,
        owner_id=OWNER,
        section="courtOrders",
        files=[_pdf("order 1.pdf"), _pdf("order2.pdf", b"%PDF other")],
    )
    items = updated.sections[SectionName.COURT_ORDERS]
    assert [a.name for a in items] == ["order 1.pdf", "order2.pdf"]
    first = items[0]
    assert isinstance(first, FileAttachment)
    assert first.file.storage_ref == (
        f"users/{OWNER}/cases/{case.id}/courtOrders/{first.file.id}/order 1.pdf"
    )
    assert first.file.url == f"/uploads/{first.file.storage_ref}"
    assert first.file.mimetype == "application/pdf"
    assert first.file.size == len(b"%PDF-1.4 body")
    assert set(storage.files) == {a.file.storage_ref for a in items}
    assert updated.updated_at >= case.updated_at


async def test_upload_timestamps_strictly_increase(attachment_service, case) -> None:
    await attachment_service.upload_files(
        case_id=case.id, owner_id=OWNER, section="drafts", files=[_pdf()]
    )
    updated = await attachment_service.upload_files(
        case_id=case.id,
        owner_id=OWNER,
        section="drafts",
        files=[_pdf("a.pdf"), _pdf("b.pdf"), _pdf("c.pdf")],
    )
    stamps = [a.added_at for a in updated.sections[SectionName.DRAFTS]]
    assert all(earlier < later for earlier, later in zip(stamps, stamps[1:]))


async def test_invalid_section_checked_before_case_lookup(attachment_service) -> None:
    with pytest.raises(InvalidSectionException):
        await attachment_service.upload_files(
            case_id="missing", owner_id=OWNER, section="misc", files=[_pdf()]
        )


async def test_upload_to_other_owners_case_is_not_found(attachment_service, storage, case) -> None:
    with pytest.raises(ResourceNotFoundException):
        await attachment_service.upload_files(
            case_id=case.id, owner_id=OTHER, section="drafts", files=[_pdf()]
        )
    assert storage.files == {}


async def test_one_invalid_file_rejects_whole_batch(attachment_service, storage, case_repo, case) -> None:
    bad = UploadedFile("notes.txt", "text/plain", io.BytesIO(b"hello"))
    with pytest.raises(UnsupportedMediaTypeException):
        await attachment_service.upload_files(
            case_id=case.id, owner_id=OWNER, section="drafts", files=[_pdf(), bad]
        )
    assert storage.files == {}
    assert case_repo.cases[case.id].sections[SectionName.DRAFTS] == []


async def test_storage_failure_mid_batch_discards_stored_files(
    attachment_service, storage, case_repo, case
) -> None:
    storage.fail_upload_after = 1
    with pytest.raises(StorageException):
        await attachment_service.upload_files(
            case_id=case.id,
            owner_id=OWNER,
            section="evidence",
            files=[_pdf("a.pdf"), _pdf("b.pdf")],
        )
    assert storage.files == {}
    assert case_repo.cases[case.id].sections[SectionName.EVIDENCE] == []


async def test_oversized_pdf_rejects_batch_with_small_jpeg(
    case_repo, note_repo, storage, case
) -> None:
    """A 2 MB JPEG and a 15 MB PDF under a 10 MB limit: nothing is stored."""
    mb = 1024 * 1024
    service = CaseAttachmentService(
        case_repo, note_repo, storage, UploadPolicy(max_file_size=10 * mb)
    )
    photo = UploadedFile("scene.jpg", "image/jpeg", io.BytesIO(b"\xff" * (2 * mb)))
    scan = UploadedFile("chargesheet.pdf", "application/pdf", io.BytesIO(b"%" * (15 * mb)))
    with pytest.raises(FileTooLargeException):
        await service.upload_files(
            case_id=case.id, owner_id=OWNER, section="evidence", files=[photo, scan]
        )
    assert storage.files == {}
    assert storage.uploads == 0
    assert case_repo.cases[case.id].sections[SectionName.EVIDENCE] == []


async def test_url_failure_mid_batch_discards_stored_files(
    attachment_service, storage, case_repo, case
) -> None:
    resolve = storage.resolve_url
    calls = 0

    async def flaky_resolve(storage_ref: str) -> str:
        nonlocal calls
        calls += 1
        if calls == 2:
            raise RuntimeError("url signer unavailable")
        return await resolve(storage_ref)

    storage.resolve_url = flaky_resolve
    with pytest.raises(RuntimeError):
        await attachment_service.upload_files(
            case_id=case.id,
            owner_id=OWNER,
            section="drafts",
            files=[_pdf("a.pdf"), _pdf("b.pdf")],
        )
    assert storage.files == {}
    assert case_repo.cases[case.id].sections[SectionName.DRAFTS] == []


async def test_save_failure_discards_stored_files(attachment_service, storage, case_repo, case) -> None:
    case_repo.fail_on_save = RuntimeError("connection lost")
    with pytest.raises(RuntimeError):
        await attachment_service.upload_files(
            case_id=case.id, owner_id=OWNER, section="evidence", files=[_pdf()]
        )
    assert storage.files == {}


async def test_create_note_attaches_note_row(attachment_service, note_repo, case) -> None:
    updated = await attachment_service.create_note(
        case_id=case.id,
        owner_id=OWNER,
        section="opponentDrafts",
        title="  Reply to <i>objection</i> ",
        content="Points to rebut",
    )
    [attachment] = updated.sections[SectionName.OPPONENT_DRAFTS]
    assert isinstance(attachment, NoteAttachment)
    assert attachment.name == "Reply to objection"
    note = note_repo.notes[attachment.note_id]
    assert note.user_id == OWNER
    assert note.content == "Points to rebut"


async def test_create_note_allows_empty_content(attachment_service, note_repo, case) -> None:
    updated = await attachment_service.create_note(
        case_id=case.id, owner_id=OWNER, section="drafts", title="Outline", content=None
    )
    note_id = updated.sections[SectionName.DRAFTS][0].note_id
    assert note_repo.notes[note_id].content == ""


async def test_create_note_requires_title(attachment_service, note_repo, case) -> None:
    with pytest.raises(ValidationException, match="Title is required"):
        await attachment_service.create_note(
            case_id=case.id, owner_id=OWNER, section="drafts", title="<b></b>"
        )
    assert note_repo.notes == {}


async def test_delete_file_attachment_saves_case_before_removing_file(
    attachment_service, storage, events, case
) -> None:
    updated = await attachment_service.upload_files(
        case_id=case.id, owner_id=OWNER, section="evidence", files=[_pdf()]
    )
    file_att = updated.sections[SectionName.EVIDENCE][0]
    events.clear()

    after = await attachment_service.delete_attachment(
        case_id=case.id, owner_id=OWNER, ref=file_att.file.id
    )

    assert after.sections[SectionName.EVIDENCE] == []
    assert events == [f"save_case:{case.id}", f"delete_file:{file_att.file.storage_ref}"]
    assert storage.files == {}


async def test_delete_by_storage_ref_segment(attachment_service, case) -> None:
    updated = await attachment_service.upload_files(
        case_id=case.id, owner_id=OWNER, section="drafts", files=[_pdf("plaint.pdf")]
    )
    ref = updated.sections[SectionName.DRAFTS][0].file.storage_ref
    after = await attachment_service.delete_attachment(case_id=case.id, owner_id=OWNER, ref=ref)
    assert after.sections[SectionName.DRAFTS] == []


async def test_delete_note_attachment_deletes_note(attachment_service, note_repo, case) -> None:
    updated = await attachment_service.create_note(
        case_id=case.id, owner_id=OWNER, section="evidence", title="Witness list"
    )
    note_id = updated.sections[SectionName.EVIDENCE][0].note_id
    await attachment_service.delete_attachment(case_id=case.id, owner_id=OWNER, ref=note_id)
    assert note_id not in note_repo.notes


async def test_failed_file_delete_leaves_accepted_orphan(attachment_service, storage, case) -> None:
    """The section entry is removed; the stored file stays behind as an orphan."""
    updated = await attachment_service.upload_files(
        case_id=case.id, owner_id=OWNER, section="drafts", files=[_pdf()]
    )
    file_att = updated.sections[SectionName.DRAFTS][0]
    storage.fail_delete.add(file_att.file.storage_ref)
    after = await attachment_service.delete_attachment(
        case_id=case.id, owner_id=OWNER, ref=file_att.file.id
    )
    assert after.sections[SectionName.DRAFTS] == []
    assert file_att.file.storage_ref in storage.files


async def test_delete_unknown_attachment_is_not_found(attachment_service, case) -> None:
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await attachment_service.delete_attachment(case_id=case.id, owner_id=OWNER, ref="nope")
    assert exc_info.value.message == "Attachment not found"


async def test_list_section_populates_notes(attachment_service, case) -> None:
    await attachment_service.upload_files(
        case_id=case.id, owner_id=OWNER, section="drafts", files=[_pdf()]
    )
    await attachment_service.create_note(
        case_id=case.id, owner_id=OWNER, section="drafts", title="Memo", content="Body"
    )
    items = await attachment_service.list_section(case_id=case.id, owner_id=OWNER, section="drafts")
    assert [type(i.attachment) for i in items] == [FileAttachment, NoteAttachment]
    assert items[0].note is None
    assert items[1].note is not None and items[1].note.content == "Body"


async def test_get_sections_returns_all_four(attachment_service, case) -> None:
    sections = await attachment_service.get_sections(case_id=case.id, owner_id=OWNER)
    assert list(sections) == list(SectionName)
