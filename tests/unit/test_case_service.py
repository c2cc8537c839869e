"""Unit tests for CaseService on in-memory repositories."""

import io

import pytest

from app.application.dtos.case import CaseUpdate, UploadedFile
from app.domain.enums import CaseStatus, SectionName
from app.domain.exceptions import (
    CaseNumberConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from tests.fakes import make_case_create

OWNER = "owner-1"
OTHER = "owner-2"


async def test_create_case_assigns_id_owner_and_empty_sections(case_service, case_repo) -> None:
    case = await case_service.create_case(owner_id=OWNER, data=make_case_create())
    assert case.id
    assert case.user_id == OWNER
    assert case.status is CaseStatus.PENDING
    assert case.created_at is not None and case.created_at == case.updated_at
    assert all(items == [] for items in case.sections.values())
    assert case.id in case_repo.cases


async def test_create_case_strips_markup_from_free_text(case_service) -> None:
    case = await case_service.create_case(
        owner_id=OWNER,
        data=make_case_create(title="<b>State</b> v. Sharma", description="<script>x</script>ok"),
    )
    assert case.title == "State v. Sharma"
    assert case.description == "ok"


async def test_duplicate_case_no_conflicts_per_owner(case_service) -> None:
    await case_service.create_case(owner_id=OWNER, data=make_case_create(case_no="CR-9"))
    with pytest.raises(CaseNumberConflictException):
        await case_service.create_case(owner_id=OWNER, data=make_case_create(case_no="CR-9"))
    other = await case_service.create_case(owner_id=OTHER, data=make_case_create(case_no="CR-9"))
    assert other.user_id == OTHER


async def test_get_case_of_other_owner_is_not_found(case_service) -> None:
    case = await case_service.create_case(owner_id=OWNER, data=make_case_create())
    with pytest.raises(ResourceNotFoundException):
        await case_service.get_case(case_id=case.id, owner_id=OTHER)


async def test_list_cases_pages_newest_first(case_service) -> None:
    for i in range(5):
        await case_service.create_case(owner_id=OWNER, data=make_case_create(case_no=f"CR-{i}"))
    await case_service.create_case(owner_id=OTHER, data=make_case_create(case_no="X"))

    page = await case_service.list_cases(owner_id=OWNER, page=2, page_size=2)
    assert [c.case_no for c in page.items] == ["CR-2", "CR-1"]
    assert page.total == 5
    assert page.pages == 3


async def test_list_cases_caps_page_size(case_service) -> None:
    page = await case_service.list_cases(owner_id=OWNER, page=0, page_size=1000)
    assert page.page == 1
    assert page.page_size == 100


async def test_search_matches_title_case_no_and_party(case_service) -> None:
    await case_service.create_case(
        owner_id=OWNER, data=make_case_create(case_no="CIV-7", party_name="Meera Iyer")
    )
    await case_service.create_case(
        owner_id=OWNER, data=make_case_create(case_no="CR-8", title="Bail application")
    )
    assert [c.case_no for c in await case_service.search_cases(owner_id=OWNER, query="iyer")] == ["CIV-7"]
    assert [c.case_no for c in await case_service.search_cases(owner_id=OWNER, query="BAIL")] == ["CR-8"]
    assert await case_service.search_cases(owner_id=OTHER, query="bail") == []


async def test_literal_ampersand_and_angle_brackets_round_trip(case_service) -> None:
    created = await case_service.create_case(
        owner_id=OWNER,
        data=make_case_create(
            title="Smith & Jones v. A < B Ltd", party_name="Smith & Jones", description="x > y"
        ),
    )
    fetched = await case_service.get_case(case_id=created.id, owner_id=OWNER)
    assert fetched.title == "Smith & Jones v. A < B Ltd"
    assert fetched.party_name == "Smith & Jones"
    assert fetched.description == "x > y"
    hits = await case_service.search_cases(owner_id=OWNER, query="Smith & Jones")
    assert [c.id for c in hits] == [created.id]

    # Sending the stored title back unchanged must not alter it.
    updated = await case_service.update_case(
        case_id=created.id, owner_id=OWNER, data=CaseUpdate(title=fetched.title)
    )
    assert updated.title == "Smith & Jones v. A < B Ltd"


@pytest.mark.parametrize("query", [None, "", "   "])
async def test_search_requires_query(case_service, query) -> None:
    with pytest.raises(ValidationException, match="Search query is required"):
        await case_service.search_cases(owner_id=OWNER, query=query)


async def test_update_merges_fields_and_checks_case_no(case_service) -> None:
    first = await case_service.create_case(owner_id=OWNER, data=make_case_create(case_no="A-1"))
    await case_service.create_case(owner_id=OWNER, data=make_case_create(case_no="A-2"))

    updated = await case_service.update_case(
        case_id=first.id,
        owner_id=OWNER,
        data=CaseUpdate(court_name="High Court", case_no="A-1"),
    )
    assert updated.court_name == "High Court"
    assert updated.title == first.title

    with pytest.raises(CaseNumberConflictException):
        await case_service.update_case(
            case_id=first.id, owner_id=OWNER, data=CaseUpdate(case_no="A-2")
        )


async def test_update_validates_year(case_service) -> None:
    case = await case_service.create_case(owner_id=OWNER, data=make_case_create())
    with pytest.raises(ValidationException):
        await case_service.update_case(
            case_id=case.id, owner_id=OWNER, data=CaseUpdate(case_year=1850)
        )


async def test_update_status_accepts_disposed(case_service) -> None:
    case = await case_service.create_case(owner_id=OWNER, data=make_case_create())
    updated = await case_service.update_status(case_id=case.id, owner_id=OWNER, status="disposed")
    assert updated.status is CaseStatus.COMPLETED
    back = await case_service.update_status(case_id=case.id, owner_id=OWNER, status="pending")
    assert back.status is CaseStatus.PENDING


async def test_update_status_rejects_unknown(case_service) -> None:
    case = await case_service.create_case(owner_id=OWNER, data=make_case_create())
    with pytest.raises(ValidationException, match="Invalid status"):
        await case_service.update_status(case_id=case.id, owner_id=OWNER, status="closed")


async def test_delete_case_removes_notes_then_files_then_case(
    case_service, attachment_service, note_repo, storage, events
) -> None:
    case = await case_service.create_case(owner_id=OWNER, data=make_case_create())
    await attachment_service.upload_files(
        case_id=case.id,
        owner_id=OWNER,
        section="evidence",
        files=[UploadedFile("photo.png", "image/png", io.BytesIO(b"png-bytes"))],
    )
    await attachment_service.create_note(
        case_id=case.id, owner_id=OWNER, section=SectionName.DRAFTS, title="Draft plea"
    )
    events.clear()

    await case_service.delete_case(case_id=case.id, owner_id=OWNER)

    assert [e.split(":")[0] for e in events] == ["delete_notes", "delete_file", "delete_case"]
    assert note_repo.notes == {}
    assert storage.files == {}
    with pytest.raises(ResourceNotFoundException):
        await case_service.get_case(case_id=case.id, owner_id=OWNER)


async def test_delete_case_succeeds_when_file_delete_fails(
    case_service, attachment_service, storage, case_repo
) -> None:
    """The case row is deleted; the undeletable file is left as an accepted orphan."""
    case = await case_service.create_case(owner_id=OWNER, data=make_case_create())
    updated = await attachment_service.upload_files(
        case_id=case.id,
        owner_id=OWNER,
        section="drafts",
        files=[UploadedFile("brief.pdf", "application/pdf", io.BytesIO(b"%PDF"))],
    )
    storage_ref = updated.sections[SectionName.DRAFTS][0].file.storage_ref
    storage.fail_delete.add(storage_ref)

    await case_service.delete_case(case_id=case.id, owner_id=OWNER)
    assert case.id not in case_repo.cases
    assert storage_ref in storage.files


async def test_delete_case_of_other_owner_is_not_found(case_service, case_repo) -> None:
    case = await case_service.create_case(owner_id=OWNER, data=make_case_create())
    with pytest.raises(ResourceNotFoundException):
        await case_service.delete_case(case_id=case.id, owner_id=OTHER)
    assert case.id in case_repo.cases
