"""Case and note repository integration tests. Require Postgres; session is rolled back after each test."""

from datetime import UTC, date, datetime

import pytest

from app.domain.entities.attachment import NoteAttachment
from app.domain.entities.case import CaseEntity
from app.domain.enums import OnBehalfOf, SectionName
from app.domain.exceptions import CaseNumberConflictException
from app.infrastructure.persistence.repositories import CaseRepository, NoteRepository
from app.shared.utils.generators import generate_cuid


def _entity(owner: str, case_no: str, **overrides) -> CaseEntity:
    values = {
        "id": generate_cuid(),
        "user_id": owner,
        "title": "Repo Test Case",
        "case_no": case_no,
        "case_type": "Civil",
        "court_name": "City Civil Court",
        "case_year": 2023,
        "on_behalf_of": OnBehalfOf.PLAINTIFF,
        "party_name": "Repo_Party 100%",
        "contact_number": "9000000000",
        "respondent": "Someone",
        "lawyer": "Counsel",
        "next_hearing": date(2024, 1, 15),
    }
    values.update(overrides)
    return CaseEntity(**values)


@pytest.mark.requires_db
async def test_create_and_get_scoped_by_owner(db_session) -> None:
    repo = CaseRepository(db_session)
    owner = f"repo-{generate_cuid()}"
    created = await repo.create_case(_entity(owner, "R-1"))
    assert created.id
    assert created.created_at is not None

    found = await repo.get_by_id_and_owner(created.id, owner)
    assert found is not None
    assert found.case_no == "R-1"
    assert list(found.sections) == list(SectionName)
    assert await repo.get_by_id_and_owner(created.id, "someone-else") is None


@pytest.mark.requires_db
async def test_duplicate_case_no_raises_conflict(db_session) -> None:
    repo = CaseRepository(db_session)
    owner = f"repo-{generate_cuid()}"
    await repo.create_case(_entity(owner, "DUP-1"))
    assert await repo.exists_case_no(owner, "DUP-1")
    with pytest.raises(CaseNumberConflictException):
        await repo.create_case(_entity(owner, "DUP-1"))


@pytest.mark.requires_db
async def test_sections_round_trip_through_json(db_session) -> None:
    repo = CaseRepository(db_session)
    owner = f"repo-{generate_cuid()}"
    case = await repo.create_case(_entity(owner, "J-1"))
    added = datetime(2024, 2, 1, 9, 30, tzinfo=UTC)
    case.add_attachment(SectionName.EVIDENCE, NoteAttachment(name="Memo", note_id="n-1", added_at=added))
    await repo.save(case)

    reloaded = await repo.get_by_id_and_owner(case.id, owner)
    [attachment] = reloaded.sections[SectionName.EVIDENCE]
    assert attachment == NoteAttachment(name="Memo", note_id="n-1", added_at=added)


@pytest.mark.requires_db
async def test_search_escapes_like_wildcards(db_session) -> None:
    repo = CaseRepository(db_session)
    owner = f"repo-{generate_cuid()}"
    await repo.create_case(_entity(owner, "S-1"))
    await repo.create_case(_entity(owner, "S-2", party_name="Plain Party"))

    assert [c.case_no for c in await repo.search(owner, "100%")] == ["S-1"]
    assert [c.case_no for c in await repo.search(owner, "_party")] == ["S-1"]
    assert len(await repo.search(owner, "repo test")) == 2


@pytest.mark.requires_db
async def test_note_repository_bulk_delete_is_owner_scoped(db_session) -> None:
    repo = NoteRepository(db_session)
    owner = f"repo-{generate_cuid()}"
    mine = await repo.create_note(owner, "Mine", "x")
    theirs = await repo.create_note("someone-else", "Theirs", "y")

    assert await repo.delete_many_for_owner(owner, [mine.id, theirs.id]) == 1
    assert await repo.get_by_id_and_owner(mine.id, owner) is None
    assert await repo.get_by_id_and_owner(theirs.id, "someone-else") is not None
