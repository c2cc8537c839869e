"""Unit tests for NoteService."""

import pytest

from app.domain.exceptions import ResourceNotFoundException, ValidationException

OWNER = "owner-1"
OTHER = "owner-2"


async def test_create_and_get_note(note_service) -> None:
    note = await note_service.create_note(owner_id=OWNER, title="Call client", content="Re: dates")
    fetched = await note_service.get_note(note_id=note.id, owner_id=OWNER)
    assert fetched == note


@pytest.mark.parametrize(("title", "content"), [("", "body"), ("Title", "  "), ("<p></p>", "x")])
async def test_create_requires_title_and_content(note_service, title, content) -> None:
    with pytest.raises(ValidationException):
        await note_service.create_note(owner_id=OWNER, title=title, content=content)


async def test_notes_are_scoped_to_owner(note_service) -> None:
    note = await note_service.create_note(owner_id=OWNER, title="Mine", content="x")
    with pytest.raises(ResourceNotFoundException):
        await note_service.get_note(note_id=note.id, owner_id=OTHER)
    with pytest.raises(ResourceNotFoundException):
        await note_service.update_note(note_id=note.id, owner_id=OTHER, title="Theirs")
    with pytest.raises(ResourceNotFoundException):
        await note_service.delete_note(note_id=note.id, owner_id=OTHER)
    assert await note_service.list_notes(owner_id=OTHER) == []


async def test_list_notes_newest_first(note_service) -> None:
    first = await note_service.create_note(owner_id=OWNER, title="One", content="1")
    second = await note_service.create_note(owner_id=OWNER, title="Two", content="2")
    assert [n.id for n in await note_service.list_notes(owner_id=OWNER)] == [second.id, first.id]


async def test_update_changes_given_fields_only(note_service) -> None:
    note = await note_service.create_note(owner_id=OWNER, title="Draft", content="v1")
    updated = await note_service.update_note(note_id=note.id, owner_id=OWNER, content="v2")
    assert updated.title == "Draft"
    assert updated.content == "v2"
    with pytest.raises(ValidationException, match="Title is required"):
        await note_service.update_note(note_id=note.id, owner_id=OWNER, title="   ")


async def test_delete_note(note_service) -> None:
    note = await note_service.create_note(owner_id=OWNER, title="Temp", content="x")
    await note_service.delete_note(note_id=note.id, owner_id=OWNER)
    with pytest.raises(ResourceNotFoundException, match="Note not found"):
        await note_service.get_note(note_id=note.id, owner_id=OWNER)


async def test_literal_characters_round_trip(note_service) -> None:
    note = await note_service.create_note(
        owner_id=OWNER, title="Q&A prep", content="if a < b & b > c then <i>a</i> < c"
    )
    fetched = await note_service.get_note(note_id=note.id, owner_id=OWNER)
    assert fetched.title == "Q&A prep"
    assert fetched.content == "if a < b & b > c then a < c"
    updated = await note_service.update_note(
        note_id=note.id, owner_id=OWNER, title=fetched.title, content=fetched.content
    )
    assert (updated.title, updated.content) == ("Q&A prep", "if a < b & b > c then a < c")
