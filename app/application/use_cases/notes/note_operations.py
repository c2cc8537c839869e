"""Standalone note operations."""

import logging

from app.application.dtos.note import NoteResult
from app.application.interfaces.repositories import INoteRepository
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.shared.telemetry.tracing import traced
from app.shared.utils.sanitization import sanitize_text

logger = logging.getLogger(__name__)


def _required(value: str | None, field: str, label: str) -> str:
    cleaned = sanitize_text(value) or ""
    if not cleaned:
        raise ValidationException(f"{label} is required", field=field)
    return cleaned


class NoteService:
    """Create, read, update and delete the caller's notes."""

    def __init__(self, note_repo: INoteRepository) -> None:
        self.note_repo = note_repo

    @traced("note.create")
    async def create_note(self, *, owner_id: str, title: str, content: str) -> NoteResult:
        """Both title and content are required on this path."""
        note = await self.note_repo.create_note(
            owner_id,
            _required(title, "title", "Title"),
            _required(content, "content", "Content"),
        )
        logger.info("Note created: id=%s owner=%s", note.id, owner_id)
        return note

    @traced("note.get")
    async def get_note(self, *, note_id: str, owner_id: str) -> NoteResult:
        note = await self.note_repo.get_by_id_and_owner(note_id, owner_id)
        if note is None:
            raise ResourceNotFoundException("note", note_id)
        return note

    @traced("note.list")
    async def list_notes(self, *, owner_id: str) -> list[NoteResult]:
        return await self.note_repo.list_by_owner(owner_id)

    @traced("note.update")
    async def update_note(
        self,
        *,
        note_id: str,
        owner_id: str,
        title: str | None = None,
        content: str | None = None,
    ) -> NoteResult:
        """Change title and/or content. A given title may not be blank."""
        new_title = _required(title, "title", "Title") if title is not None else None
        new_content = sanitize_text(content) if content is not None else None
        note = await self.note_repo.update_note(
            note_id, owner_id, title=new_title, content=new_content
        )
        if note is None:
            raise ResourceNotFoundException("note", note_id)
        return note

    @traced("note.delete")
    async def delete_note(self, *, note_id: str, owner_id: str) -> None:
        if not await self.note_repo.delete_by_id_and_owner(note_id, owner_id):
            raise ResourceNotFoundException("note", note_id)
        logger.info("Note deleted: id=%s owner=%s", note_id, owner_id)
