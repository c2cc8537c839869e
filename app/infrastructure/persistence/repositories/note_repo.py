"""Note repository. Returns NoteResult DTOs."""

from collections.abc import Iterable

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.note import NoteResult
from app.infrastructure.persistence.models.note import Note
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc, utc_now


def _note_to_result(n: Note) -> NoteResult:
    return NoteResult(
        id=n.id,
        user_id=n.user_id,
        title=n.title,
        content=n.content or "",
        created_at=ensure_utc(n.created_at),
        updated_at=ensure_utc(n.updated_at),
    )


class NoteRepository(BaseRepository[Note]):
    """Note store. Every query is scoped by owner."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Note)

    async def create_note(self, owner_id: str, title: str, content: str) -> NoteResult:
        now = utc_now()
        note = await self.create(
            Note(user_id=owner_id, title=title, content=content, created_at=now, updated_at=now)
        )
        return _note_to_result(note)

    async def get_by_id_and_owner(self, note_id: str, owner_id: str) -> NoteResult | None:
        note = await self._get_owned(note_id, owner_id)
        return _note_to_result(note) if note else None

    async def get_many_for_owner(
        self, owner_id: str, note_ids: Iterable[str]
    ) -> dict[str, NoteResult]:
        ids = list(set(note_ids))
        if not ids:
            return {}
        result = await self.db.execute(
            select(Note).where(and_(Note.user_id == owner_id, Note.id.in_(ids)))
        )
        return {n.id: _note_to_result(n) for n in result.scalars().all()}

    async def list_by_owner(self, owner_id: str) -> list[NoteResult]:
        result = await self.db.execute(
            select(Note)
            .where(Note.user_id == owner_id)
            .order_by(Note.created_at.desc(), Note.id.desc())
        )
        return [_note_to_result(n) for n in result.scalars().all()]

    async def update_note(
        self,
        note_id: str,
        owner_id: str,
        title: str | None = None,
        content: str | None = None,
    ) -> NoteResult | None:
        note = await self._get_owned(note_id, owner_id)
        if note is None:
            return None
        if title is not None:
            note.title = title
        if content is not None:
            note.content = content
        note.updated_at = utc_now()
        return _note_to_result(await self.update(note))

    async def delete_by_id_and_owner(self, note_id: str, owner_id: str) -> bool:
        return await self._delete_owned(note_id, owner_id)

    async def delete_many_for_owner(self, owner_id: str, note_ids: Iterable[str]) -> int:
        ids = list(set(note_ids))
        if not ids:
            return 0
        result = await self.db.execute(
            delete(Note).where(and_(Note.user_id == owner_id, Note.id.in_(ids)))
        )
        return result.rowcount or 0
