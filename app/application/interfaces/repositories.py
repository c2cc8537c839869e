"""Repository interfaces (ports) for the application layer.

Infrastructure repositories satisfy these protocols structurally; the
unit tests satisfy them with in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.note import NoteResult
    from app.domain.entities.case import CaseEntity


class ICaseRepository(Protocol):
    """Protocol for the case store. Every lookup is scoped by owner."""

    async def get_by_id_and_owner(self, case_id: str, owner_id: str) -> CaseEntity | None:
        """Return the case if it exists and belongs to owner_id."""

    async def exists_case_no(
        self, owner_id: str, case_no: str, exclude_case_id: str | None = None
    ) -> bool:
        """Return whether owner_id already has a case with case_no."""

    async def create_case(self, case: CaseEntity) -> CaseEntity:
        """Insert a new case. Raises CaseNumberConflictException on duplicates."""

    async def save(self, case: CaseEntity) -> CaseEntity:
        """Write every field of an existing case back (last write wins)."""

    async def list_by_owner(self, owner_id: str, skip: int, limit: int) -> list[CaseEntity]:
        """Return owner's cases newest first."""

    async def count_by_owner(self, owner_id: str) -> int:
        """Return how many cases owner_id has."""

    async def search(self, owner_id: str, query: str, limit: int = 100) -> list[CaseEntity]:
        """Case-insensitive substring match on title, case number and party name."""

    async def delete_by_id_and_owner(self, case_id: str, owner_id: str) -> bool:
        """Delete the case row. Returns False if nothing was deleted."""


class INoteRepository(Protocol):
    """Protocol for the note store. Every lookup is scoped by owner."""

    async def create_note(self, owner_id: str, title: str, content: str) -> NoteResult:
        """Insert a note and return it."""

    async def get_by_id_and_owner(self, note_id: str, owner_id: str) -> NoteResult | None:
        """Return the note if it exists and belongs to owner_id."""

    async def get_many_for_owner(
        self, owner_id: str, note_ids: Iterable[str]
    ) -> dict[str, NoteResult]:
        """Return the owner's notes among note_ids, keyed by id."""

    async def list_by_owner(self, owner_id: str) -> list[NoteResult]:
        """Return owner's notes newest first."""

    async def update_note(
        self,
        note_id: str,
        owner_id: str,
        title: str | None = None,
        content: str | None = None,
    ) -> NoteResult | None:
        """Update title and/or content. Returns None if not found or not owned."""

    async def delete_by_id_and_owner(self, note_id: str, owner_id: str) -> bool:
        """Delete one note. Returns False if nothing was deleted."""

    async def delete_many_for_owner(self, owner_id: str, note_ids: Iterable[str]) -> int:
        """Delete the owner's notes among note_ids; returns the count removed."""
