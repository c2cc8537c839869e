"""SQLAlchemy repositories."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.case_repo import CaseRepository
from app.infrastructure.persistence.repositories.note_repo import NoteRepository

__all__ = ["BaseRepository", "CaseRepository", "NoteRepository"]
