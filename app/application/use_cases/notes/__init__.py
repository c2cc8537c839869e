"""Note use cases."""

from app.application.use_cases.notes.note_operations import NoteService

__all__ = ["NoteService"]
