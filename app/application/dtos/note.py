"""DTOs for note use cases."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class NoteResult:
    """Note read-model returned by the note repository."""

    id: str
    user_id: str
    title: str
    content: str
    created_at: datetime | None
    updated_at: datetime | None
