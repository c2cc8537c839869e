"""ORM models. Import here so Alembic autogenerate sees every table."""

from app.infrastructure.persistence.models.case import Case
from app.infrastructure.persistence.models.note import Note

__all__ = ["Case", "Note"]
