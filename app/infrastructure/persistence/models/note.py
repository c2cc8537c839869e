"""Note ORM model."""

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import OwnedModel


class Note(OwnedModel, Base):
    """Free-text note. Case sections reference notes by id."""

    __tablename__ = "note"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")

    __table_args__ = (Index("ix_note_user_created", "user_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, user_id={self.user_id})>"
