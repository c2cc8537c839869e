"""Case ORM model."""

from datetime import date
from typing import Any

from sqlalchemy import JSON, Date, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import OwnedModel

# JSONB on Postgres, plain JSON elsewhere (SQLite in local tooling).
SectionsJSON = JSON().with_variant(JSONB(), "postgresql")


class Case(OwnedModel, Base):
    """A user's case. Attachments live in ``sections`` as a JSON map."""

    # "case" is a reserved word in SQL.
    __tablename__ = "case_file"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    case_no: Mapped[str] = mapped_column(String(100), nullable=False)
    case_type: Mapped[str] = mapped_column("type", String(100), nullable=False)
    court_name: Mapped[str] = mapped_column(String(255), nullable=False)
    case_year: Mapped[int] = mapped_column(Integer, nullable=False)
    on_behalf_of: Mapped[str] = mapped_column(String(50), nullable=False)
    party_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_number: Mapped[str] = mapped_column(String(50), nullable=False)
    respondent: Mapped[str] = mapped_column(String(255), nullable=False)
    lawyer: Mapped[str] = mapped_column(String(255), nullable=False)
    next_hearing: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", server_default="pending"
    )
    advocate_contact_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    adverse_party_advocate_name: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    sections: Mapped[dict[str, Any]] = mapped_column(SectionsJSON, nullable=False, default=dict)

    __table_args__ = (
        UniqueConstraint("user_id", "case_no", name="uq_case_file_user_case_no"),
        Index("ix_case_file_user_created", "user_id", "created_at"),
        Index("ix_case_file_user_status", "user_id", "status"),
        Index("ix_case_file_user_next_hearing", "user_id", "next_hearing"),
    )

    def __repr__(self) -> str:
        return f"<Case(id={self.id}, case_no={self.case_no}, user_id={self.user_id})>"
