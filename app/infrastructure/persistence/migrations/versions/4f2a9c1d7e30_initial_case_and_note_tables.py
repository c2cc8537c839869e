"""initial_case_and_note_tables

Revision ID: 4f2a9c1d7e30
Revises:
Create Date: 2026-10-17 09:12:44.318207

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "4f2a9c1d7e30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create case_file and note tables."""
    op.create_table(
        "case_file",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("case_no", sa.String(100), nullable=False),
        sa.Column("type", sa.String(100), nullable=False),
        sa.Column("court_name", sa.String(255), nullable=False),
        sa.Column("case_year", sa.Integer(), nullable=False),
        sa.Column("on_behalf_of", sa.String(50), nullable=False),
        sa.Column("party_name", sa.String(255), nullable=False),
        sa.Column("contact_number", sa.String(50), nullable=False),
        sa.Column("respondent", sa.String(255), nullable=False),
        sa.Column("lawyer", sa.String(255), nullable=False),
        sa.Column("next_hearing", sa.Date(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("advocate_contact_number", sa.String(50), nullable=True),
        sa.Column("adverse_party_advocate_name", sa.String(255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "sections",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "case_no", name="uq_case_file_user_case_no"),
    )
    op.create_index("ix_case_file_user_id", "case_file", ["user_id"])
    op.create_index("ix_case_file_user_created", "case_file", ["user_id", "created_at"])
    op.create_index("ix_case_file_user_status", "case_file", ["user_id", "status"])
    op.create_index(
        "ix_case_file_user_next_hearing", "case_file", ["user_id", "next_hearing"]
    )

    op.create_table(
        "note",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("ix_note_user_id", "note", ["user_id"])
    op.create_index("ix_note_user_created", "note", ["user_id", "created_at"])


def downgrade() -> None:
    """Drop note and case_file tables."""
    op.drop_table("note")
    op.drop_table("case_file")
