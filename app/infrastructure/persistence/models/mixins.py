"""SQLAlchemy mixins shared by the models.

CuidMixin (string primary key), OwnedMixin (user_id of the owning user)
and TimestampMixin (created_at / updated_at, timezone-aware).
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from app.shared.utils.generators import generate_cuid


class CuidMixin:
    """Primary key ``id`` defaulting to a new CUID2."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class OwnedMixin:
    """Owner column. Users live in the auth service, so there is no FK."""

    @declared_attr
    def user_id(cls) -> Mapped[str]:
        return mapped_column(String, nullable=False, index=True)


class TimestampMixin:
    """created_at and updated_at (server defaults, timezone-aware).

    Services may set both explicitly; the defaults cover direct inserts.
    """

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class OwnedModel(CuidMixin, OwnedMixin, TimestampMixin):
    """Combined mixin: CUID + user_id + created_at/updated_at."""

    __abstract__ = True
