"""Base repository: generic CRUD plus owner-scoped lookups."""

from typing import Any, Generic, TypeVar

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, create, update and delete.

    Models with a ``user_id`` column also get owner-scoped get and delete,
    which every public repository method builds on.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def _get_owned(self, entity_id: str, owner_id: str) -> ModelType | None:
        model: Any = self.model
        result = await self.db.execute(
            select(self.model).where(
                and_(model.id == entity_id, model.user_id == owner_id)
            )
        )
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Add, flush and refresh so server defaults are loaded."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush pending changes of an attached record and refresh it."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        await self.db.delete(obj)
        await self.db.flush()

    async def _delete_owned(self, entity_id: str, owner_id: str) -> bool:
        model: Any = self.model
        result = await self.db.execute(
            delete(self.model).where(
                and_(model.id == entity_id, model.user_id == owner_id)
            )
        )
        return (result.rowcount or 0) > 0
