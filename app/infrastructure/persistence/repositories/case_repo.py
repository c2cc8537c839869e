"""Case repository. Maps ORM rows to CaseEntity and back."""

from typing import Any

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities.case import CaseEntity, sections_from_json, sections_to_json
from app.domain.enums import CaseStatus, OnBehalfOf
from app.domain.exceptions import CaseNumberConflictException, ResourceNotFoundException
from app.infrastructure.persistence.models.case import Case
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc

_SCALAR_FIELDS = (
    "title",
    "case_no",
    "case_type",
    "court_name",
    "case_year",
    "party_name",
    "contact_number",
    "respondent",
    "lawyer",
    "next_hearing",
    "advocate_contact_number",
    "adverse_party_advocate_name",
    "description",
)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user text only matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _case_to_entity(c: Case) -> CaseEntity:
    return CaseEntity(
        id=c.id,
        user_id=c.user_id,
        status=CaseStatus(c.status),
        on_behalf_of=OnBehalfOf(c.on_behalf_of),
        sections=sections_from_json(c.sections),
        created_at=ensure_utc(c.created_at),
        updated_at=ensure_utc(c.updated_at),
        **{name: getattr(c, name) for name in _SCALAR_FIELDS},
    )


def _apply_entity(c: Case, entity: CaseEntity) -> None:
    for name in _SCALAR_FIELDS:
        setattr(c, name, getattr(entity, name))
    c.status = entity.status.value
    c.on_behalf_of = entity.on_behalf_of.value
    c.sections = sections_to_json(entity.sections)
    if entity.updated_at is not None:
        c.updated_at = entity.updated_at


class CaseRepository(BaseRepository[Case]):
    """Case store. Every query is scoped by owner."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Case)

    async def get_by_id_and_owner(self, case_id: str, owner_id: str) -> CaseEntity | None:
        row = await self._get_owned(case_id, owner_id)
        return _case_to_entity(row) if row else None

    async def exists_case_no(
        self, owner_id: str, case_no: str, exclude_case_id: str | None = None
    ) -> bool:
        conditions = [Case.user_id == owner_id, Case.case_no == case_no]
        if exclude_case_id is not None:
            conditions.append(Case.id != exclude_case_id)
        result = await self.db.execute(select(Case.id).where(and_(*conditions)).limit(1))
        return result.scalar_one_or_none() is not None

    async def create_case(self, case: CaseEntity) -> CaseEntity:
        """Insert the case. A concurrent duplicate surfaces as a conflict."""
        row = Case(id=case.id, user_id=case.user_id)
        _apply_entity(row, case)
        if case.created_at is not None:
            row.created_at = case.created_at
        try:
            created = await self.create(row)
        except IntegrityError as e:
            raise CaseNumberConflictException(case.case_no) from e
        return _case_to_entity(created)

    async def save(self, case: CaseEntity) -> CaseEntity:
        row = await self._get_owned(case.id, case.user_id)
        if row is None:
            raise ResourceNotFoundException("case", case.id)
        _apply_entity(row, case)
        try:
            updated = await self.update(row)
        except IntegrityError as e:
            raise CaseNumberConflictException(case.case_no) from e
        return _case_to_entity(updated)

    async def list_by_owner(self, owner_id: str, skip: int, limit: int) -> list[CaseEntity]:
        result = await self.db.execute(
            select(Case)
            .where(Case.user_id == owner_id)
            .order_by(Case.created_at.desc(), Case.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return [_case_to_entity(c) for c in result.scalars().all()]

    async def count_by_owner(self, owner_id: str) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Case).where(Case.user_id == owner_id)
        )
        return int(result.scalar_one())

    async def search(self, owner_id: str, query: str, limit: int = 100) -> list[CaseEntity]:
        pattern = f"%{escape_like(query)}%"
        matches: Any = or_(
            Case.title.ilike(pattern, escape="\\"),
            Case.case_no.ilike(pattern, escape="\\"),
            Case.party_name.ilike(pattern, escape="\\"),
        )
        result = await self.db.execute(
            select(Case)
            .where(and_(Case.user_id == owner_id, matches))
            .order_by(Case.created_at.desc(), Case.id.desc())
            .limit(limit)
        )
        return [_case_to_entity(c) for c in result.scalars().all()]

    async def delete_by_id_and_owner(self, case_id: str, owner_id: str) -> bool:
        return await self._delete_owned(case_id, owner_id)
