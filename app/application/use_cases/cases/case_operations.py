"""Case operations: create, read, list, search, update, status and delete."""

from __future__ import annotations

import logging
from dataclasses import asdict

from app.application.dtos.case import CaseCreate, CasePage, CaseUpdate
from app.application.interfaces.repositories import ICaseRepository, INoteRepository
from app.application.interfaces.storage import IStorageService
from app.application.use_cases.cases.attachment_cleanup import AttachmentCleanup
from app.domain.entities.case import CaseEntity, empty_sections
from app.domain.enums import CaseStatus
from app.domain.exceptions import (
    CaseNumberConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from app.shared.telemetry.tracing import traced
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_cuid
from app.shared.utils.sanitization import sanitize_text

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 100

_FREE_TEXT_FIELDS = (
    "title",
    "case_type",
    "court_name",
    "party_name",
    "respondent",
    "lawyer",
    "adverse_party_advocate_name",
    "description",
)


def _clean_text_fields(values: dict) -> dict:
    """Strip markup from free-text fields; identifiers and numbers are left alone."""
    return {
        k: sanitize_text(v) if k in _FREE_TEXT_FIELDS and isinstance(v, str) else v
        for k, v in values.items()
    }


class CaseService:
    """Case CRUD for a single owner.

    Every lookup is scoped by ``(case_id, owner_id)``; a case owned by
    someone else is reported exactly like a missing one.
    """

    def __init__(
        self,
        case_repo: ICaseRepository,
        note_repo: INoteRepository,
        storage_service: IStorageService,
    ) -> None:
        self.case_repo = case_repo
        self.cleanup = AttachmentCleanup(storage_service, note_repo)

    async def _get_owned(self, case_id: str, owner_id: str) -> CaseEntity:
        case = await self.case_repo.get_by_id_and_owner(case_id, owner_id)
        if case is None:
            raise ResourceNotFoundException("case", case_id)
        return case

    @traced("case.create")
    async def create_case(self, *, owner_id: str, data: CaseCreate) -> CaseEntity:
        """Create a case with empty sections.

        Raises:
            CaseNumberConflictException: owner already uses data.case_no.
            ValidationException: A field fails entity validation.
        """
        fields = _clean_text_fields(asdict(data))
        fields["case_no"] = fields["case_no"].strip()
        if await self.case_repo.exists_case_no(owner_id, fields["case_no"]):
            raise CaseNumberConflictException(fields["case_no"])
        now = utc_now()
        case = CaseEntity(
            id=generate_cuid(),
            user_id=owner_id,
            sections=empty_sections(),
            created_at=now,
            updated_at=now,
            **fields,
        )
        created = await self.case_repo.create_case(case)
        logger.info("Case created: id=%s owner=%s", created.id, owner_id)
        return created

    @traced("case.get")
    async def get_case(self, *, case_id: str, owner_id: str) -> CaseEntity:
        return await self._get_owned(case_id, owner_id)

    @traced("case.list")
    async def list_cases(
        self, *, owner_id: str, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> CasePage:
        """Newest-first page of the owner's cases. page_size is capped."""
        page = max(page, 1)
        page_size = min(max(page_size, 1), MAX_PAGE_SIZE)
        skip = (page - 1) * page_size
        items = await self.case_repo.list_by_owner(owner_id, skip=skip, limit=page_size)
        total = await self.case_repo.count_by_owner(owner_id)
        return CasePage(items=items, total=total, page=page, page_size=page_size)

    @traced("case.search")
    async def search_cases(self, *, owner_id: str, query: str | None) -> list[CaseEntity]:
        """Case-insensitive substring search on title, case number and party."""
        if query is None or not query.strip():
            raise ValidationException("Search query is required", field="query")
        return await self.case_repo.search(owner_id, query.strip())

    @traced("case.update")
    async def update_case(
        self, *, case_id: str, owner_id: str, data: CaseUpdate
    ) -> CaseEntity:
        """Merge the non-null fields of data into the case.

        A changed case number is checked against the owner's other cases.
        """
        case = await self._get_owned(case_id, owner_id)
        changes = _clean_text_fields(data.changes())
        new_case_no = changes.get("case_no")
        if new_case_no is not None:
            new_case_no = changes["case_no"] = new_case_no.strip()
            if new_case_no != case.case_no and await self.case_repo.exists_case_no(
                owner_id, new_case_no, exclude_case_id=case.id
            ):
                raise CaseNumberConflictException(new_case_no)
        case.apply_changes(changes)
        case.touch(utc_now())
        return await self.case_repo.save(case)

    @traced("case.update_status")
    async def update_status(
        self, *, case_id: str, owner_id: str, status: str | CaseStatus
    ) -> CaseEntity:
        """Move the case to any status (``disposed`` means completed)."""
        if isinstance(status, CaseStatus):
            new_status = status
        else:
            try:
                new_status = CaseStatus.parse(status or "")
            except ValueError:
                raise ValidationException(
                    "Invalid status. Must be one of: " + ", ".join(CaseStatus.values()),
                    field="status",
                ) from None
        case = await self._get_owned(case_id, owner_id)
        case.change_status(new_status)
        case.touch(utc_now())
        return await self.case_repo.save(case)

    @traced("case.delete")
    async def delete_case(self, *, case_id: str, owner_id: str) -> None:
        """Delete the case after its notes and stored files.

        Notes go first (same transaction as the case row), then files
        (best-effort), then the case itself.
        """
        case = await self._get_owned(case_id, owner_id)
        report = await self.cleanup.remove_all(owner_id, [a for _, a in case.iter_attachments()])
        deleted = await self.case_repo.delete_by_id_and_owner(case_id, owner_id)
        if not deleted:
            raise ResourceNotFoundException("case", case_id)
        logger.info(
            "Case deleted: id=%s owner=%s notes=%d files=%d files_failed=%d",
            case_id,
            owner_id,
            report.notes_deleted,
            report.files_deleted,
            report.files_failed,
        )
