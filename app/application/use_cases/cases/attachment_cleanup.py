"""Removal of the rows and files that case attachments point at."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from app.application.interfaces.repositories import INoteRepository
from app.application.interfaces.storage import IStorageService
from app.domain.entities.attachment import Attachment, FileAttachment, NoteAttachment
from app.domain.exceptions import StorageException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupReport:
    notes_deleted: int = 0
    files_deleted: int = 0
    files_failed: int = 0


class AttachmentCleanup:
    """Deletes dependents of removed attachments.

    Note rows are deleted through the repository and share the caller's
    transaction. Stored files are deleted best-effort: a storage failure is
    logged and never aborts the operation that removed the attachment.
    """

    def __init__(self, storage_service: IStorageService, note_repo: INoteRepository) -> None:
        self.storage = storage_service
        self.note_repo = note_repo

    async def remove_file(self, storage_ref: str) -> bool:
        """Delete one stored file. Returns True only when it was removed."""
        try:
            removed = await self.storage.delete(storage_ref)
        except StorageException as e:
            logger.warning(
                "Failed to delete stored file %s: %s", storage_ref, e.message
            )
            return False
        if not removed:
            logger.info("Stored file already absent: %s", storage_ref)
        return removed

    async def remove_note(self, owner_id: str, note_id: str) -> bool:
        return await self.note_repo.delete_by_id_and_owner(note_id, owner_id)

    async def remove(self, owner_id: str, attachment: Attachment) -> bool:
        if isinstance(attachment, FileAttachment):
            return await self.remove_file(attachment.file.storage_ref)
        return await self.remove_note(owner_id, attachment.note_id)

    async def remove_all(
        self, owner_id: str, attachments: Iterable[Attachment]
    ) -> CleanupReport:
        """Delete every referenced note (one statement), then every file."""
        attachments = list(attachments)
        note_ids = [a.note_id for a in attachments if isinstance(a, NoteAttachment)]
        notes_deleted = 0
        if note_ids:
            notes_deleted = await self.note_repo.delete_many_for_owner(owner_id, note_ids)
        files_deleted = files_failed = 0
        for attachment in attachments:
            if not isinstance(attachment, FileAttachment):
                continue
            if await self.remove_file(attachment.file.storage_ref):
                files_deleted += 1
            else:
                files_failed += 1
        return CleanupReport(
            notes_deleted=notes_deleted,
            files_deleted=files_deleted,
            files_failed=files_failed,
        )
