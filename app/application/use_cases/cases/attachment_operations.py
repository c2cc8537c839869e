"""Attachment lifecycle of a case: upload files, add notes, delete, list."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from app.application.dtos.case import SectionItem, UploadedFile
from app.application.interfaces.repositories import ICaseRepository, INoteRepository
from app.application.interfaces.storage import IStorageService
from app.application.services.upload_policy import (
    UploadPolicy,
    ValidatedUpload,
    rewind_if_seekable,
)
from app.application.use_cases.cases.attachment_cleanup import AttachmentCleanup
from app.domain.entities.attachment import (
    FileAttachment,
    NoteAttachment,
    StoredFile,
)
from app.domain.entities.case import CaseEntity, parse_section
from app.domain.enums import SectionName
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.shared.telemetry.tracing import add_span_attributes, traced
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_cuid
from app.shared.utils.sanitization import InputSanitizer, sanitize_text

logger = logging.getLogger(__name__)

_ONE_TICK = timedelta(microseconds=1)


def _next_timestamp(previous: datetime | None) -> datetime:
    """Current time, nudged forward so it is strictly after previous."""
    now = utc_now()
    if previous is not None and now <= previous:
        return previous + _ONE_TICK
    return now


def build_storage_ref(
    owner_id: str, case_id: str, section: SectionName, file_id: str, filename: str
) -> str:
    seg = InputSanitizer.sanitize_path_segment
    return (
        f"users/{seg(owner_id)}/cases/{seg(case_id)}/"
        f"{section.value}/{file_id}/{filename}"
    )


class CaseAttachmentService:
    """Adds, removes and lists the attachments in a case's sections.

    The case row is read, changed in memory and written back once per
    operation. Section names are checked before the case is loaded.
    """

    def __init__(
        self,
        case_repo: ICaseRepository,
        note_repo: INoteRepository,
        storage_service: IStorageService,
        upload_policy: UploadPolicy | None = None,
    ) -> None:
        self.case_repo = case_repo
        self.note_repo = note_repo
        self.storage = storage_service
        self.policy = upload_policy or UploadPolicy()
        self.cleanup = AttachmentCleanup(storage_service, note_repo)

    async def _get_owned(self, case_id: str, owner_id: str) -> CaseEntity:
        case = await self.case_repo.get_by_id_and_owner(case_id, owner_id)
        if case is None:
            raise ResourceNotFoundException("case", case_id)
        return case

    async def _store_one(
        self,
        case: CaseEntity,
        section: SectionName,
        upload: ValidatedUpload,
        added_at: datetime,
    ) -> FileAttachment:
        file_id = generate_cuid()
        storage_ref = build_storage_ref(
            case.user_id, case.id, section, file_id, upload.filename
        )
        url = await self.storage.resolve_url(storage_ref)
        rewind_if_seekable(upload.source.file_data)
        result = await self.storage.upload(
            file_data=upload.source.file_data,
            storage_ref=storage_ref,
            expected_checksum=upload.checksum,
            content_type=upload.content_type,
            metadata={"case_id": case.id, "section": section.value},
        )
        stored = StoredFile(
            id=file_id,
            name=upload.filename,
            url=url,
            storage_ref=result["storage_ref"],
            mimetype=upload.content_type,
            size=result["size"],
            checksum=result["checksum"],
            uploaded_at=result["uploaded_at"],
        )
        return FileAttachment(name=upload.filename, file=stored, added_at=added_at)

    async def _discard(self, attachments: list[FileAttachment]) -> None:
        for attachment in attachments:
            await self.cleanup.remove_file(attachment.file.storage_ref)

    @traced("case.upload_files")
    async def upload_files(
        self,
        *,
        case_id: str,
        owner_id: str,
        section: str | SectionName,
        files: list[UploadedFile],
    ) -> CaseEntity:
        """Store a batch of files and append them to one section.

        The batch is all-or-nothing: every file is validated first, and a
        storage or persistence failure removes the files this call stored.

        Raises:
            InvalidSectionException: section is not one of the four names.
            ResourceNotFoundException: case absent or not owned.
            ValidationException / UnsupportedMediaTypeException /
            FileTooLargeException: the batch breaks the upload policy.
            StorageException: the file store failed.
        """
        target = parse_section(section)
        case = await self._get_owned(case_id, owner_id)
        validated = await self.policy.validate_batch(files)
        add_span_attributes(**{"upload.count": len(validated)})

        existing = case.sections[target]
        previous = existing[-1].added_at if existing else None
        stored: list[FileAttachment] = []
        try:
            for upload in validated:
                previous = _next_timestamp(previous)
                stored.append(await self._store_one(case, target, upload, previous))
        except Exception:
            logger.warning(
                "Upload to case %s failed after %d of %d files; discarding batch",
                case.id,
                len(stored),
                len(validated),
            )
            await self._discard(stored)
            raise

        for attachment in stored:
            case.add_attachment(target, attachment)
        case.touch(utc_now())
        try:
            saved = await self.case_repo.save(case)
        except Exception:
            await self._discard(stored)
            raise
        logger.info(
            "Uploaded %d file(s) to case %s section %s", len(stored), case.id, target.value
        )
        return saved

    @traced("case.create_note")
    async def create_note(
        self,
        *,
        case_id: str,
        owner_id: str,
        section: str | SectionName,
        title: str,
        content: str | None = "",
    ) -> CaseEntity:
        """Create a note owned by the caller and list it in a section."""
        target = parse_section(section)
        clean_title = sanitize_text(title) or ""
        if not clean_title:
            raise ValidationException("Title is required", field="title")
        case = await self._get_owned(case_id, owner_id)
        note = await self.note_repo.create_note(
            owner_id, clean_title, sanitize_text(content) or ""
        )
        existing = case.sections[target]
        case.add_attachment(
            target,
            NoteAttachment(
                name=clean_title,
                note_id=note.id,
                added_at=_next_timestamp(existing[-1].added_at if existing else None),
            ),
        )
        case.touch(utc_now())
        return await self.case_repo.save(case)

    @traced("case.delete_attachment")
    async def delete_attachment(
        self, *, case_id: str, owner_id: str, ref: str
    ) -> CaseEntity:
        """Remove the first attachment matching ref, then what it points at.

        Sections are scanned drafts, opponentDrafts, courtOrders, evidence.
        The case is saved before the note row or stored file is removed;
        a failed file delete is logged and the call still succeeds.
        """
        case = await self._get_owned(case_id, owner_id)
        removed = case.remove_attachment(ref)
        if removed is None:
            raise ResourceNotFoundException("attachment", ref)
        section, attachment = removed
        case.touch(utc_now())
        saved = await self.case_repo.save(case)
        cleaned = await self.cleanup.remove(owner_id, attachment)
        logger.info(
            "Removed %s attachment %s from case %s section %s (dependent removed=%s)",
            attachment.type.value,
            attachment.ref_id,
            case.id,
            section.value,
            cleaned,
        )
        return saved

    @traced("case.list_section")
    async def list_section(
        self, *, case_id: str, owner_id: str, section: str | SectionName
    ) -> list[SectionItem]:
        """One section's attachments; note attachments carry the live note."""
        target = parse_section(section)
        case = await self._get_owned(case_id, owner_id)
        attachments = case.sections[target]
        note_ids = [a.note_id for a in attachments if isinstance(a, NoteAttachment)]
        notes = (
            await self.note_repo.get_many_for_owner(owner_id, note_ids) if note_ids else {}
        )
        return [
            SectionItem(
                attachment=a,
                note=notes.get(a.note_id) if isinstance(a, NoteAttachment) else None,
            )
            for a in attachments
        ]

    @traced("case.get_sections")
    async def get_sections(
        self, *, case_id: str, owner_id: str
    ) -> dict[SectionName, list[SectionItem]]:
        """All four sections, notes not populated."""
        case = await self._get_owned(case_id, owner_id)
        return {
            section: [SectionItem(attachment=a) for a in case.sections[section]]
            for section in SectionName
        }
