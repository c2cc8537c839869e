"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the caller's identity and the application
services. Services are built from infrastructure implementations here;
routes depend only on these dependencies, not on infra directly.

Read routes get a plain session (get_db); write routes get a session that
commits on success and rolls back on error (get_db_transactional).
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import AuthenticatedUser
from app.application.interfaces.storage import IStorageService
from app.application.services.upload_policy import UploadPolicy
from app.application.use_cases.cases import CaseAttachmentService, CaseService
from app.application.use_cases.notes import NoteService
from app.core.config import get_settings
from app.domain.exceptions import AuthenticationException
from app.infrastructure.external.storage.factory import StorageFactory
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import CaseRepository, NoteRepository
from app.infrastructure.security.jwt import verify_token

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> AuthenticatedUser:
    """Return the caller from the bearer token's ``sub``; 401 if missing or invalid."""
    if credentials is None:
        raise AuthenticationException("Not authenticated")
    try:
        payload = verify_token(credentials.credentials)
    except ValueError as e:
        raise AuthenticationException("Invalid or expired token") from e
    return AuthenticatedUser(user_id=payload["sub"])


def get_storage_service() -> IStorageService:
    """Configured file store (local or S3)."""
    return StorageFactory.create_storage_service()


def get_upload_policy() -> UploadPolicy:
    return UploadPolicy.from_settings(get_settings())


async def get_case_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[IStorageService, Depends(get_storage_service)],
) -> CaseService:
    return CaseService(CaseRepository(db), NoteRepository(db), storage)


async def get_case_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    storage: Annotated[IStorageService, Depends(get_storage_service)],
) -> CaseService:
    """CaseService whose case and note writes share one transaction."""
    return CaseService(CaseRepository(db), NoteRepository(db), storage)


async def get_attachment_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[IStorageService, Depends(get_storage_service)],
) -> CaseAttachmentService:
    return CaseAttachmentService(CaseRepository(db), NoteRepository(db), storage)


async def get_attachment_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    storage: Annotated[IStorageService, Depends(get_storage_service)],
    policy: Annotated[UploadPolicy, Depends(get_upload_policy)],
) -> CaseAttachmentService:
    """CaseAttachmentService for uploads, case notes and attachment deletes."""
    return CaseAttachmentService(
        CaseRepository(db), NoteRepository(db), storage, upload_policy=policy
    )


async def get_note_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> NoteService:
    return NoteService(NoteRepository(db))


async def get_note_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> NoteService:
    return NoteService(NoteRepository(db))
