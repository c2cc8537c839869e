"""Case API: thin routes delegating to CaseService and CaseAttachmentService.

Every route is scoped to the bearer token's user; another user's case is
reported as not found.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile

from app.api.v1.dependencies import (
    get_attachment_service,
    get_attachment_service_for_write,
    get_case_service,
    get_case_service_for_write,
    get_current_user,
)
from app.application.dtos.case import UploadedFile
from app.application.dtos.user import AuthenticatedUser
from app.application.use_cases.cases import CaseAttachmentService, CaseService
from app.core.limiter import limit_upload, limit_writes
from app.schemas.case import (
    AttachmentResponse,
    CaseCreateRequest,
    CaseNoteCreateRequest,
    CaseResponse,
    CaseStatusUpdateRequest,
    CaseUpdateRequest,
)
from app.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, Pagination

router = APIRouter()

CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]


@router.post("", response_model=ApiResponse[CaseResponse], status_code=201)
@limit_writes
async def create_case(
    request: Request,
    body: CaseCreateRequest,
    user: CurrentUser,
    case_svc: CaseService = Depends(get_case_service_for_write),
):
    """Create a case with empty sections. 409 if the case number is taken."""
    case = await case_svc.create_case(owner_id=user.user_id, data=body.to_dto())
    return ApiResponse(
        message="Case created successfully", data=CaseResponse.from_entity(case)
    )


@router.get("", response_model=PaginatedResponse[CaseResponse])
async def list_cases(
    user: CurrentUser,
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, description="Page size; capped at 100"),
    case_svc: CaseService = Depends(get_case_service),
):
    """Newest-first page of the caller's cases."""
    result = await case_svc.list_cases(owner_id=user.user_id, page=page, page_size=limit)
    return PaginatedResponse(
        data=[CaseResponse.from_entity(c) for c in result.items],
        pagination=Pagination(current=result.page, pages=result.pages, total=result.total),
    )


@router.get("/search", response_model=ApiResponse[list[CaseResponse]])
async def search_cases(
    user: CurrentUser,
    query: str | None = Query(None, description="Matches title, case number or party"),
    case_svc: CaseService = Depends(get_case_service),
):
    """Case-insensitive search. Defined before /{case_id} for route precedence."""
    cases = await case_svc.search_cases(owner_id=user.user_id, query=query)
    return ApiResponse(data=[CaseResponse.from_entity(c) for c in cases])


@router.get("/{case_id}", response_model=ApiResponse[CaseResponse])
async def get_case(
    case_id: str,
    user: CurrentUser,
    case_svc: CaseService = Depends(get_case_service),
):
    case = await case_svc.get_case(case_id=case_id, owner_id=user.user_id)
    return ApiResponse(data=CaseResponse.from_entity(case))


@router.put("/{case_id}", response_model=ApiResponse[CaseResponse])
@limit_writes
async def update_case(
    request: Request,
    case_id: str,
    body: CaseUpdateRequest,
    user: CurrentUser,
    case_svc: CaseService = Depends(get_case_service_for_write),
):
    """Merge the supplied fields into the case; sections are not editable here."""
    case = await case_svc.update_case(
        case_id=case_id, owner_id=user.user_id, data=body.to_dto()
    )
    return ApiResponse(
        message="Case updated successfully", data=CaseResponse.from_entity(case)
    )


@router.patch("/{case_id}/status", response_model=ApiResponse[CaseResponse])
@limit_writes
async def update_case_status(
    request: Request,
    case_id: str,
    body: CaseStatusUpdateRequest,
    user: CurrentUser,
    case_svc: CaseService = Depends(get_case_service_for_write),
):
    case = await case_svc.update_status(
        case_id=case_id, owner_id=user.user_id, status=body.status
    )
    return ApiResponse(
        message="Case status updated successfully", data=CaseResponse.from_entity(case)
    )


@router.delete("/{case_id}", response_model=MessageResponse)
@limit_writes
async def delete_case(
    request: Request,
    case_id: str,
    user: CurrentUser,
    case_svc: CaseService = Depends(get_case_service_for_write),
):
    """Delete the case together with its notes and stored files."""
    await case_svc.delete_case(case_id=case_id, owner_id=user.user_id)
    return MessageResponse(message="Case deleted successfully")


@router.post("/{case_id}/upload", response_model=ApiResponse[CaseResponse])
@limit_upload
async def upload_files(
    request: Request,
    case_id: str,
    user: CurrentUser,
    files: list[UploadFile] = File(...),
    section_type: str = Form(..., alias="sectionType"),
    attachment_svc: CaseAttachmentService = Depends(get_attachment_service_for_write),
):
    """Store one or more files and append them to a section of the case."""
    uploads = [
        UploadedFile(
            filename=f.filename or "",
            content_type=f.content_type,
            file_data=f.file,
        )
        for f in files
    ]
    case = await attachment_svc.upload_files(
        case_id=case_id, owner_id=user.user_id, section=section_type, files=uploads
    )
    return ApiResponse(
        message="Files uploaded successfully", data=CaseResponse.from_entity(case)
    )


@router.post("/{case_id}/notes", response_model=ApiResponse[CaseResponse])
@limit_writes
async def add_note(
    request: Request,
    case_id: str,
    body: CaseNoteCreateRequest,
    user: CurrentUser,
    attachment_svc: CaseAttachmentService = Depends(get_attachment_service_for_write),
):
    """Create a note and attach it to a section of the case."""
    case = await attachment_svc.create_note(
        case_id=case_id,
        owner_id=user.user_id,
        section=body.section_type,
        title=body.title,
        content=body.content,
    )
    return ApiResponse(
        message="Note added successfully", data=CaseResponse.from_entity(case)
    )


@router.delete("/{case_id}/files/{file_id}", response_model=ApiResponse[CaseResponse])
@limit_writes
async def delete_attachment(
    request: Request,
    case_id: str,
    file_id: str,
    user: CurrentUser,
    attachment_svc: CaseAttachmentService = Depends(get_attachment_service_for_write),
):
    """Remove a file or note attachment, then the stored file or note it points at.

    file_id may be the file id, its storage reference, or a note id.
    """
    case = await attachment_svc.delete_attachment(
        case_id=case_id, owner_id=user.user_id, ref=file_id
    )
    return ApiResponse(
        message="Attachment deleted successfully", data=CaseResponse.from_entity(case)
    )


@router.get(
    "/{case_id}/sections",
    response_model=ApiResponse[
        list[AttachmentResponse] | dict[str, list[AttachmentResponse]]
    ],
)
async def get_sections(
    case_id: str,
    user: CurrentUser,
    section: str | None = Query(None, description="drafts, opponentDrafts, courtOrders or evidence"),
    attachment_svc: CaseAttachmentService = Depends(get_attachment_service),
):
    """One section with notes populated, or all four sections keyed by name."""
    if section is not None:
        items = await attachment_svc.list_section(
            case_id=case_id, owner_id=user.user_id, section=section
        )
        return ApiResponse(data=[AttachmentResponse.from_item(i) for i in items])
    sections = await attachment_svc.get_sections(case_id=case_id, owner_id=user.user_id)
    return ApiResponse(
        data={
            name.value: [AttachmentResponse.from_item(i) for i in items]
            for name, items in sections.items()
        }
    )
