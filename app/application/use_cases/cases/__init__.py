"""Case use cases: CRUD and the section attachment lifecycle."""

from app.application.use_cases.cases.attachment_cleanup import (
    AttachmentCleanup,
    CleanupReport,
)
from app.application.use_cases.cases.attachment_operations import CaseAttachmentService
from app.application.use_cases.cases.case_operations import CaseService

__all__ = ["AttachmentCleanup", "CaseAttachmentService", "CaseService", "CleanupReport"]
