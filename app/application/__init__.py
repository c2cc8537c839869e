"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions. Infrastructure
implements the interfaces (repositories, storage).
"""

from app.application.interfaces import ICaseRepository, INoteRepository, IStorageService
from app.application.use_cases.cases import CaseAttachmentService, CaseService
from app.application.use_cases.notes import NoteService

__all__ = [
    "ICaseRepository",
    "INoteRepository",
    "IStorageService",
    "CaseAttachmentService",
    "CaseService",
    "NoteService",
]
