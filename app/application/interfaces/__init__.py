"""Application interfaces (ports): repository and storage protocols.

No runtime imports from app.infrastructure.
"""

from app.application.interfaces.repositories import ICaseRepository, INoteRepository
from app.application.interfaces.storage import IStorageService, StorageUploadResult

__all__ = [
    "ICaseRepository",
    "INoteRepository",
    "IStorageService",
    "StorageUploadResult",
]
