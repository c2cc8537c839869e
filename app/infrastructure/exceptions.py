"""Infrastructure exceptions for storage operations.

They extend the domain StorageException so services can treat any
backend failure alike and the API maps them to 500 responses.
"""

from app.domain.exceptions import StorageException


class StorageNotFoundError(StorageException):
    """File or object not found in storage."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"File not found: {file_path}",
            "STORAGE_NOT_FOUND",
            {"file_path": file_path},
        )


class StorageUploadError(StorageException):
    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            "Failed to store uploaded file",
            "STORAGE_UPLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDownloadError(StorageException):
    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            "Failed to read stored file",
            "STORAGE_DOWNLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDeleteError(StorageException):
    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            "Failed to delete stored file",
            "STORAGE_DELETE_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageChecksumMismatchError(StorageException):
    """Stored bytes do not match the checksum computed before upload."""

    def __init__(self, file_path: str, expected: str, actual: str) -> None:
        super().__init__(
            "Checksum mismatch for stored file",
            "STORAGE_CHECKSUM_ERROR",
            {"file_path": file_path, "expected": expected, "actual": actual},
        )


class StorageAlreadyExistsError(StorageException):
    """A different file is already stored under this reference."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            "Stored file already exists",
            "STORAGE_EXISTS_ERROR",
            {"file_path": file_path},
        )


class StoragePermissionError(StorageException):
    """Reference escapes the storage root or the backend refused access."""

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation}",
            "STORAGE_PERMISSION_ERROR",
            {"file_path": file_path, "operation": operation},
        )
