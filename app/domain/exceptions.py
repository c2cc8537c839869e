"""Domain exceptions for the case file service.

Business rule violations, independent of infrastructure. The presentation
layer maps error_code to an HTTP status in app.core.exception_handlers.
"""

from typing import Any


class CaseFileException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Error envelope body as returned by the API."""
        return {
            "success": False,
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(CaseFileException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class InvalidSectionException(CaseFileException):
    """Raised when a section name is not one of the four case sections."""

    def __init__(self, section: str | None) -> None:
        from app.domain.enums import SectionName

        super().__init__(
            "Invalid section type",
            "INVALID_SECTION",
            {"section": section, "allowed": SectionName.values()},
        )


class AuthenticationException(CaseFileException):
    """Raised when the bearer token is missing, malformed or expired."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class ResourceNotFoundException(CaseFileException):
    """Raised when a resource is absent or owned by someone else.

    Both cases produce the same error so callers cannot probe for ids.
    """

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type.capitalize()} not found",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class CaseNumberConflictException(CaseFileException):
    """Raised when the owner already has a case with this case number."""

    def __init__(self, case_no: str) -> None:
        super().__init__(
            "Case number already exists",
            "CASE_NUMBER_CONFLICT",
            {"case_no": case_no},
        )


class UnsupportedMediaTypeException(CaseFileException):
    """Raised when an upload is not an accepted image or PDF."""

    def __init__(self, filename: str, content_type: str | None) -> None:
        super().__init__(
            "Only image files (jpeg, jpg, png, gif, webp) and PDFs are allowed",
            "UNSUPPORTED_MEDIA_TYPE",
            {"filename": filename, "content_type": content_type},
        )


class FileTooLargeException(CaseFileException):
    """Raised when a single uploaded file exceeds the per-file limit."""

    def __init__(self, filename: str, size: int, max_size: int) -> None:
        super().__init__(
            f"File '{filename}' exceeds the maximum size of {max_size} bytes",
            "FILE_TOO_LARGE",
            {"filename": filename, "size": size, "max_size": max_size},
        )


class SqlNotConfiguredException(CaseFileException):
    """Raised when a SQL-backed route is hit but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            "Database is not configured. Set DATABASE_URL.",
            "SERVICE_UNAVAILABLE",
        )


class StorageException(CaseFileException):
    """Base for file store failures; concrete errors live in infrastructure."""
