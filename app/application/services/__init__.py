"""Application services shared by use cases."""

from app.application.services.upload_policy import (
    UploadPolicy,
    ValidatedUpload,
    sanitize_filename,
)

__all__ = ["UploadPolicy", "ValidatedUpload", "sanitize_filename"]
