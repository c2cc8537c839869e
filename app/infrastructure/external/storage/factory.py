"""Storage service factory: creates local or S3 backend from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.application.interfaces.storage import IStorageService

if TYPE_CHECKING:
    from app.core.config import Settings


class StorageFactory:
    """Factory for storage service instances based on configuration."""

    @staticmethod
    def create_storage_service(settings: Settings | None = None) -> IStorageService:
        """Create the configured backend.

        Raises:
            ValueError: Unknown backend or missing required config.
        """
        from app.core.config import get_settings

        s = settings or get_settings()
        backend = s.storage_backend.lower()

        if backend == "local":
            from app.infrastructure.external.storage.local_storage import (
                LocalStorageService,
            )

            return LocalStorageService(
                storage_root=s.storage_root,
                public_path=s.storage_public_path,
                base_url=s.storage_base_url,
            )
        if backend == "s3":
            if not s.s3_bucket:
                raise ValueError("S3_BUCKET required for s3 backend")
            # boto3 ships in the optional "storage" extra.
            from app.infrastructure.external.storage.s3_storage import S3StorageService

            return S3StorageService(
                bucket=s.s3_bucket,
                region=s.s3_region,
                endpoint_url=s.s3_endpoint_url,
                access_key=s.s3_access_key,
                secret_key=s.s3_secret_key.get_secret_value() if s.s3_secret_key else None,
                public_base_url=s.s3_public_base_url,
            )
        raise ValueError(f"Unknown storage backend: {backend}. Supported: 'local', 's3'")
