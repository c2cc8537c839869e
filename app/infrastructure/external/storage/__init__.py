"""Storage: local filesystem and S3-compatible backends.

StorageFactory picks the backend from settings. The S3 module is imported
only when selected, so boto3 is needed only with the ``storage`` extra.
"""

from app.infrastructure.external.storage.factory import StorageFactory

__all__ = ["StorageFactory"]
