"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. SECRET_KEY and the storage backend are validated on
first use of get_settings().
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str) -> list[str]:
    return [item.strip().lower() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "case-file-api"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database. Empty URL leaves the API up but SQL-backed routes answer 503.
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Security: tokens are issued elsewhere, this service only verifies them.
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8081"

    # Storage
    storage_backend: str = "local"
    storage_root: str = "./uploads"
    storage_public_path: str = "/uploads"
    storage_base_url: str | None = None
    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: SecretStr | None = None
    s3_public_base_url: str | None = None

    # Uploads: per-file and per-batch limits, accepted image/PDF types.
    max_file_size: int = 10 * 1024 * 1024
    max_files_per_upload: int = 10
    allowed_upload_extensions: str = "jpeg,jpg,png,gif,webp,pdf"
    allowed_upload_mime_types: str = (
        "image/jpeg,image/png,image/gif,image/webp,application/pdf"
    )
    max_request_size: int = 110 * 1024 * 1024

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def upload_extensions(self) -> frozenset[str]:
        return frozenset(e.lstrip(".") for e in _split_csv(self.allowed_upload_extensions))

    @property
    def upload_mime_types(self) -> frozenset[str]:
        return frozenset(_split_csv(self.allowed_upload_mime_types))

    @model_validator(mode="after")
    def validate_required_and_storage(self) -> "Settings":
        """Validate the secret, storage backend and upload limits."""
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.storage_backend == "s3":
            if not self.s3_bucket:
                raise ValueError(
                    "s3_bucket is required when storage_backend is 's3'. "
                    "Set S3_BUCKET environment variable or update .env file."
                )
        elif self.storage_backend != "local":
            raise ValueError(
                f"Invalid storage_backend '{self.storage_backend}'. "
                "Must be one of: 'local', 's3'"
            )
        if not self.storage_public_path.startswith("/"):
            raise ValueError("storage_public_path must start with '/'")
        if self.max_file_size <= 0 or self.max_files_per_upload <= 0:
            raise ValueError("Upload limits must be positive")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars.
    """
    return Settings()
