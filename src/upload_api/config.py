from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SERVICE_NAME = "gcs-upload-api"
SERVICE_VERSION = "1.0.0"

DEFAULT_ALLOWED_EXTENSIONS = (
    ".pdf,.doc,.docx,.txt,.rtf,"
    ".jpg,.jpeg,.png,.gif,.bmp,"
    ".zip,.rar,.tar,.gz,"
    ".csv,.xls,.xlsx,"
    ".ppt,.pptx"
)


# ──────────────────────────────────────────────
# Settings (from environment variables / .env)
# ──────────────────────────────────────────────
class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8080
    timeout_keep_alive: int = 60

    # Google Cloud Storage settings
    gcs_bucket_name: str = Field(min_length=1)
    google_cloud_project: str = Field(min_length=1)
    google_application_credentials: str | None = None

    # Upload policy
    max_upload_size: int = 100 * 1024 * 1024  # 100 MB
    allowed_extensions: str = DEFAULT_ALLOWED_EXTENSIONS

    # CORS headers sent on /upload responses
    cors_allow_origin: str = "*"
    cors_allow_methods: str = "POST, OPTIONS"
    cors_allow_headers: str = "Content-Type"

    # Application settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @property
    def allowed_extensions_set(self) -> frozenset[str]:
        """Parse allowed extensions from comma-separated string."""
        return frozenset(
            ext.strip().lower() for ext in self.allowed_extensions.split(",") if ext.strip()
        )

    @property
    def cors_headers(self) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.cors_allow_origin,
            "Access-Control-Allow-Methods": self.cors_allow_methods,
            "Access-Control-Allow-Headers": self.cors_allow_headers,
        }


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process.

    Raises ``pydantic.ValidationError`` when ``GCS_BUCKET_NAME`` or
    ``GOOGLE_CLOUD_PROJECT`` is missing or empty.
    """
    return Settings()
