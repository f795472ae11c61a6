"""GCS Upload API – FastAPI application entry-point."""

from contextlib import asynccontextmanager
import logging
from collections.abc import AsyncIterator

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from google.auth.exceptions import GoogleAuthError
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.upload_api.config import SERVICE_VERSION, Settings, get_settings
from src.upload_api.exceptions import UploadError
from src.upload_api.router import health, upload
from src.upload_api.schemas.upload import UploadResponse
from src.upload_api.services.storage_service import GCSStorageClient, StorageClient

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)

API_INFO = {
    "service": "Google Cloud Storage Upload API",
    "version": SERVICE_VERSION,
    "endpoints": {
        "upload": "POST /upload",
        "health": "GET /health",
    },
    "usage": {
        "upload": "Send multipart form with 'file' field to /upload endpoint",
    },
}


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler once; later calls only change the level."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(getattr(logging, level))


def _error_headers(request: Request, extra: dict[str, str] | None = None) -> dict[str, str]:
    headers = dict(extra or {})
    if request.url.path == "/upload":
        headers.update(request.app.state.settings.cors_headers)
    return headers


# ──────────────────────────────────────────────
# Exception handlers: every failure leaves as an error envelope
# ──────────────────────────────────────────────
async def upload_error_handler(request: Request, exc: UploadError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=UploadResponse.fail(exc.message).to_json(),
        headers=_error_headers(request),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = str(exc.detail)
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = "Method not allowed"
    return JSONResponse(
        status_code=exc.status_code,
        content=UploadResponse.fail(message).to_json(),
        headers=_error_headers(request, exc.headers),
    )


# ──────────────────────────────────────────────
# Application factory
# ──────────────────────────────────────────────
def create_app(settings: Settings, storage_client: StorageClient) -> FastAPI:
    """Build the app around an already-constructed storage client.

    The client is shared by all requests and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        logger.info("🚀 Server starting on port %s", settings.port)
        logger.info("Using GCS bucket: %s", settings.gcs_bucket_name)
        logger.info("Using project ID: %s", settings.google_cloud_project)
        yield
        logger.info("🛑 Shutting down – closing storage client …")
        storage_client.close()

    app = FastAPI(
        title="GCS Upload API",
        description="Validate multipart uploads and store them in Google Cloud Storage.",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storage_client = storage_client

    app.add_exception_handler(UploadError, upload_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    # ── register routers ──
    app.get("/")(lambda: API_INFO)
    app.include_router(health.router)
    app.include_router(upload.router)

    return app


def create_production_app() -> FastAPI:
    """Load settings from the environment and connect to GCS.

    Raises ``pydantic.ValidationError`` on missing configuration and
    propagates storage client construction errors.
    """
    settings = get_settings()
    storage_client = GCSStorageClient(
        project_id=settings.google_cloud_project,
        bucket_name=settings.gcs_bucket_name,
        credentials_path=settings.google_application_credentials,
    )
    return create_app(settings, storage_client)


def run() -> None:
    """Console entry point; exits with status 1 before serving on startup errors."""
    configure_logging()

    try:
        app = create_production_app()
    except ValidationError as exc:
        logger.critical("Invalid configuration (GCS_BUCKET_NAME and GOOGLE_CLOUD_PROJECT are required): %s", exc)
        raise SystemExit(1) from exc
    except (GoogleAuthError, OSError, ValueError) as exc:
        logger.critical("Failed to create storage client: %s", exc)
        raise SystemExit(1) from exc

    settings: Settings = app.state.settings
    configure_logging(settings.log_level)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        timeout_keep_alive=settings.timeout_keep_alive,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
