"""Router – file upload to Google Cloud Storage."""

import logging
import os

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from src.upload_api.dependencies import SettingsDep, StorageDep
from src.upload_api.exceptions import UploadRejectedError
from src.upload_api.schemas.upload import UploadResponse
from src.upload_api.services.upload_service import upload_file
from src.upload_api.services.validation_service import validate_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Upload"])


def declared_size(file: UploadFile) -> int:
    """Size reported by the multipart parser, measured from the spool if absent."""
    if file.size is not None:
        return file.size
    size = file.file.seek(0, os.SEEK_END)
    file.file.seek(0)
    return size


@router.options("/upload")
def upload_preflight(settings: SettingsDep) -> Response:
    """CORS preflight – empty body, CORS headers only."""
    return Response(status_code=200, headers=settings.cors_headers)


@router.post("/upload", response_model=UploadResponse, response_model_exclude_none=True)
async def upload(request: Request, settings: SettingsDep, storage: StorageDep) -> JSONResponse:
    """
    Upload a single file to the configured bucket.

    Expects ``multipart/form-data`` with one ``file`` field.

    Returns
    -------
    UploadResponse envelope with:
        - data.fileName : generated object key
        - data.url      : public URL of the object
        - data.size     : bytes written
    """
    # ── parse multipart body ──
    content_type = request.headers.get("content-type", "").lower()
    if not content_type.startswith("multipart/form-data"):
        raise UploadRejectedError("Failed to parse multipart form")

    try:
        form = await request.form()
    except (MultiPartException, StarletteHTTPException, ValueError) as exc:
        # python-multipart parse errors subclass ValueError
        raise UploadRejectedError("Failed to parse multipart form") from exc

    try:
        file = form.get("file")
        if not isinstance(file, UploadFile):
            raise UploadRejectedError("No file provided or invalid file field")

        filename = file.filename or ""

        # ── validate before touching the backend ──
        validate_upload(
            filename,
            declared_size(file),
            max_size=settings.max_upload_size,
            allowed_extensions=settings.allowed_extensions_set,
        )

        # ── delegate the write (blocking SDK call) ──
        result = await run_in_threadpool(
            upload_file, storage, filename, file.file, file.content_type
        )
    finally:
        await form.close()

    return JSONResponse(
        content=UploadResponse.ok(result).to_json(),
        headers=settings.cors_headers,
    )
