"""Service layer – delegating a validated upload to the storage backend."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import BinaryIO

from src.upload_api.exceptions import UploadFailedError
from src.upload_api.schemas.upload import UploadResult
from src.upload_api.services.storage_service import StorageClient

logger = logging.getLogger(__name__)

PUBLIC_URL_TEMPLATE = "https://storage.googleapis.com/{bucket}/{object_key}"


def build_object_key(filename: str, now: datetime | None = None) -> str:
    """
    Prefix *filename* with a second-resolution timestamp.

    The filename is kept verbatim; path separators and URL-reserved
    characters are not escaped.
    """
    timestamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    return f"{timestamp}-{filename}"


def public_url(bucket: str, object_key: str) -> str:
    return PUBLIC_URL_TEMPLATE.format(bucket=bucket, object_key=object_key)


def upload_file(
    storage: StorageClient,
    filename: str,
    stream: BinaryIO,
    content_type: str | None = None,
    now: datetime | None = None,
) -> UploadResult:
    """
    Write *stream* to the backend under a fresh object key.

    Exactly one backend write is issued; it is not retried.

    Raises
    ------
    UploadFailedError – when the backend reports an I/O error.
    """
    object_key = build_object_key(filename, now)

    try:
        size = storage.upload_file(object_key, stream, content_type)
    except OSError as exc:
        logger.exception("Upload of %s to bucket %s failed", object_key, storage.bucket_name)
        raise UploadFailedError(f"Upload failed: {exc}") from exc

    logger.info("📦 Stored %s (%d bytes)", object_key, size)
    return UploadResult(
        file_name=object_key,
        url=public_url(storage.bucket_name, object_key),
        size=size,
    )
