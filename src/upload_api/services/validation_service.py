"""Service layer – upload policy checks.

Runs before any I/O against the storage backend. The first failing check
wins: emptiness, then size, then extension.
"""

from __future__ import annotations

import logging
from collections.abc import Collection

from src.upload_api.exceptions import UploadRejectedError

logger = logging.getLogger(__name__)

MB = 1024 * 1024


def file_extension(filename: str) -> str:
    """
    Return the lower-cased extension of *filename*, including the dot.

    Only the last path component is inspected, so ``"dir.d/readme"`` has no
    extension while ``".pdf"`` has ``".pdf"``. Returns ``""`` when there is
    no dot.
    """
    name = filename.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    if dot == -1:
        return ""
    return name[dot:].lower()


def is_allowed_file_type(filename: str, allowed_extensions: Collection[str]) -> bool:
    return file_extension(filename) in allowed_extensions


def validate_upload(
    filename: str,
    size: int,
    *,
    max_size: int,
    allowed_extensions: Collection[str],
) -> None:
    """
    Check a declared upload against the policy.

    Raises
    ------
    UploadRejectedError – with the reason returned to the caller.
    """
    if size == 0:
        reason = "Empty file not allowed"
    elif size > max_size:
        reason = f"File too large (max {max_size // MB}MB)"
    elif not is_allowed_file_type(filename, allowed_extensions):
        reason = "File type not allowed"
    else:
        return

    logger.warning("Rejected upload %r (%d bytes): %s", filename, size, reason)
    raise UploadRejectedError(reason)
