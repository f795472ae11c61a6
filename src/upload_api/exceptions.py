"""Exceptions raised while handling an upload."""

from fastapi import status


class UploadError(Exception):
    """Base error; ``message`` is returned verbatim in the error envelope."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UploadRejectedError(UploadError):
    """Raised when the request or file fails validation."""

    status_code = status.HTTP_400_BAD_REQUEST


class UploadFailedError(UploadError):
    """Raised when the storage backend could not store the file."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
