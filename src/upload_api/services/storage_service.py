"""Service layer – Google Cloud Storage backend."""

from __future__ import annotations

import logging
from typing import BinaryIO, Protocol

from google.cloud import storage

logger = logging.getLogger(__name__)


class StorageClient(Protocol):
    """Protocol defining the storage backend used by the upload route."""

    bucket_name: str

    def upload_file(
        self,
        object_key: str,
        stream: BinaryIO,
        content_type: str | None = None,
    ) -> int:
        """Stream *stream* to *object_key* and return the number of bytes written.

        Backend failures must be raised as ``OSError``; the upload route maps
        only that type to the "Upload failed" envelope.
        """
        ...

    def close(self) -> None:
        """Release the underlying connection pool."""
        ...


class GCSStorageClient:
    """Client for Google Cloud Storage.

    Built once at startup and shared by every request; it is never mutated
    after construction.
    """

    def __init__(
        self,
        project_id: str,
        bucket_name: str,
        credentials_path: str | None = None,
    ):
        """
        Initialize GCS storage client.

        Args:
            project_id: Google Cloud project identifier
            bucket_name: Name of the GCS bucket
            credentials_path: Optional service-account JSON file; application
                default credentials are used when omitted

        Raises:
            ValueError: If project_id or bucket_name is empty
        """
        if not project_id:
            raise ValueError("Project ID is required")
        if not bucket_name:
            raise ValueError("Bucket name is required")

        self.project_id = project_id
        self.bucket_name = bucket_name

        if credentials_path:
            self.client = storage.Client.from_service_account_json(
                credentials_path, project=project_id
            )
        else:
            self.client = storage.Client(project=project_id)
        self.bucket = self.client.bucket(bucket_name)

    def upload_file(
        self,
        object_key: str,
        stream: BinaryIO,
        content_type: str | None = None,
    ) -> int:
        """
        Upload a file object to GCS storage.

        Args:
            object_key: Destination object name in the bucket
            stream: Readable binary stream, consumed once
            content_type: Optional MIME type stored with the object

        Returns:
            Size of the stored object in bytes

        Raises:
            IOError: If upload fails (network error, permission denied, quota)
            ValueError: If object_key is empty
        """
        if not object_key:
            raise ValueError("Object key cannot be empty")

        try:
            blob = self.bucket.blob(object_key)
            # single attempt; the SDK retries by default
            blob.upload_from_file(stream, content_type=content_type, retry=None)
        except Exception as e:
            raise OSError(f"failed to upload file: {str(e)}") from e

        logger.debug("Wrote gs://%s/%s", self.bucket_name, object_key)
        return blob.size

    def close(self) -> None:
        self.client.close()
