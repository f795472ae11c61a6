from typing import BinaryIO

import pytest
from fastapi.testclient import TestClient

from src.upload_api.config import Settings
from src.upload_api.main import create_app


class FakeStorageClient:
    """In-memory stand-in for GCSStorageClient."""

    def __init__(self, bucket_name: str = "test-bucket", error: Exception | None = None) -> None:
        self.bucket_name = bucket_name
        self.error = error
        self.uploads: list[dict] = []
        self.closed = False

    def upload_file(
        self,
        object_key: str,
        stream: BinaryIO,
        content_type: str | None = None,
    ) -> int:
        if self.error is not None:
            raise self.error
        content = stream.read()
        self.uploads.append({
            "object_key": object_key,
            "content": content,
            "content_type": content_type,
        })
        return len(content)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        gcs_bucket_name="test-bucket",
        google_cloud_project="test-project",
    )


@pytest.fixture
def fake_storage() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
def client(settings: Settings, fake_storage: FakeStorageClient) -> TestClient:
    """Test client wired to the fake storage backend."""
    app = create_app(settings, fake_storage)
    return TestClient(app)
