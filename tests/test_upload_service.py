import io
from datetime import datetime

import pytest

from src.upload_api.exceptions import UploadFailedError
from src.upload_api.schemas.upload import UploadResponse, UploadResult
from src.upload_api.services.upload_service import build_object_key, public_url, upload_file
from tests.conftest import FakeStorageClient

NOW = datetime(2024, 3, 9, 14, 5, 7)


# ──────────────────────────────────────────────
# Object keys and URLs
# ──────────────────────────────────────────────
def test_build_object_key_prefixes_timestamp() -> None:
    assert build_object_key("document.pdf", NOW) == "20240309-140507-document.pdf"


def test_build_object_key_differs_across_seconds() -> None:
    later = datetime(2024, 3, 9, 14, 5, 8)
    assert build_object_key("a.txt", NOW) != build_object_key("a.txt", later)


def test_build_object_key_keeps_filename_verbatim() -> None:
    assert build_object_key("../odd name?#.txt", NOW) == "20240309-140507-../odd name?#.txt"


def test_build_object_key_defaults_to_wall_clock() -> None:
    key = build_object_key("a.txt")
    timestamp = key[: len("YYYYMMDD-HHMMSS")]
    parsed = datetime.strptime(timestamp, "%Y%m%d-%H%M%S")
    assert abs((datetime.now() - parsed).total_seconds()) < 60
    assert key.endswith("-a.txt")


def test_public_url_is_not_encoded() -> None:
    assert (
        public_url("my-bucket", "20240309-140507-a b.txt")
        == "https://storage.googleapis.com/my-bucket/20240309-140507-a b.txt"
    )


# ──────────────────────────────────────────────
# Delegated write
# ──────────────────────────────────────────────
def test_upload_file_writes_once_and_reports_size() -> None:
    storage = FakeStorageClient(bucket_name="uploads")

    result = upload_file(storage, "document.pdf", io.BytesIO(b"Hello, World!"), "application/pdf", NOW)

    assert result == UploadResult(
        file_name="20240309-140507-document.pdf",
        url="https://storage.googleapis.com/uploads/20240309-140507-document.pdf",
        size=13,
    )
    assert len(storage.uploads) == 1
    assert storage.uploads[0]["object_key"] == "20240309-140507-document.pdf"


def test_upload_file_wraps_backend_error() -> None:
    cause = OSError("permission denied")
    storage = FakeStorageClient(error=cause)

    with pytest.raises(UploadFailedError) as exc_info:
        upload_file(storage, "document.pdf", io.BytesIO(b"data"), now=NOW)

    assert exc_info.value.message == "Upload failed: permission denied"
    assert exc_info.value.status_code == 500
    assert exc_info.value.__cause__ is cause
    assert storage.uploads == []


# ──────────────────────────────────────────────
# Envelope
# ──────────────────────────────────────────────
def test_success_envelope_serialises_with_aliases() -> None:
    result = UploadResult(file_name="k", url="u", size=1)
    assert UploadResponse.ok(result).to_json() == {
        "success": True,
        "data": {"fileName": "k", "url": "u", "size": 1},
    }


def test_error_envelope_omits_data() -> None:
    assert UploadResponse.fail("boom").to_json() == {"success": False, "error": "boom"}


@pytest.mark.parametrize(
    "kwargs",
    [
        {"success": True},
        {"success": False},
        {"success": True, "error": "boom", "data": UploadResult(file_name="k", url="u", size=1)},
        {"success": False, "error": "boom", "data": UploadResult(file_name="k", url="u", size=1)},
    ],
)
def test_envelope_requires_exactly_one_payload(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        UploadResponse(**kwargs)


def test_upload_file_only_maps_os_errors() -> None:
    """Non-OSError failures violate the StorageClient contract and propagate."""
    storage = FakeStorageClient(error=RuntimeError("bug in client"))

    with pytest.raises(RuntimeError, match="bug in client"):
        upload_file(storage, "document.pdf", io.BytesIO(b"data"), now=NOW)
