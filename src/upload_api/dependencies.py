"""FastAPI dependencies for settings and the shared storage client."""

from typing import Annotated

from fastapi import Depends, Request

from src.upload_api.config import Settings
from src.upload_api.services.storage_service import StorageClient


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


def get_storage_client(request: Request) -> StorageClient:
    """Storage client built once at startup."""
    return request.app.state.storage_client


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
StorageDep = Annotated[StorageClient, Depends(get_storage_client)]
