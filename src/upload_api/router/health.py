"""Router – health check."""

from fastapi import APIRouter

from src.upload_api.config import SERVICE_NAME

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness / readiness probe."""
    return {"status": "healthy", "service": SERVICE_NAME}
