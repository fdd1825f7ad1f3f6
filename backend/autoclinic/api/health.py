from fastapi import APIRouter

from autoclinic.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/api/health")
def health_check():
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }
