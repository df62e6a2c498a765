from fastapi import APIRouter

from resume_insight.core.config import settings

router = APIRouter()


@router.get("/health", summary="Gateway status", description="Report liveness and the analysis service this gateway forwards to.")
async def gateway_status():
    return {
        "status": "healthy",
        "analysis_api": settings.api_base_url,
        "max_upload_bytes": settings.max_upload_bytes,
    }
