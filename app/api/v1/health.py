from fastapi import APIRouter

from app.ai.feedback_client import ai_enabled

router = APIRouter()


@router.get("/health", summary="Health Check", description="Liveness check; reports whether AI feedback is configured.")
async def health_check():
    return {"status": "healthy", "ai_enabled": ai_enabled()}
