from fastapi import APIRouter

from app.core.config import get_settings

router = APIRouter()

@router.get("/ready")
def readiness_probe():
    settings = get_settings()
    return {
        "status": "ready",
        "model": settings.OPENAI_MODEL,
        "api_key_configured": bool(settings.OPENAI_API_KEY),
    }

@router.get("/live")
def liveness_probe():
    return {"status": "alive"}
