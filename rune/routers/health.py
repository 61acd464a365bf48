from fastapi import APIRouter

from rune import settings
from rune.dependencies import get_session_store

router = APIRouter()


@router.get("/")
async def root():
    return {
        "status": f"{settings.ASSISTANT_NAME} Intake Assistant is Running",
        "features": ["intake_extraction", "chat_log", "direct_edit"],
        "endpoints": {
            "create_session": "/api/intake/sessions",
            "session": "/api/intake/sessions/{session_id}",
            "message": "/api/intake/sessions/{session_id}/messages",
            "edit_field": "/api/intake/sessions/{session_id}/fields/{field}",
            "health": "/health",
        }
    }


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "rune-intake",
        "active_sessions": get_session_store().active_count,
        "port": settings.PORT,
    }
