from datetime import datetime, timezone

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter()

@router.get("")
def health():
    # Check si l'API est up
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT,
    }
