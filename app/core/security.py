from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from loguru import logger

from app.core.config import settings

ALGORITHM = "HS256"


def _create_token(user_id: int, email: str, token_type: str, expire_minutes: int) -> str:
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=expire_minutes),
        "type": token_type,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def create_access_token(user_id: int, email: str) -> str:
    # token d'accès, durée JWT_EXPIRE_MIN
    return _create_token(user_id, email, "access", settings.JWT_EXPIRE_MIN)


def create_refresh_token(user_id: int, email: str) -> str:
    # token de rafraîchissement, durée JWT_REFRESH_EXPIRE_MIN (30 jours)
    return _create_token(user_id, email, "refresh", settings.JWT_REFRESH_EXPIRE_MIN)


def verify_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except JWTError as exc:
        logger.warning(f"Rejected token: {exc}")
        return None


def decode_token(token: str, expected_type: str = "access") -> Optional[int]:
    """Return the user id carried by a valid token of the expected type."""
    payload = verify_token(token)
    if payload is None or payload.get("type") != expected_type:
        return None
    return payload.get("user_id")
