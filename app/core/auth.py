"""Authentication gate: resolves the bearer token to the requesting user."""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from loguru import logger
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import decode_token
from app.models.user import User


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(None)
) -> User:
    # Check token
    if not authorization or not authorization.startswith("Bearer "):
        raise _unauthorized("No token, authorization denied")

    token = authorization[len("Bearer "):].strip()
    user_id = decode_token(token)
    if not user_id:
        raise _unauthorized("Token is not valid")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning(f"Token for unknown user {user_id}")
        raise _unauthorized("Token is not valid")

    if not user.is_active:
        raise _unauthorized("Account is deactivated")

    return user
