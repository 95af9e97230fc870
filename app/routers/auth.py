from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.database import get_db
from app.core.security import create_access_token, create_refresh_token, verify_token
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.user import AuthResponse, LoginRequest, RefreshRequest, RegisterRequest, UserEnvelope
from app.services import user_service

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_payload(message: str, user: User, refresh_token: Optional[str] = None) -> dict:
    return {
        "message": message,
        "token": create_access_token(user.id, user.email),
        "refresh_token": refresh_token or create_refresh_token(user.id, user.email),
        "user": user,
    }


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: RegisterRequest, db: Session = Depends(get_db)):
    """Créer un nouvel utilisateur"""
    user = user_service.register_user(db, user_data)
    return _auth_payload("User registered successfully", user)


@router.post("/login", response_model=AuthResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Se connecter et recevoir les tokens"""
    user = user_service.authenticate(db, credentials.email, credentials.password)
    return _auth_payload("Login successful", user)


@router.post("/refresh", response_model=AuthResponse)
def refresh(body: RefreshRequest, db: Session = Depends(get_db)):
    """Utiliser un refresh_token pour obtenir un nouvel access_token"""
    payload = verify_token(body.refresh_token)
    if not payload or payload.get("type") != "refresh":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user = db.query(User).filter(User.id == payload.get("user_id")).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    return _auth_payload("Token refreshed", user, refresh_token=body.refresh_token)


@router.get("/me", response_model=UserEnvelope)
def me(current_user: User = Depends(get_current_user)):
    return {"user": current_user}


@router.post("/logout", response_model=MessageResponse)
def logout(current_user: User = Depends(get_current_user)):
    # JWT sans état : le client oublie son token
    return {"message": "Logout successful"}
