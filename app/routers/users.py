from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.user import (
    ChangePasswordRequest,
    DeactivateRequest,
    ProfileUpdate,
    UserEnvelope,
    UserMessageResponse,
)
from app.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=UserEnvelope)
def get_profile(current_user: User = Depends(get_current_user)):
    return {"user": current_user}


@router.put("/profile", response_model=UserMessageResponse)
def update_profile(
    profile: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    user = user_service.update_profile(db, current_user, profile)
    return {"message": "Profile updated successfully", "user": user}


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    user_service.change_password(db, current_user, body)
    return {"message": "Password changed successfully"}


@router.delete("/account", response_model=MessageResponse)
def deactivate_account(
    body: DeactivateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    user_service.deactivate(db, current_user, body.password)
    return {"message": "Account deactivated successfully"}
