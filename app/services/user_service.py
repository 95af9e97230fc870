"""User service: registration, login, profile, password and deactivation."""

from typing import Optional

from fastapi import HTTPException, status
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import store_operation
from app.core.errors import ValidationError
from app.models.task import utcnow
from app.models.user import User
from app.schemas.user import ChangePasswordRequest, ProfileUpdate, RegisterRequest


def _email_taken(db: Session, email: str) -> bool:
    return db.query(User).filter(User.email == email.lower()).first() is not None


def _username_taken(db: Session, username: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(User).filter(User.username == username)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def _duplicate_errors(db: Session, email: str, username: str) -> list:
    errors = []
    if _email_taken(db, email):
        errors.append({"field": "email", "message": "User with this email already exists"})
    if _username_taken(db, username):
        errors.append({"field": "username", "message": "Username is already taken"})
    return errors


def register_user(db: Session, data: RegisterRequest) -> User:
    # Vérifie email et username avant de créer
    errors = _duplicate_errors(db, data.email, data.username)
    if errors:
        raise ValidationError(errors, message="User already exists")

    user = User(
        email=data.email.lower(),
        username=data.username,
        first_name=data.first_name,
        last_name=data.last_name,
        last_login=utcnow(),
    )
    user.set_password(data.password)

    with store_operation(db, "register user"):
        db.add(user)
        try:
            db.commit()
        except IntegrityError as exc:
            # inscription concurrente : la contrainte unique a tranché
            db.rollback()
            errors = _duplicate_errors(db, data.email, data.username) or [
                {"field": "email", "message": "User with this email or username already exists"}
            ]
            raise ValidationError(errors, message="User already exists") from exc
        db.refresh(user)

    logger.info(f"User registered: {user.id} ({user.username})")
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user or not user.verify_password(password):
        logger.warning(f"Failed login for {email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is deactivated")

    user.last_login = utcnow()
    with store_operation(db, "log in"):
        db.commit()
        db.refresh(user)
    return user


def update_profile(db: Session, user: User, data: ProfileUpdate) -> User:
    changes = data.model_dump(exclude_unset=True)

    for field in ("first_name", "last_name", "username"):
        if field in changes and changes[field] is None:
            raise ValidationError.for_field(field, f"{field} cannot be empty")

    if "username" in changes and _username_taken(db, changes["username"], exclude_id=user.id):
        raise ValidationError.for_field("username", "Username is already taken")

    for field, value in changes.items():
        setattr(user, field, value)

    with store_operation(db, "update profile"):
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise ValidationError.for_field("username", "Username is already taken") from exc
        db.refresh(user)

    logger.info(f"Profile updated: {user.id} fields={sorted(changes)}")
    return user


def change_password(db: Session, user: User, data: ChangePasswordRequest) -> None:
    if not user.verify_password(data.current_password):
        raise ValidationError.for_field("currentPassword", "Current password is incorrect")

    user.set_password(data.new_password)
    with store_operation(db, "change password"):
        db.commit()
    logger.info(f"Password changed: {user.id}")


def deactivate(db: Session, user: User, password: str) -> None:
    """Compte désactivé, jamais supprimé."""
    if not user.verify_password(password):
        raise ValidationError.for_field("password", "Password is incorrect")

    user.is_active = False
    with store_operation(db, "deactivate account"):
        db.commit()
    logger.info(f"Account deactivated: {user.id}")
