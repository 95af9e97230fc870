from datetime import datetime
from typing import Optional

from pydantic import AnyHttpUrl, ConfigDict, EmailStr, StringConstraints, TypeAdapter, ValidationError, field_validator
from typing_extensions import Annotated

from app.schemas.common import CamelModel

Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=30, pattern=r"^[a-zA-Z0-9_]+$")]
Password = Annotated[str, StringConstraints(min_length=6, max_length=128)]
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]

_http_url = TypeAdapter(AnyHttpUrl)


class RegisterRequest(CamelModel):
    username: Username
    email: EmailStr
    password: Password
    first_name: Name
    last_name: Name


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class RefreshRequest(CamelModel):
    refresh_token: str


class ProfileUpdate(CamelModel):
    first_name: Optional[Name] = None
    last_name: Optional[Name] = None
    username: Optional[Username] = None
    avatar: Optional[str] = None

    @field_validator("avatar")
    @classmethod
    def avatar_must_be_url(cls, value):
        # "" efface l'avatar
        if not value:
            return None
        try:
            _http_url.validate_python(value)
        except ValidationError:
            raise ValueError("Avatar must be a valid http(s) URL")
        return value


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: Password


class DeactivateRequest(CamelModel):
    password: str


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    avatar: Optional[str]
    is_active: bool
    last_login: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserEnvelope(CamelModel):
    user: UserResponse


class UserMessageResponse(CamelModel):
    message: str
    user: UserResponse


class AuthResponse(CamelModel):
    message: str
    token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse
