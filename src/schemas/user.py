"""Pydantic schemas for user and auth endpoints."""
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from models.user import UserRole
from schemas.common import strip_required_name

MIN_PASSWORD_LENGTH = 6
# bcrypt ignores input beyond 72 bytes
MAX_PASSWORD_LENGTH = 72


class RegisterRequest(BaseModel):
    """Schema for self-registration."""

    username: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        """Reject blank usernames."""
        return strip_required_name(v)


class LoginRequest(BaseModel):
    """Schema for login."""

    email: EmailStr
    password: str = Field(min_length=1)


class RefreshRequest(BaseModel):
    """Schema for exchanging a refresh token."""

    refresh_token: str = Field(min_length=1)


class UserCreate(RegisterRequest):
    """Schema for creating a user through POST /user."""

    role: UserRole = UserRole.USER


class UserUpdate(BaseModel):
    """Schema for a partial user update; omitted fields are left unchanged."""

    username: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    password: str | None = Field(
        default=None, min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH,
    )

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str | None) -> str | None:
        """Reject blank usernames when one is given."""
        if v is None:
            return None
        return strip_required_name(v)


class UserResponse(BaseModel):
    """User as returned by the API (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: UserRole
    image_id: int | None
    image_url: str | None


class TokenPair(BaseModel):
    """Access and refresh tokens."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthResponse(TokenPair):
    """Tokens plus the authenticated user."""

    user: UserResponse
