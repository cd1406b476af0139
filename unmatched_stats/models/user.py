from pydantic import Field, field_validator
from datetime import datetime, timezone
import uuid

from unmatched_stats.models.base import CamelModel


USERNAME_CHARS = set('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-.')

# bcrypt input limit
MAX_PASSWORD_BYTES = 72


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def check_password_length(v: str) -> str:
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    return v


class User(CamelModel):
    """Stored user record, including the password hash"""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique user identifier")
    username: str = Field(..., min_length=3, max_length=50)
    email: str
    password_hash: str
    created_at: datetime = Field(default_factory=_utcnow, description="Account creation timestamp")

    def public_view(self) -> "UserPublic":
        return UserPublic(
            id=self.id,
            username=self.username,
            email=self.email,
            created_at=self.created_at,
        )


class UserPublic(CamelModel):
    """User data that is safe to return to clients"""

    id: str
    username: str
    email: str
    created_at: datetime


class UserCreate(CamelModel):
    """Registration payload"""

    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(...)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if '@' not in v or '.' not in v.split('@')[-1]:
            raise ValueError('Invalid email format')
        return v.lower().strip()

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        if not v.strip():
            raise ValueError('Username cannot be empty')

        # Allow letters, numbers, hyphens, underscores, and periods
        if not all(c in USERNAME_CHARS for c in v):
            raise ValueError('Username can only contain letters, numbers, hyphens, underscores, and periods')

        return v.strip()

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return check_password_length(v)


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return check_password_length(v)


class AuthResponse(CamelModel):
    token: str
    user: UserPublic
