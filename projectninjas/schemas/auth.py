"""
Authentication schemas.
"""

import uuid
from datetime import datetime

from email_validator import EmailNotValidError, validate_email
from pydantic import Field, field_validator

from projectninjas.kernel.models.user import User
from projectninjas.schemas.common import CamelModel

MIN_PASSWORD_LENGTH = 6


class RegisterRequest(CamelModel):
    """User registration request."""

    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        # Checked for shape only; the address is stored exactly as sent
        v = v.strip()
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(str(e))
        return v


class LoginRequest(CamelModel):
    """User login request."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    """User profile response."""

    user_id: uuid.UUID
    email: str
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(user_id=user.id, email=user.email, created_at=user.created_at)


class TokenResponse(CamelModel):
    """Authentication token response."""

    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
