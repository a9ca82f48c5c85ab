"""
Auth feature: Pydantic schemas for request/response models.
"""

from pydantic import BaseModel, field_validator
from datetime import datetime

from notes_app.config import get_settings


# ── Requests ─────────────────────────────────────────────
class Credentials(BaseModel):
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def _check_username(cls, value: str) -> str:
        value = value.strip()
        minimum = get_settings().USERNAME_MIN_LENGTH
        if len(value) < minimum:
            raise ValueError(f"Username must be at least {minimum} characters")
        return value

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        minimum = get_settings().PASSWORD_MIN_LENGTH
        if len(value) < minimum:
            raise ValueError(f"Password must be at least {minimum} characters")
        return value


class RegisterRequest(Credentials):
    pass


class LoginRequest(Credentials):
    pass


# ── Responses ────────────────────────────────────────────
class UserResponse(BaseModel):
    id: int
    username: str
    created_at: datetime | None = None


class RegisterResponse(BaseModel):
    id: int
    message: str = "User registered successfully"


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
