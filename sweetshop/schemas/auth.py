"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from sweetshop.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


class RegisterRequest(BaseModel):
    """New account details."""

    username: str = Field(..., description="Username (at least 3 characters)")
    email: EmailStr = Field(..., description="Email address, used to log in")
    password: str = Field(..., description="Password (at least 6 characters)")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < USERNAME_MIN_LEN:
            raise ValueError(f"Username must be at least {USERNAME_MIN_LEN} characters")
        if len(v) > USERNAME_MAX_LEN:
            raise ValueError(f"Username must be at most {USERNAME_MAX_LEN} characters")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < PASSWORD_MIN_LEN:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LEN} characters")
        if len(v) > PASSWORD_MAX_LEN:
            raise ValueError(f"Password must be at most {PASSWORD_MAX_LEN} characters")
        return v


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., description="Password")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class UserOut(BaseModel):
    """Public view of a user (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: str


class AuthResponse(BaseModel):
    """Session token plus the user it was issued for."""

    token: str = Field(..., description="JWT access token; send as Authorization: Bearer <token>")
    user: UserOut


class CurrentUser(BaseModel):
    """Identity decoded from a verified session token."""

    id: int
    username: str
    email: str
    role: str
