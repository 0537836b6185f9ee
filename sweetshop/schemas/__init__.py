"""Pydantic request/response schemas."""

from sweetshop.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserOut,
)
from sweetshop.schemas.health import HealthResponse
from sweetshop.schemas.sweets import (
    RestockRequest,
    SweetCreate,
    SweetOut,
    SweetSearch,
    SweetUpdate,
)

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "RestockRequest",
    "SweetCreate",
    "SweetOut",
    "SweetSearch",
    "SweetUpdate",
    "UserOut",
]
