"""Register/login routes and auth dependencies (get_current_user, require_admin)."""

from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError

from sweetshop.api.deps import AppSettings, DbSession
from sweetshop.core.errors import AuthenticationError, AuthorizationError
from sweetshop.core.security import decode_access_token
from sweetshop.models.user import ROLE_ADMIN
from sweetshop.schemas.auth import AuthResponse, CurrentUser, LoginRequest, RegisterRequest
from sweetshop.services import auth as auth_service

router = APIRouter()
security = HTTPBearer(auto_error=False)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, db: DbSession, settings: AppSettings) -> AuthResponse:
    """Create a regular user account and return a session token for it."""
    return auth_service.register(db, settings, body)


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, db: DbSession, settings: AppSettings) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT plus the user.
    Include the token in the Authorization header as: Bearer <token>
    """
    return auth_service.login(db, settings, body)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: AppSettings,
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT and return its identity. Raises 401 if missing or invalid."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials, settings)
    except jwt.PyJWTError:
        raise AuthenticationError("Invalid or expired token")
    try:
        return CurrentUser(
            id=payload.get("id", payload["sub"]),
            username=payload["username"],
            email=payload["email"],
            role=payload["role"],
        )
    except (KeyError, PydanticValidationError):
        raise AuthenticationError("Invalid token payload")


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if current_user.role != ROLE_ADMIN:
        raise AuthorizationError("Admin access required")
    return current_user


@router.get("/me", response_model=CurrentUser)
def me(current_user: Annotated[CurrentUser, Depends(get_current_user)]) -> CurrentUser:
    """Return the identity carried by the caller's token."""
    return current_user
