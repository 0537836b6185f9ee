"""Shared FastAPI dependencies for the request-scoped session and settings."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from sweetshop.core.config import Settings
from sweetshop.core.database import get_db


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


DbSession = Annotated[Session, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
