"""Core app configuration, database and errors."""

from sweetshop.core.config import Settings, get_settings
from sweetshop.core.database import Database, get_db

__all__ = ["Database", "Settings", "get_db", "get_settings"]
