"""Pydantic schema for the health check response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus a best-effort database probe."""

    status: Literal["ok"] = "ok"
    environment: str = Field(description="APP_ENV the process runs with")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of a SELECT 1 against the configured DATABASE_URL",
    )
