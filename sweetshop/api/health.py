"""Health check endpoint with a database connectivity probe."""

from fastapi import APIRouter

from sweetshop.api.deps import AppSettings, DbSession
from sweetshop.core.database import check_db_connected
from sweetshop.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: DbSession, settings: AppSettings) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Always 200 while the process is up; "database" reports the probe result.
    """
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
    )
