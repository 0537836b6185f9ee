"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sweetshop.api import api_router, health_router
from sweetshop.core.config import Settings, get_settings
from sweetshop.core.database import Database
from sweetshop.core.errors import AuthenticationError, SweetShopError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
VALUE_ERROR_PREFIX = "Value error, "


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )


def _error(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def validation_message(errors: list[dict]) -> str:
    """Short message for the first schema error, e.g. 'Price must be a non-negative number'."""
    if not errors:
        return "Invalid input"
    first = errors[0]
    msg = str(first.get("msg", "Invalid input"))
    if msg.startswith(VALUE_ERROR_PREFIX):
        return msg[len(VALUE_ERROR_PREFIX):]
    fields = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    return f"{fields[-1]}: {msg}" if fields else msg


def register_error_handlers(app: FastAPI) -> None:
    """Render every failure as {"error": message} with the matching status code."""

    @app.exception_handler(SweetShopError)
    async def sweetshop_error_handler(request: Request, exc: SweetShopError) -> JSONResponse:
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        return _error(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, validation_message(list(exc.errors())))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """
    Build the application. The Database (engine + session factory) is created
    here, or injected by the caller, and disposed when the app shuts down.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    database = database or Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting Sweet Shop API (env=%s)", settings.APP_ENV)
        yield
        database.dispose()

    app = FastAPI(
        title="Sweet Shop API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.include_router(health_router)
    return app


app = create_app()
