"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import router
from app.core.config import Settings, get_settings
from app.core.database import Database
from app.core.errors import InternalError, ServiceError
from app.core.logging import configure_logging

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _validation_message(exc: RequestValidationError) -> str:
    """First validation problem as 'field: reason'; request details stay out of the message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    msg = first.get("msg", "Invalid value")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


def register_error_handlers(app: FastAPI) -> None:
    """Map every failure to {"error": message}; 500s carry a generic message only."""

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Service error on %s %s: %s", request.method, request.url.path, exc.message)
            return _error(exc.status_code, InternalError.default_message)
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return _error(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, _validation_message(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(SQLAlchemyError)
    async def handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Store failure on %s %s", request.method, request.url.path)
        return _error(500, InternalError.default_message)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, InternalError.default_message)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the application with an explicitly constructed database handle."""
    settings = settings or get_settings()
    configure_logging(settings)
    database = database or Database(settings.DATABASE_URL, echo=settings.DEBUG)
    if settings.AUTO_CREATE_TABLES:
        database.create_all()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Turnstile API starting (env=%s)", settings.APP_ENV)
        yield
        database.dispose()
        logger.info("Turnstile API stopped")

    app = FastAPI(
        title="Turnstile API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = database

    if settings.FRONTEND_URL:
        origins = [settings.FRONTEND_URL]
    else:
        origins = ["*"] if settings.APP_ENV == "dev" else []
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(router)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Turnstile API"}

    return app


app = create_app()
