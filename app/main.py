# app/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException as StarletteHTTPException
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.api.articles import router as articles_router
from app.core.config import settings
from app.core.logging import init_logging
from app.db.session import create_schema, engine
from app.utils.exceptions import ServiceUnavailableError


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": status_code, "message": message}},
    )


def add_global_exception_handlers(app: FastAPI):
    """
    Render every error as ``{"error": {"code", "message"}}``.
    """
    logger = logging.getLogger("app.errors")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "%s %s -> %s (%s)", request.method, request.url, exc.status_code, exc.detail
        )
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(SQLAlchemyError)
    async def db_error_handler(request: Request, exc: SQLAlchemyError):
        # Store errors that escaped the service layer
        logger.error(
            "Database error on %s %s: %s",
            request.method,
            request.url,
            exc,
            exc_info=True,
        )
        return _error_response(503, "Database temporarily unavailable")

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s", request.method, request.url, exc_info=True
        )
        return _error_response(500, "Internal Server Error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    On startup: init logging, check the database, optionally create tables.
    """
    init_logging(settings.ENVIRONMENT)
    logger = logging.getLogger("app.main")
    logger.info("Starting slug history service")

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Successfully connected to database.")
    except SQLAlchemyError as exc:
        logger.critical("Failed to connect to DB: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")

    if settings.CREATE_SCHEMA_ON_STARTUP:
        await create_schema()
        logger.info("Database schema ensured.")

    yield

    await engine.dispose()
    logger.info("Shutting down slug history service.")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Slug History Service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    add_global_exception_handlers(app)

    limiter = Limiter(
        key_func=get_remote_address, default_limits=[settings.RATE_LIMIT_DEFAULT]
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    @app.get("/health", tags=["Health"])
    async def health_check() -> JSONResponse:
        logger = logging.getLogger("app.main")
        db_status = "ok"
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error("Health check failed: DB unavailable (%s)", exc)
            db_status = "unavailable"
        status_code = 200 if db_status == "ok" else 503
        return JSONResponse(
            status_code=status_code,
            content={
                "status": "ok" if status_code == 200 else "degraded",
                "db": db_status,
            },
        )

    app.include_router(articles_router)

    return app


app = create_app()
