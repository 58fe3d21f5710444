# fanbase/main.py

import logging
from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from fanbase.api.auth import router as auth_router
from fanbase.api.favorites import router as favorites_router
from fanbase.api.profile import router as profile_router
from fanbase.api.searches import router as searches_router
from fanbase.api.teams import router as teams_router
from fanbase.core.config import settings
from fanbase.core.logging import init_logging
from fanbase.db.redis import redis_client
from fanbase.db.session import engine
from fanbase.utils.exceptions import ServiceUnavailableError
from fanbase.utils.response import MessagePackMiddleware

logger = logging.getLogger("fanbase.main")
error_logger = logging.getLogger("fanbase.errors")


def _error_response(status_code: int, message) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": status_code, "message": message}},
    )


def add_global_exception_handlers(app: FastAPI):
    """
    Render every error as ``{"error": {"code": ..., "message": ...}}``.
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        error_logger.log(
            level,
            "%s %s -> %s %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.detail,
        )
        response = _error_response(exc.status_code, exc.detail)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        error_logger.error(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return _error_response(500, "Internal Server Error")


async def check_backends() -> Dict[str, str]:
    """Ping Redis and the database; returns ``"ok"`` or ``"unavailable"`` per backend."""
    status = {"redis": "ok", "db": "ok"}
    try:
        await redis_client.ping()
    except (RedisError, OSError) as exc:
        logger.error("Redis unavailable: %s", exc)
        status["redis"] = "unavailable"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Database unavailable: %s", exc)
        status["db"] = "unavailable"
    return status


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Configure logging and refuse to start while a backend is down.
    """
    init_logging(settings.LOG_DIR)
    logger.info("Starting Fanbase API (%s)", settings.ENVIRONMENT)

    status = await check_backends()
    if status["redis"] != "ok":
        raise ServiceUnavailableError("Redis temporarily unavailable")
    if status["db"] != "ok":
        raise ServiceUnavailableError("Database temporarily unavailable")

    yield

    await redis_client.aclose()
    await engine.dispose()
    logger.info("Fanbase API stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Fanbase API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    add_global_exception_handlers(app)

    if settings.ENABLE_MSGPACK:
        app.add_middleware(MessagePackMiddleware)

    app.state.limiter = Limiter(
        key_func=get_remote_address, default_limits=[settings.RATE_LIMIT_DEFAULT]
    )
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    @app.get("/health", tags=["Health"])
    async def health_check() -> JSONResponse:
        status = await check_backends()
        healthy = all(value == "ok" for value in status.values())
        return JSONResponse(
            status_code=200 if healthy else 503,
            content={"status": "ok" if healthy else "degraded", **status},
        )

    for router in (
        auth_router,
        profile_router,
        teams_router,
        favorites_router,
        searches_router,
    ):
        app.include_router(router)

    return app


app = create_app()
