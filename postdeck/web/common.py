import logging
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.requests import Request

from postdeck.config import CmsConfig
from postdeck.db_context import DatabaseManager

logger = logging.getLogger(__name__)


def database_lifespan(
    config: CmsConfig, db_name: str = "default"
) -> Callable[[FastAPI], AsyncIterator[None]]:
    """Open the pool on startup and close it on shutdown."""

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        await DatabaseManager.create_pool(config.dsn, config.pool, name=db_name)
        try:
            yield
        finally:
            await DatabaseManager.close_pool(db_name)

    return lifespan


def add_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        started_at = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started_at) * 1000.0
        logger.info(
            "http request method=%s path=%s status=%s duration_ms=%.2f",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response
