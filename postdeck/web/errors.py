"""Exception handlers turning AppError into the JSON error body.

Every error body has the shape ``{"err_msg": str, "status_code": int}``.
"""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from postdeck.errors import AppError, StatusMap

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI, status_map: StatusMap) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        body = exc.to_response(status_map)
        if body["status_code"] >= 500:
            logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
        else:
            logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
        return JSONResponse(status_code=body["status_code"], content=body)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
        message = "; ".join(
            f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}" for e in exc.errors()
        )
        return JSONResponse(
            status_code=HTTPStatus.BAD_REQUEST,
            content={"err_msg": message, "status_code": int(HTTPStatus.BAD_REQUEST)},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all; never leaks internal details."""
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            content={
                "err_msg": "An unexpected error occurred",
                "status_code": int(HTTPStatus.INTERNAL_SERVER_ERROR),
            },
        )
