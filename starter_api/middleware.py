"""
Global middleware and exception handlers.
"""

import logging
import time
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from starter_api.core.exceptions import AppError, UnauthorizedError

logger = logging.getLogger("starter.http")


def register_middleware(app: FastAPI) -> None:
    """Attach request logging / timing."""

    @app.middleware("http")
    async def request_logger(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.error(
                "%s %s - %.1fms - Error: %s",
                request.method, request.url.path, elapsed_ms, exc,
            )
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Process-Time"] = f"{elapsed_ms / 1000:.4f}"
        logger.info(
            "%s %s - %d - %.1fms - %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.headers.get("user-agent", "Unknown"),
        )
        return response


def _error_response(
    request: Request,
    status_code: int,
    message: Any,
    error: str,
    details: Any = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    body = {
        "statusCode": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
        "method": request.method,
        "message": message,
        "error": error,
    }
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error, expected or not, with the same JSON body."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s - %d: %s", request.method, request.url.path, exc.status_code, exc.message)
        else:
            logger.warning("%s %s - %d: %s", request.method, request.url.path, exc.status_code, exc.message)

        headers = None
        if isinstance(exc, UnauthorizedError):
            headers = {"WWW-Authenticate": "Bearer"}  # RFC 6750

        return _error_response(
            request, exc.status_code, exc.message, exc.error, exc.details, headers
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unknown routes, wrong methods and FastAPI's own HTTPException
        logger.warning("%s %s - %d: %s", request.method, request.url.path, exc.status_code, exc.detail)
        return _error_response(
            request,
            exc.status_code,
            exc.detail,
            HTTPStatus(exc.status_code).phrase,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("%s %s - unhandled error", request.method, request.url.path)
        return _error_response(request, 500, "Internal server error", "Internal Server Error")
