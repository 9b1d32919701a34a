"""API middleware: CORS, per-request log context, and error mapping.

Starlette runs middleware as a stack (last added, first executed).
``main.py`` adds ErrorHandlingMiddleware first and RequestLoggingMiddleware
second, so the request log line carries the status code the error mapper
produced.
"""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from listengraph.api.schemas import ErrorResponse
from listengraph.utils.errors import (
    ConfigurationError,
    GenreResolutionError,
    ListenGraphError,
    ListenSourceError,
)
from listengraph.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

# Collaborator outages are reported as 503 so clients can retry the whole
# build; anything else from the core is a 500.
_STATUS_BY_ERROR: tuple[tuple[type[ListenGraphError], int], ...] = (
    (ConfigurationError, 400),
    (ListenSourceError, 503),
    (GenreResolutionError, 503),
)


def status_for(exc: ListenGraphError) -> int:
    """HTTP status code for an application error."""
    for error_cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return status
    return 500


def configure_cors(app: FastAPI, origins: list[str] | None = None) -> None:
    """Allow the graph endpoint to be fetched from browser front-ends."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind a request id into the log context and log one line per request."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        structlog.contextvars.bind_contextvars(request_id=request_id)
        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers["x-request-id"] = request_id
            return response
        finally:
            _logger.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                user_id=request.query_params.get("userId"),
                status=status,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Map uncaught ``ListenGraphError`` subclasses to JSON error bodies.

    The body is an :class:`ErrorResponse` naming the error class; the
    provider that failed is logged but not returned.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except ListenGraphError as exc:
            status = status_for(exc)
            log = _logger.warning if status < 500 else _logger.error
            log(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                status=status,
                path=request.url.path,
            )
            body = ErrorResponse(error=type(exc).__name__, detail=exc.message)
            return JSONResponse(status_code=status, content=body.model_dump())
