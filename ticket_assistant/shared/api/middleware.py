"""
Shared API Middleware
======================

Common middleware and exception handlers for the FastAPI application.
"""

import time
import uuid
from datetime import datetime, timezone
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ticket_assistant.config import settings
from ticket_assistant.core import ApplicationException
from ticket_assistant.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Adds correlation ID to requests for tracing.

    An incoming X-Correlation-ID header is reused, otherwise a UUID is issued.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid.uuid4()))
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Tracks request count and response time, exposed as response headers."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.request_count = 0
        self.total_response_time = 0.0

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        self.request_count += 1

        response = await call_next(request)

        response_time = time.perf_counter() - start_time
        self.total_response_time += response_time

        response.headers["X-Response-Time"] = f"{response_time:.3f}s"
        response.headers["X-Request-Count"] = str(self.request_count)

        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request and its outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = getattr(request.state, "correlation_id", "unknown")
        start_time = time.perf_counter()

        logger.info(
            "Request started",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None
            }
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    "correlation_id": correlation_id,
                    "method": request.method,
                    "path": request.url.path,
                    "error": str(e),
                    "response_time_ms": int((time.perf_counter() - start_time) * 1000)
                }
            )
            raise

        logger.info(
            "Request completed",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "response_time_ms": int((time.perf_counter() - start_time) * 1000)
            }
        )
        return response


async def application_exception_handler(
    request: Request,
    exc: ApplicationException
) -> JSONResponse:
    """Render domain and application errors with their own status code."""
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "Application error",
        extra={
            "correlation_id": correlation_id,
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "error_message": exc.message,
            "status_code": exc.status_code
        }
    )

    message = exc.message
    if exc.status_code >= 500 and settings.environment != "development":
        message = "Internal server error"

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": type(exc).__name__,
            "message": message,
            "details": exc.details,
            "correlation_id": correlation_id,
        }
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled exceptions.

    Returns consistent error responses for all exceptions.
    """
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    logger.error(
        "Unhandled exception",
        extra={
            "correlation_id": correlation_id,
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_message": str(exc)
        }
    )

    # Don't expose internal details in production
    is_dev = settings.environment == "development"

    return JSONResponse(
        status_code=500,
        content={
            "error": "InternalServerError",
            "message": "Internal server error",
            "correlation_id": correlation_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "debug_info": str(exc) if is_dev else None
        }
    )
