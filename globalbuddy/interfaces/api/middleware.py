"""
API Middleware - Request/response processing.

Provides:
- Request ID tracking
- Response latency measurement
- Error handling with taxonomy codes
- Overall request timeout
- Rate limiting
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from globalbuddy.config.errors import ErrorCode, GlobalBuddyError

logger = logging.getLogger(__name__)


def _error_response(
    status_code: int,
    code: ErrorCode,
    message: str,
    request_id: str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code.value,
                "message": message,
                "details": details or {},
            },
            "request_id": request_id,
        },
        headers=headers,
    )


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach request ID for tracing across logs and responses."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        # Store in request state for access in handlers
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response


class LatencyMiddleware(BaseHTTPMiddleware):
    """Track and log request latency."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"

        request_id = getattr(request.state, "request_id", "unknown")
        logger.info(
            "%s %s status=%d latency_ms=%.2f request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id,
        )

        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Convert GlobalBuddyError exceptions to structured JSON responses."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)
        except GlobalBuddyError as e:
            request_id = getattr(request.state, "request_id", "unknown")
            status_code = error_code_to_status(e.code)
            log = logger.error if status_code >= 500 else logger.warning
            log(
                "GlobalBuddyError: %s request_id=%s details=%s",
                e.message,
                request_id,
                e.details,
            )
            return _error_response(status_code, e.code, e.message, request_id, e.details)
        except Exception as e:
            request_id = getattr(request.state, "request_id", "unknown")
            logger.exception("Unhandled error: %s request_id=%s", str(e), request_id)
            return _error_response(
                500, ErrorCode.INTERNAL_ERROR, "Internal server error", request_id
            )


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Bound the whole request (storage fetch plus scoring)."""

    def __init__(self, app: ASGIApp, timeout_seconds: float = 10.0) -> None:
        super().__init__(app)
        self.timeout_seconds = timeout_seconds

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            request_id = getattr(request.state, "request_id", "unknown")
            logger.warning(
                "Request timed out after %.1fs: %s %s request_id=%s",
                self.timeout_seconds,
                request.method,
                request.url.path,
                request_id,
            )
            return _error_response(
                504,
                ErrorCode.REQUEST_TIMEOUT,
                "Request timed out",
                request_id,
                {"timeout_seconds": self.timeout_seconds},
            )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Simple in-memory rate limiting per client IP."""

    def __init__(self, app: ASGIApp, requests_per_minute: int = 60) -> None:
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.buckets: dict[str, dict[str, Any]] = defaultdict(
            lambda: {"window": 0, "tokens": 0}
        )
        self._current_window = 0

    def _prune(self, window: int) -> None:
        """Forget clients whose bucket belongs to an earlier window."""
        if window == self._current_window:
            return
        self._current_window = window
        for client_ip in [ip for ip, b in self.buckets.items() if b["window"] < window]:
            del self.buckets[client_ip]

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        # Skip rate limiting for health checks
        if request.url.path == "/health":
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()
        window = int(now // 60)  # 1-minute windows

        self._prune(window)
        bucket = self.buckets[client_ip]

        # Reset bucket if new window
        if bucket["window"] != window:
            bucket["window"] = window
            bucket["tokens"] = self.requests_per_minute

        if bucket["tokens"] <= 0:
            request_id = getattr(request.state, "request_id", "unknown")
            logger.warning(
                "Rate limit exceeded for %s request_id=%s",
                client_ip,
                request_id,
            )
            return _error_response(
                429,
                ErrorCode.SECURITY_RATE_LIMITED,
                "Too many requests. Please retry after 60 seconds.",
                request_id,
                {"retry_after": 60},
                headers={"Retry-After": "60"},
            )

        bucket["tokens"] -= 1

        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(bucket["tokens"])
        response.headers["X-RateLimit-Limit"] = str(self.requests_per_minute)

        return response


def error_code_to_status(code: ErrorCode) -> int:
    """Map error codes to HTTP status codes."""
    mapping = {
        # 400 Bad Request
        ErrorCode.SEARCH_INVALID_QUERY: 400,
        ErrorCode.QA_INVALID_QUESTION: 400,
        ErrorCode.VALIDATION_ERROR: 400,
        # 404 Not Found
        ErrorCode.NOT_FOUND: 404,
        # 429 Rate Limited
        ErrorCode.SECURITY_RATE_LIMITED: 429,
        # 503 Service Unavailable
        ErrorCode.STORAGE_CONNECTION_FAILED: 503,
        ErrorCode.STORAGE_READ_FAILED: 503,
        ErrorCode.STORAGE_WRITE_FAILED: 503,
        # 504 Gateway Timeout
        ErrorCode.REQUEST_TIMEOUT: 504,
    }
    return mapping.get(code, 500)
