"""
Notes API: Request Logging Middleware
======================================

What:  One access-log line per HTTP request, carrying the envelope outcome.
How:   Measures wall time around the downstream call, then logs method,
       path, status, duration, request ID, client IP and, for notes
       endpoints, the envelope's success flag and message.

Notes endpoints answer 200 even on business failures, so the HTTP status
alone cannot tell a failed Add from a successful one. Route handlers (and
the envelope exception handlers in main.py) leave the outcome on
request.state; this middleware picks it up after the response is built.

Levels:
    5xx                  → ERROR
    4xx                  → WARNING
    2xx, success=false   → WARNING
    2xx/3xx otherwise    → INFO

Request bodies are never logged.
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notes_api.middleware.request_id import request_id_var

logger = logging.getLogger("notes_api.access")


def _log_level(status: int, envelope_success: Optional[bool]) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400 or envelope_success is False:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its HTTP status and envelope outcome."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path

        # Health checks hit this every few seconds
        if path == "/health":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = getattr(request.state, "request_id", None) or request_id_var.get("")
        envelope_success = getattr(request.state, "envelope_success", None)
        envelope_message = getattr(request.state, "envelope_message", None)

        outcome = ""
        if envelope_success is not None:
            outcome = f" success={str(envelope_success).lower()} ({envelope_message})"

        logger.log(
            _log_level(response.status_code, envelope_success),
            "%s %s %d%s %.1fms [%s] from %s",
            request.method,
            path,
            response.status_code,
            outcome,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": response.status_code,
                "envelope_success": envelope_success,
                "envelope_message": envelope_message,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
