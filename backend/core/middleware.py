"""Request logging middleware

Binds a correlation ID to the structlog context for each request, logs
request start and completion with timing, and flags slow requests.
"""
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from core.logging import api_logger, bind_context, clear_context, generate_correlation_id

log = api_logger()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Correlation context plus request/response logging."""

    def __init__(self, app, slow_threshold_ms: float = 1000):
        super().__init__(app)
        self.slow_threshold_ms = slow_threshold_ms

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or generate_correlation_id()

        clear_context()
        bind_context(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else "unknown",
        )

        start = time.perf_counter()
        log.info(
            "request_started",
            content_type=request.headers.get("Content-Type"),
            content_length=request.headers.get("Content-Length"),
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            log.exception(
                "request_failed",
                error_type=type(exc).__name__,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise
        finally:
            duration_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Correlation-ID"] = correlation_id

        status = response.status_code
        log_method = log.info if status < 400 else (log.warning if status < 500 else log.error)
        log_method("request_completed", status=status, duration_ms=round(duration_ms, 2))

        if duration_ms > self.slow_threshold_ms:
            log.warning(
                "slow_request",
                duration_ms=round(duration_ms, 2),
                threshold_ms=self.slow_threshold_ms,
            )

        clear_context()
        return response
