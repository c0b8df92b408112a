# app/core/middleware.py
"""Request tracing and access logging middleware"""
import uuid
import time
import logging
from starlette.requests import Request

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
QUIET_PATHS = ("/health",)


async def correlation_id_middleware(request: Request, call_next):
    """Attach a correlation ID to every request and echo it on the response"""
    correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
    request.state.correlation_id = correlation_id

    response = await call_next(request)
    response.headers[CORRELATION_HEADER] = correlation_id
    return response


async def request_logging_middleware(request: Request, call_next):
    """Log method, path, status and latency of each request"""
    start_time = time.time()
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    log = logger.debug if request.url.path.startswith(QUIET_PATHS) else logger.info

    response = await call_next(request)

    duration_ms = round((time.time() - start_time) * 1000, 2)
    log(
        f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms} ms)",
        extra={
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
            "client": request.client.host if request.client else "unknown",
        }
    )

    return response
