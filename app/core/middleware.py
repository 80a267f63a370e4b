"""HTTP middleware: correlation ids and request timing"""
import uuid
import time
import logging
from starlette.requests import Request

from app.utils.my_logging import correlation_id_var

logger = logging.getLogger(__name__)

# Polled by load balancers; only logged at DEBUG
QUIET_PATH_PREFIXES = ("/health",)


async def correlation_id_middleware(request: Request, call_next):
    """Tag the request (and every log record it produces) with a correlation id"""
    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
    request.state.correlation_id = correlation_id
    token = correlation_id_var.set(correlation_id)

    try:
        response = await call_next(request)
    finally:
        correlation_id_var.reset(token)

    response.headers["X-Correlation-ID"] = correlation_id
    return response


async def request_logging_middleware(request: Request, call_next):
    """Log method, path, status and duration of every request"""
    start_time = time.perf_counter()
    path = request.url.path
    level = logging.DEBUG if path.startswith(QUIET_PATH_PREFIXES) else logging.INFO

    response = await call_next(request)

    duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
    if response.status_code >= 500:
        level = logging.ERROR

    logger.log(
        level,
        f"{request.method} {path} -> {response.status_code} ({duration_ms} ms)",
        extra={
            "method": request.method,
            "url": str(request.url),
            "client": request.client.host if request.client else "unknown",
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }
    )
    response.headers["X-Process-Time-Ms"] = str(duration_ms)

    return response
