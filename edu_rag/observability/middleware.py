"""
Request logging middleware.

Every request gets a request id, taken from the X-Request-ID header
when the client sends one. The id and the handling time are echoed in
the X-Request-ID and X-Process-Time-Ms response headers and attached to
the start and finish log records.

Dependencies: fastapi, starlette
System role: Request/response observability injection
"""

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
PROCESS_TIME_HEADER = "X-Process-Time-Ms"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request and tag the response with its id and timing."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        route = f"{request.method} {request.url.path}"
        started = time.perf_counter()

        logger.info(
            f"{__name__}:dispatch - {route}",
            extra={"request_id": request_id, "query_string": request.url.query or None},
        )

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{__name__}:dispatch - {route} raised",
                extra={
                    "request_id": request_id,
                    "process_time_ms": _elapsed_ms(started),
                    "error_type": type(e).__name__,
                },
            )
            raise

        elapsed = _elapsed_ms(started)
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[PROCESS_TIME_HEADER] = str(elapsed)
        logger.info(
            f"{__name__}:dispatch - {route} -> {response.status_code}",
            extra={"request_id": request_id, "status_code": response.status_code, "process_time_ms": elapsed},
        )
        return response
