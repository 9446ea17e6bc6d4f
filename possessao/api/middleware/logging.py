"""
Request/response logging middleware
"""
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from possessao.utils.logger import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with its status and duration

    A request id is taken from X-Request-ID (or generated) and echoed
    back so a composition can be traced through the logs.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        start_time = time.perf_counter()
        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }

        logger.info(f"Request: {request.method} {request.url.path}", extra={
            **context,
            "client_host": request.client.host if request.client else None
        })

        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"Request failed after {time.perf_counter() - start_time:.3f}s",
                extra=context
            )
            raise

        duration = time.perf_counter() - start_time
        logger.info(f"Response: {response.status_code} in {duration:.3f}s", extra={
            **context,
            "status_code": response.status_code,
            "duration_seconds": round(duration, 4)
        })

        response.headers["X-Process-Time"] = f"{duration:.4f}"
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
