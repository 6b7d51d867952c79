"""
Request/response logging middleware.
"""
import logging
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from typing import Callable

from placement_service.core.logging_config import request_id_context

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one line per request and one per response, correlated by request id.

    The id is taken from an incoming ``X-Request-ID`` header or generated,
    stored in ``request_id_context`` for every log record emitted while the
    request is handled, and echoed back in the response header.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_context.set(request_id)

        start_time = time.time()
        method = request.method
        path = str(request.url.path)
        client_host = request.client.host if request.client else "unknown"

        logger.info(
            "Incoming request",
            extra={"method": method, "path": path, "client_host": client_host},
        )

        try:
            response = await call_next(request)

            duration_ms = round((time.time() - start_time) * 1000, 2)
            status_code = response.status_code
            response.headers["X-Request-ID"] = request_id

            extra_fields = {
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": duration_ms,
                "client_host": client_host,
            }

            if status_code >= 500:
                logger.error("Server error response", extra=extra_fields)
            elif status_code >= 400:
                logger.warning("Client error response", extra=extra_fields)
            else:
                logger.info("Request completed", extra=extra_fields)

            return response
        finally:
            request_id_context.reset(token)
