"""HTTP middleware for request correlation and access logging."""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from .context import REQUEST_ID_HEADER, bind_request_id, reset_request_id

logger = logging.getLogger("task_tracker.access")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Bind an ``X-Request-ID`` to every request and log its outcome."""

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER) -> None:
        super().__init__(app)
        self._header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(self._header_name) or uuid.uuid4().hex
        request.state.request_id = request_id
        token = bind_request_id(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
        finally:
            reset_request_id(token)
        response.headers.setdefault(self._header_name, request_id)
        return response


__all__ = ["CorrelationIdMiddleware"]
