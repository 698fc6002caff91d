"""Request middleware for the host API."""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

REQUEST_ID_HEADER = "X-Request-ID"


class AuditLoggerMiddleware(BaseHTTPMiddleware):
    """Tag every request with an id and emit one audit record per request.

    Requests that carry ``X-Request-ID`` keep it; the id is echoed on the
    response and logged alongside the session the route addressed, if any.
    """

    def __init__(self, app: ASGIApp, *, skip_paths: tuple[str, ...] = ("/healthz",)) -> None:
        super().__init__(app)
        self.skip_paths = skip_paths
        self.logger = logging.getLogger("debug_host.api.audit")

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:16]
        request.state.request_id = request_id
        started = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            if request.url.path not in self.skip_paths:
                status = response.status_code if response is not None else 500
                self.logger.log(
                    logging.WARNING if status >= 500 else logging.INFO,
                    "api.request",
                    extra={
                        "request_id": request_id,
                        "method": request.method,
                        "path": request.url.path,
                        "session_id": request.path_params.get("session_id"),
                        "status": status,
                        "duration_ms": round((time.perf_counter() - started) * 1000, 3),
                    },
                )


__all__ = ["AuditLoggerMiddleware", "REQUEST_ID_HEADER"]
