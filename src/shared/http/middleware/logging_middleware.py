from __future__ import annotations

import time
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.shared.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    set_correlation_id,
)

log = get_logger("http")

CORRELATION_ID_HEADER = "X-Correlation-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Structured access logs.
    - Binds a correlation id (incoming X-Correlation-ID or a fresh uuid4) and echoes it back.
    - Logs one `http_access` line per request with latency, method, path, status.
    """
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        clear_request_context()
        cid = set_correlation_id(request.headers.get(CORRELATION_ID_HEADER))
        request.state.correlation_id = cid
        bind_request_context(
            path=request.url.path,
            method=request.method,
            client_ip=request.client.host if request.client else None,
        )
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[CORRELATION_ID_HEADER] = cid
            return response
        finally:
            dur_ms = round((time.perf_counter() - start) * 1000.0, 2)
            log.info(
                "http_access",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=dur_ms,
            )
