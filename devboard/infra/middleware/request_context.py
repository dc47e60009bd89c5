"""
Per-request correlation for structlog.

Every log line written while a request is handled carries ``request_id``,
``method`` and ``path``. For SSE responses the handler returns as soon as
headers are ready, so the closing log line reports the time to first byte,
not the lifetime of the stream.
"""

from __future__ import annotations

import time
from typing import Awaitable, Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from devboard.infra.config.logging_config import bind_context, clear_context, get_logger

REQUEST_ID_HEADER = "X-Request-ID"


def _is_event_stream(response: Response) -> bool:
    return response.headers.get("content-type", "").startswith("text/event-stream")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds request identity to the log context and echoes ``X-Request-ID``."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        bind_context(request_id=request_id, method=request.method, path=request.url.path)
        log = get_logger("http")
        started = time.perf_counter()

        log.info(
            "request.start",
            client_ip=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )
        try:
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
            response.headers[REQUEST_ID_HEADER] = request_id
            log.info(
                "request.stream_opened" if _is_event_stream(response) else "request.end",
                status_code=response.status_code,
                elapsed_ms=elapsed_ms,
            )
            return response
        finally:
            clear_context()
