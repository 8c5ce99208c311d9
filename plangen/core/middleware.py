"""HTTP middleware for request correlation and access logging.

Every response carries the correlation id (incoming header value or a fresh
UUID) and the handling time in milliseconds. One ``http.request`` log line is
written per request while the id is still bound to the context.

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from plangen.core.config import settings
from plangen.core.exception_handlers import general_exception_handler
from plangen.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)


def _loggable_path(path: str) -> str:
    # Raw plan tokens carry the whole plan
    if path.startswith("/api/plan/"):
        return "/api/plan/{token}"
    return path


async def request_id_middleware(request: Request, call_next) -> Response:
    """Bind a request id for the request's lifetime and log its outcome.

    Unexpected exceptions are rendered here, while the id is still bound, so
    crash responses carry the id in body and headers too.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        The downstream response with ``X-Request-ID`` and
        ``X-Request-Duration-ms`` headers added.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    started = time.perf_counter()
    try:
        try:
            response: Response = await call_next(request)
        except Exception as exc:
            response = await general_exception_handler(request, exc)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "http.request",
            extra={
                "method": request.method,
                "path": _loggable_path(request.url.path),
                "status_code": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
            },
        )
    finally:
        clear_request_id()

    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{elapsed_ms:.2f}")
    return response
