"""Request logging middleware.

Logs one line when a request arrives and one when its response starts.
Header *names* are logged but never values, since ``X-Fal-Key`` and
``X-Google-Key`` carry caller credentials.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response

logger = logging.getLogger(__name__)


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    request_id = uuid.uuid4().hex[:12]
    request.state.request_id = request_id
    logger.info(
        "incoming_request id=%s method=%s path=%s headers=%s content_length=%s",
        request_id,
        request.method,
        request.url.path,
        sorted(request.headers.keys()),
        request.headers.get("content-length", "0"),
    )
    start = time.monotonic()
    response = await call_next(request)
    logger.info(
        "request_complete id=%s status=%d elapsed_ms=%d",
        request_id,
        response.status_code,
        int((time.monotonic() - start) * 1000),
    )
    return response
