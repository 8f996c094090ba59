"""
Request correlation and access logging.

Binds the X-Request-ID (client supplied or fresh) for the lifetime of the
request, echoes it on the response and writes one log line per request.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from userhub.logging_config import actor_id_var, get_logger, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
SLOW_REQUEST_MS = 1000


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        request_token = request_id_var.set(request_id)
        actor_token = actor_id_var.set(None)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            actor_id_var.reset(actor_token)
            request_id_var.reset(request_token)

        duration_ms = round((time.perf_counter() - start) * 1000, 1)
        response.headers[REQUEST_ID_HEADER] = request_id

        log =logger.warning if duration_ms > SLOW_REQUEST_MS else logger.info
        log(
            "%s %s -> %d",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                "request_id": request_id,
                "actor_id": getattr(request.state, "actor_id", None),
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "slow": duration_ms > SLOW_REQUEST_MS,
            },
        )
        return response
