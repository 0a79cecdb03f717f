"""Request logging middleware.

Every request gets a correlation id: the terminal's own X-Request-ID when it
sends a well-formed one (agent terminals reuse it across retries of the same
sale), otherwise a fresh `req_<12 hex>`. The id is stored on request.state
for ApiResponse and echoed back in the X-Request-ID header.

Log format:
    INFO [POST] /api/v1/tickets → 201 (23ms) req_a1b2c3d4e5f6

4xx responses log at WARNING and 5xx at ERROR; /health probes log at DEBUG.
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("lt.request")

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9_\-]{8,64}$")
_QUIET_PATHS = frozenset({"/health"})


def resolve_request_id(inbound: str | None) -> str:
    if inbound and _REQUEST_ID_RE.match(inbound):
        return inbound
    return f"req_{uuid.uuid4().hex[:12]}"


def _level_for(path: str, status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    if path in _QUIET_PATHS:
        return logging.DEBUG
    return logging.INFO


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        path = request.url.path
        logger.log(
            _level_for(path, response.status_code),
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
