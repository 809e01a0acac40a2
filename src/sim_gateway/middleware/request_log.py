"""Request logging middleware.

Every request gets a request id: the caller's ``X-Request-ID`` when it is a
short token, otherwise a fresh ``req_<12 hex>``. The id is stored on
request.state (routers copy it into ApiResponse), echoed in the
``X-Request-ID`` response header, and written to the access log line:

    INFO    [POST] /api/users/buy → 200 (23ms) req_a1b2c3d4e5f6
    WARNING [POST] /api/users/buy → 500 (41ms) req_a1b2c3d4e5f6
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("sim.request")

REQUEST_ID_HEADER = "X-Request-ID"
_CALLER_ID = re.compile(r"^[A-Za-z0-9_.-]{1,64}$")


def resolve_request_id(incoming: str | None) -> str:
    if incoming and _CALLER_ID.match(incoming):
        return incoming
    return f"req_{uuid.uuid4().hex[:12]}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
