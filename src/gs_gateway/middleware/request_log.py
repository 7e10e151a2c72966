"""Request logging middleware.

Logs every HTTP request with method, path, status code, latency, the caller
(X-User-Id, "-" when absent) and a short request ID. The request_id is put on
request.state for ApiResponse and echoed back in the X-Request-ID header; an
incoming X-Request-ID from the upstream gateway is reused.

Log format:
    INFO [POST] /api/v1/store/purchase → 201 (23ms) user=u_42 req_a1b2c3d4e5f6
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.gs_gateway.auth.dependencies import USER_ID_HEADER

logger = logging.getLogger("gs.request")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
        request.state.request_id = incoming[:64] or f"req_{uuid.uuid4().hex[:12]}"

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        logger.info(
            "[%s] %s → %d (%.0fms) user=%s %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.headers.get(USER_ID_HEADER) or "-",
            request.state.request_id,
        )
        return response
