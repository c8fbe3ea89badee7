"""
Request logging for the dashboard.

Each request gets a short request id bound into structlog's context vars, so
the Sim fetch logs of one page render can be grouped. Page renders log the
wallet and tab that were asked for; static assets only log at debug level.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger("http")

REQUEST_ID_HEADER = "x-request-id"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind a request id and log one line per handled request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.perf_counter()
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        elapsed_ms = round((time.perf_counter() - start) * 1000, 1)

        if request.url.path.startswith("/static/"):
            logger.debug("static_served", path=request.url.path, status=response.status_code)
            return response

        logger.info(
            "page_rendered",
            path=request.url.path,
            status=response.status_code,
            wallet_address=request.query_params.get("walletAddress") or None,
            tab=request.query_params.get("tab"),
            elapsed_ms=elapsed_ms,
        )
        return response
