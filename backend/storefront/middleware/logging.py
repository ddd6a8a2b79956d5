"""
Storefront Catalog - Access Log Middleware
============================================

Writes one line per request to the "storefront.access" logger:

    GET /products/{product_id} 404 3.2ms [a1b2c3d4] path=/products/99

The first path is the matched route template, so lines for different ids
aggregate together; the concrete path is kept in `extra` and at the end of
the line. Level by outcome:

    5xx → ERROR    4xx → WARNING    slower than SLOW_REQUEST_MS → WARNING
    otherwise → INFO

Review bodies are never logged. /health is skipped.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from storefront.middleware.request_id import request_id_var

logger = logging.getLogger("storefront.access")

SKIPPED_PATHS = frozenset({"/health"})
SLOW_REQUEST_MS = 1000.0


def access_log_level(status: int, duration_ms: float) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400 or duration_ms > SLOW_REQUEST_MS:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        # Set by the router once a route matched; unmatched paths log as-is
        route = request.scope.get("route")
        template = getattr(route, "path", request.url.path)
        request_id = request_id_var.get("")

        logger.log(
            access_log_level(response.status_code, duration_ms),
            "%s %s %d %.1fms [%s] path=%s",
            request.method,
            template,
            response.status_code,
            duration_ms,
            request_id,
            request.url.path,
            extra={
                "request_id": request_id,
                "method": request.method,
                "route": template,
                "path": request.url.path,
                "query": request.url.query,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": request.client.host if request.client else None,
            },
        )
        return response
