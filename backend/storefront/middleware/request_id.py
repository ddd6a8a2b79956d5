"""
Storefront Catalog - Request ID Middleware
============================================

Tags every request with a correlation id kept in a ContextVar, so the access
logger and the exception handlers can print it without being passed the
request. The id is echoed back in the X-Request-ID response header.

A caller-supplied X-Request-ID is accepted only if it is a short token of
letters, digits, '-' or '_'; anything else is replaced with a generated id
so log lines cannot be forged through the header.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def resolve_request_id(header_value: Optional[str]) -> str:
    """Accept a well-formed incoming id, otherwise mint an 8-char hex id."""
    if header_value and _VALID_REQUEST_ID.match(header_value):
        return header_value
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
