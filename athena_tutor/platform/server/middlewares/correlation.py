"""Middleware for request correlation ID propagation."""

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from athena_tutor.platform.observability.logging import correlation_id_ctx

REQUEST_ID_HEADER = "X-Request-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Extracts or generates correlation IDs for request tracing.

    Reads X-Request-ID from the incoming request or generates a UUID, stores it
    in a context variable for the structured logging system and echoes it back
    in the response headers. The request path is bound alongside it so relay
    log lines say which endpoint they belong to.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        token = correlation_id_ctx.set(correlation_id)
        try:
            with structlog.contextvars.bound_contextvars(path=request.url.path):
                response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = correlation_id
            return response
        finally:
            correlation_id_ctx.reset(token)
