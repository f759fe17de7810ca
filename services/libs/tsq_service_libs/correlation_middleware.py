"""
Correlation middleware for Quart services.

Extracts the correlation context once per request, stores it on ``g`` so DI
providers and error handlers reuse it, binds it into the structlog context
and echoes it back in the ``X-Correlation-ID`` response header.
"""

from __future__ import annotations

from quart import Quart, Response, g, request

from services.libs.tsq_service_libs.error_handling.correlation import (
    CORRELATION_HEADER,
    CorrelationContext,
    extract_correlation_context_from_request,
)
from services.libs.tsq_service_libs.logging_utils import bind_request_context


def setup_correlation_middleware(app: Quart) -> None:
    @app.before_request
    async def _extract_correlation() -> None:
        ctx = extract_correlation_context_from_request(request)
        g.correlation_context = ctx
        bind_request_context(ctx.original, request.method, request.path)

    @app.after_request
    async def _echo_correlation(response: Response) -> Response:
        ctx = getattr(g, "correlation_context", None)
        if isinstance(ctx, CorrelationContext):
            response.headers[CORRELATION_HEADER] = ctx.original
        return response
