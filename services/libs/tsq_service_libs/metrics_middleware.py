"""HTTP request metrics for Quart services.

Counts requests and observes their duration per method, URL rule and status.
The Counter and Histogram live in ``app.extensions["metrics"]`` and are looked
up on every response, so they may be registered after the middleware is
installed (the service registers them at startup, once the DI registry exists).
"""

from __future__ import annotations

import time

from quart import Quart, Response, current_app, g, request

from services.libs.tsq_service_libs.logging_utils import create_service_logger

REQUEST_COUNT_KEY = "http_requests_total"
REQUEST_DURATION_KEY = "http_request_duration_seconds"


def _endpoint_label() -> str:
    # /tsq/A and /tsq/B share the rule /tsq/<string:tsq_name>
    rule = request.url_rule
    return rule.rule if rule is not None else request.path


def setup_metrics_middleware(app: Quart, logger_name: str | None = None) -> None:
    """Record request count and duration for every response of ``app``."""
    log = create_service_logger(logger_name or "tsq.metrics_middleware")

    @app.before_request
    async def _start_request_timer() -> None:
        g.request_started_at = time.perf_counter()

    @app.after_request
    async def _observe_request(response: Response) -> Response:
        started_at = getattr(g, "request_started_at", None)
        metrics = current_app.extensions.get("metrics")
        if started_at is None or not metrics:
            return response

        try:
            endpoint = _endpoint_label()
            request_count = metrics.get(REQUEST_COUNT_KEY)
            if request_count is not None:
                request_count.labels(
                    method=request.method,
                    endpoint=endpoint,
                    status_code=str(response.status_code),
                ).inc()

            request_duration = metrics.get(REQUEST_DURATION_KEY)
            if request_duration is not None:
                request_duration.labels(method=request.method, endpoint=endpoint).observe(
                    time.perf_counter() - started_at
                )
        except Exception as e:
            log.error(f"Error recording request metrics: {e}")

        return response
