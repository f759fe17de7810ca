"""Health and metrics routes for TSQ Service."""

from __future__ import annotations

from dishka import FromDishka
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from quart import Blueprint, Response, jsonify
from quart_dishka import inject

from services.libs.tsq_service_libs.error_handling import CorrelationContext
from services.libs.tsq_service_libs.logging_utils import create_service_logger
from services.tsq_service.config import Settings
from services.tsq_service.protocols import QueueClientProtocol

logger = create_service_logger("tsq.api.health")
health_bp = Blueprint("health_routes", __name__)


@health_bp.route("/healthz")
@inject
async def health_check(
    settings: FromDishka[Settings],
    corr: FromDishka[CorrelationContext],
    queue_client: FromDishka[QueueClientProtocol],
) -> tuple[Response, int]:
    """Standardized health check endpoint with queue backend status."""
    checks = {"service_responsive": True, "dependencies_available": True}
    dependencies: dict[str, dict[str, object]] = {}

    # Read-only probe: info() never creates the queue
    try:
        await queue_client.info(settings.HEALTH_PROBE_QUEUE_NAME)
        dependencies["queue_backend"] = {
            "status": "healthy",
            "backend": settings.QUEUE_BACKEND,
        }
    except Exception as e:
        logger.warning(f"Queue backend health probe failed: {e}")
        dependencies["queue_backend"] = {
            "status": "unhealthy",
            "backend": settings.QUEUE_BACKEND,
            "error": str(e),
        }
        checks["dependencies_available"] = False

    overall_status = "healthy" if all(checks.values()) else "unhealthy"
    health_response = {
        "service": settings.SERVICE_NAME,
        "status": overall_status,
        "message": f"TSQ Service is {overall_status}",
        "version": "1.0.0",
        "checks": checks,
        "dependencies": dependencies,
        "environment": settings.ENVIRONMENT.value,
        "correlation_id": corr.original,
    }
    status_code = 200 if overall_status == "healthy" else 503
    return jsonify(health_response), status_code


@health_bp.route("/metrics")
@inject
async def metrics(registry: FromDishka[CollectorRegistry]) -> Response:
    """Prometheus metrics endpoint."""
    try:
        metrics_data = generate_latest(registry)
        return Response(metrics_data, content_type=CONTENT_TYPE_LATEST)
    except Exception as e:
        logger.error(f"Error generating metrics: {e}", exc_info=True)
        return Response("Error generating metrics", status=500)
