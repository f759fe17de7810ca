"""Startup and shutdown logic for TSQ Service."""

from __future__ import annotations

from dishka import AsyncContainer, make_async_container
from prometheus_client import CollectorRegistry, Counter, Histogram
from quart import Quart

from services.libs.tsq_service_libs.logging_utils import create_service_logger
from services.libs.tsq_service_libs.metrics_middleware import (
    REQUEST_COUNT_KEY,
    REQUEST_DURATION_KEY,
)
from services.tsq_service.config import Settings
from services.tsq_service.di import CoreInfrastructureProvider, QueueClientProvider
from services.tsq_service.protocols import QueueClientProtocol

logger = create_service_logger("tsq.startup")

# Global reference for DI container, managed by app.py
_app_container_ref: AsyncContainer | None = None


def create_di_container() -> AsyncContainer:
    """Creates and returns the DI AsyncContainer."""
    global _app_container_ref
    container = make_async_container(CoreInfrastructureProvider(), QueueClientProvider())
    _app_container_ref = container  # Keep a reference for shutdown
    logger.info("DI AsyncContainer created.")
    return container


async def initialize_services(app: Quart, settings: Settings, container: AsyncContainer) -> None:
    """Resolve the queue client eagerly and register HTTP metrics."""
    try:
        # Connects the Redis backend now rather than on the first request
        await container.get(QueueClientProtocol)

        registry = await container.get(CollectorRegistry)
        app.extensions = getattr(app, "extensions", {})
        app.extensions["metrics"] = _create_metrics(registry)

        logger.info(
            f"TSQ Service initialized with '{settings.QUEUE_BACKEND}' queue backend",
            strict_status_codes=settings.STRICT_STATUS_CODES,
        )
    except Exception as e:
        logger.critical(f"Failed to initialize TSQ Service: {e}", exc_info=True)
        raise


async def shutdown_services() -> None:
    """Gracefully shutdown the TSQ Service's DI container."""
    global _app_container_ref

    try:
        if _app_container_ref:
            await _app_container_ref.close()
            _app_container_ref = None
            logger.info("TSQ Service DI container closed")
    except Exception as e:
        logger.error(f"Error during TSQ Service shutdown: {e}", exc_info=True)


def _create_metrics(registry: CollectorRegistry) -> dict:
    """Create Prometheus metrics instances for HTTP middleware."""
    return {
        REQUEST_COUNT_KEY: Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=registry,
        ),
        REQUEST_DURATION_KEY: Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=registry,
        ),
    }
