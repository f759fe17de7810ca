"""Dependency injection configuration for TSQ Service using Dishka."""

from __future__ import annotations

from collections.abc import AsyncIterator

from dishka import Provider, Scope, provide
from prometheus_client import CollectorRegistry, Counter
from quart import g, request

from services.libs.tsq_service_libs.error_handling import (
    CorrelationContext,
    extract_correlation_context_from_request,
)
from services.libs.tsq_service_libs.logging_utils import create_service_logger
from services.tsq_service.config import Settings, settings
from services.tsq_service.implementations.in_memory_queue_client import InMemoryQueueClient
from services.tsq_service.implementations.prometheus_tsq_metrics import PrometheusTsqMetrics
from services.tsq_service.implementations.redis_queue_client import RedisQueueClient
from services.tsq_service.protocols import QueueClientProtocol, TsqMetricsProtocol

logger = create_service_logger("tsq.di")


class CoreInfrastructureProvider(Provider):
    """Provider for settings, metrics and correlation context."""

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide service settings."""
        return settings

    @provide(scope=Scope.APP)
    def provide_collector_registry(self) -> CollectorRegistry:
        """Provide Prometheus collector registry."""
        return CollectorRegistry()

    @provide(scope=Scope.APP)
    def provide_tsq_metrics(self, registry: CollectorRegistry) -> TsqMetricsProtocol:
        """Provide TSQ operation metrics implementation."""
        tsq_operations = Counter(
            "tsq_operations_total",
            "Total TSQ operations",
            ["operation", "status"],
            registry=registry,
        )
        return PrometheusTsqMetrics(tsq_operations)

    @provide(scope=Scope.REQUEST)
    def provide_correlation_context(self) -> CorrelationContext:
        """Provide correlation context set by the middleware, or extract it."""
        ctx = getattr(g, "correlation_context", None)
        if isinstance(ctx, CorrelationContext):
            return ctx
        return extract_correlation_context_from_request(request)


class QueueClientProvider(Provider):
    """Provider for the queue backend selected by QUEUE_BACKEND."""

    @provide(scope=Scope.APP)
    async def provide_queue_client(self, settings: Settings) -> AsyncIterator[QueueClientProtocol]:
        """Provide the queue client with lifecycle management."""
        if settings.QUEUE_BACKEND == "redis":
            client = RedisQueueClient(
                redis_url=settings.REDIS_URL,
                key_prefix=settings.REDIS_KEY_PREFIX,
                socket_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
                client_id=settings.SERVICE_NAME,
            )
            await client.start()
            try:
                yield client
            finally:
                await client.stop()
        else:
            logger.info("Using in-memory queue backend (queues are per worker process)")
            yield InMemoryQueueClient()
