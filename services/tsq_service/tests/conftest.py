"""
Test configuration for TSQ Service.

Provides the protocol fakes from fakes.py as fixtures and a
Quart test app wired with Dishka the same way app.py wires the real one.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from dishka import Provider, Scope, make_async_container, provide
from prometheus_client import CollectorRegistry
from quart import Quart, g, request
from quart.testing import QuartClient
from quart_dishka import QuartDishka

from services.libs.tsq_service_libs.correlation_middleware import setup_correlation_middleware
from services.libs.tsq_service_libs.error_handling import (
    CorrelationContext,
    extract_correlation_context_from_request,
)
from services.libs.tsq_service_libs.error_handling.quart import register_error_handlers
from services.tsq_service.api.health_routes import health_bp
from services.tsq_service.api.tsq_routes import tsq_bp
from services.tsq_service.config import Settings
from services.tsq_service.protocols import QueueClientProtocol, TsqMetricsProtocol
from services.tsq_service.tests.fakes import MockTsqMetrics, RecordingQueueClient


@pytest.fixture
def queue_client() -> RecordingQueueClient:
    return RecordingQueueClient()


@pytest.fixture
def mock_metrics() -> MockTsqMetrics:
    return MockTsqMetrics()


@pytest.fixture
def settings() -> Settings:
    return Settings(QUEUE_BACKEND="memory", STRICT_STATUS_CODES=False)


@pytest.fixture
async def test_app(
    queue_client: RecordingQueueClient,
    mock_metrics: MockTsqMetrics,
    settings: Settings,
) -> AsyncIterator[Quart]:
    """Create test Quart app with DI configured."""
    app = Quart(__name__)
    setup_correlation_middleware(app)
    register_error_handlers(app)

    class TestProvider(Provider):
        @provide(scope=Scope.APP)
        def provide_settings(self) -> Settings:
            return settings

        @provide(scope=Scope.APP)
        def provide_registry(self) -> CollectorRegistry:
            return CollectorRegistry()

        @provide(scope=Scope.APP)
        def provide_queue_client(self) -> QueueClientProtocol:
            return queue_client

        @provide(scope=Scope.APP)
        def provide_metrics(self) -> TsqMetricsProtocol:
            return mock_metrics

        @provide(scope=Scope.REQUEST)
        def provide_correlation(self) -> CorrelationContext:
            ctx = getattr(g, "correlation_context", None)
            if isinstance(ctx, CorrelationContext):
                return ctx
            return extract_correlation_context_from_request(request)

    container = make_async_container(TestProvider())
    QuartDishka(app=app, container=container)
    app.register_blueprint(tsq_bp)
    app.register_blueprint(health_bp)

    yield app

    await container.close()


@pytest.fixture
async def client(test_app: Quart) -> AsyncIterator[QuartClient]:
    async with test_app.test_client() as test_client:
        yield test_client
