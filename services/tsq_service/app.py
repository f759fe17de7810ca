"""
TSQ Service Application.

REST facade over Temporary Storage Queues: GET/PUT/POST/DELETE on
/tsq/<tsq_name> map to browse, update, create and delete.
"""

from __future__ import annotations

from quart import Quart
from quart_dishka import QuartDishka

from services.libs.tsq_service_libs.correlation_middleware import setup_correlation_middleware
from services.libs.tsq_service_libs.error_handling.quart import register_error_handlers
from services.libs.tsq_service_libs.logging_utils import (
    configure_service_logging,
    create_service_logger,
)
from services.libs.tsq_service_libs.metrics_middleware import setup_metrics_middleware
from services.tsq_service import startup_setup
from services.tsq_service.api.health_routes import health_bp
from services.tsq_service.api.tsq_routes import tsq_bp
from services.tsq_service.config import settings
from services.tsq_service.startup_setup import create_di_container

# Configure structured logging
configure_service_logging(
    settings.SERVICE_NAME,
    environment=settings.ENVIRONMENT.value,
    log_level=settings.LOG_LEVEL,
)
logger = create_service_logger("tsq.app")

app = Quart(__name__)

# Create DI container and setup QuartDishka integration before registering blueprints
_di_container = create_di_container()
QuartDishka(app=app, container=_di_container)

setup_correlation_middleware(app)
register_error_handlers(app)
setup_metrics_middleware(app, logger_name="tsq.metrics")


@app.before_serving
async def startup() -> None:
    """Initialize services."""
    try:
        await startup_setup.initialize_services(app, settings, _di_container)
        logger.info("TSQ Service startup completed successfully")
    except Exception as e:
        logger.critical(f"Failed to start TSQ Service: {e}", exc_info=True)
        raise


@app.after_serving
async def shutdown() -> None:
    """Gracefully shutdown all services."""
    await startup_setup.shutdown_services()
    logger.info("TSQ Service shutdown completed")


# Register Blueprints
app.register_blueprint(tsq_bp)
app.register_blueprint(health_bp)


if __name__ == "__main__":
    app.run(debug=settings.DEBUG, host=settings.HTTP_HOST, port=settings.HTTP_PORT)
