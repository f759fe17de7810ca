"""
Hypercorn configuration for the TSQ Service.

Usage:
    hypercorn --config python:services.tsq_service.hypercorn_config \
        services.tsq_service.app:app

The bind address follows TSQ_SERVICE_HTTP_HOST / TSQ_SERVICE_HTTP_PORT so the
dev server and Hypercorn listen on the same port.
"""

import os

from services.tsq_service.config import Settings, settings


def worker_count(service_settings: Settings, web_concurrency: str | None) -> int:
    """In-memory queues are per process, so that backend always gets one worker."""
    if service_settings.QUEUE_BACKEND == "memory":
        return 1
    return max(1, int(web_concurrency or 1))


bind = [f"{settings.HTTP_HOST}:{settings.HTTP_PORT}"]
workers = worker_count(settings, os.getenv("WEB_CONCURRENCY"))
worker_class = "asyncio"

loglevel = settings.LOG_LEVEL.lower()
accesslog = "-"
errorlog = "-"

graceful_timeout = int(os.getenv("GRACEFUL_TIMEOUT", 30))
keep_alive_timeout = int(os.getenv("KEEP_ALIVE_TIMEOUT", 5))
