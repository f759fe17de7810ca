"""
Configuration module for the TSQ Service.

This module defines the settings for the TSQ Service, including the queue
backend selection, Redis connection parameters, HTTP binding and the status
code policy for business refusals.
"""

from __future__ import annotations

from typing import Literal

from dotenv import find_dotenv, load_dotenv
from pydantic import Field
from pydantic_settings import SettingsConfigDict

from services.libs.tsq_service_libs.config import ServiceSettings

# Load .env file from repository root, regardless of current working directory
load_dotenv(find_dotenv(".env"))


class Settings(ServiceSettings):
    """
    Configuration settings for the TSQ Service.

    These settings can be overridden via environment variables prefixed with
    TSQ_SERVICE_.
    """

    SERVICE_NAME: str = "tsq-service"

    # Quart app.run() parameters
    DEBUG: bool = False
    HTTP_HOST: str = "0.0.0.0"
    HTTP_PORT: int = 8090

    # Queue backend
    QUEUE_BACKEND: Literal["memory", "redis"] = Field(
        default="memory",
        description="Queue backend implementation: 'memory' or 'redis'",
    )
    REDIS_URL: str = Field(
        default="redis://localhost:6379",
        description="Redis URL used when QUEUE_BACKEND is 'redis'",
    )
    REDIS_KEY_PREFIX: str = Field(
        default="tsq:",
        description="Key prefix under which each queue is stored as a Redis list",
    )
    REDIS_SOCKET_TIMEOUT_SECONDS: float = Field(
        default=5.0, description="Connect and socket timeout for Redis calls"
    )

    # Health probe
    HEALTH_PROBE_QUEUE_NAME: str = Field(
        default="HEALTHZ",
        description="Queue name used for the read-only backend probe in /healthz",
    )

    # Business refusals (POST on existing queue, PUT on absent queue)
    STRICT_STATUS_CODES: bool = Field(
        default=False,
        description=(
            "Return 409/404 for business refusals instead of 200 with a descriptive result"
        ),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="TSQ_SERVICE_",  # e.g. TSQ_SERVICE_QUEUE_BACKEND
    )


# Create a single instance for the application to use
settings = Settings()
