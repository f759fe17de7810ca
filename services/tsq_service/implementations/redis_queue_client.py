"""
Redis-backed implementation of QueueClientProtocol.

Each queue is one Redis list stored under ``{key_prefix}{name}``:
browse = LRANGE 0 -1, write = RPUSH, info = LLEN, delete = DEL.
Follows the same start/stop lifecycle as the other Redis clients; Redis
failures are raised as TsqError so the HTTP layer maps them to 5xx.
"""

from __future__ import annotations

from typing import NoReturn

import redis.asyncio as aioredis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from services.libs.tsq_service_libs.error_handling import (
    raise_configuration_error,
    raise_connection_error,
    raise_external_service_error,
)
from services.libs.tsq_service_libs.logging_utils import create_service_logger
from services.tsq_service.implementations import outcome_messages

logger = create_service_logger("tsq.queue.redis")

SERVICE = "tsq_service"


class RedisQueueClient:
    """Queue backend storing every TSQ as a Redis list."""

    def __init__(
        self,
        *,
        redis_url: str,
        key_prefix: str = "tsq:",
        socket_timeout: float = 5.0,
        client_id: str = "tsq-service",
    ) -> None:
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self.client_id = client_id
        try:
            self.client = aioredis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=socket_timeout,
                socket_timeout=socket_timeout,
            )
        except ValueError as e:
            # from_url rejects unknown schemes and malformed URLs up front
            raise_configuration_error(
                service=SERVICE,
                operation="configure",
                config_key="REDIS_URL",
                message=f"Invalid Redis URL for queue backend: {e}",
            )
        self._started = False

    def _key(self, name: str) -> str:
        return f"{self.key_prefix}{name}"

    async def start(self) -> None:
        """Initialize Redis connection with health verification."""
        if self._started:
            return
        try:
            await self.client.ping()
        except RedisError as e:
            logger.error(f"Redis queue client '{self.client_id}' failed to connect: {e}")
            raise_connection_error(
                service=SERVICE,
                operation="start",
                target=self.redis_url,
                message=f"Cannot connect to Redis queue backend: {e}",
            )
        self._started = True
        logger.info(f"Redis queue client '{self.client_id}' connected to {self.redis_url}")

    async def stop(self) -> None:
        """Clean shutdown of Redis connection."""
        if not self._started:
            return
        try:
            await self.client.aclose()
            logger.info(f"Redis queue client '{self.client_id}' disconnected")
        except RedisError as e:
            logger.error(
                f"Error stopping Redis queue client '{self.client_id}': {e}",
                exc_info=True,
            )
        finally:
            self._started = False

    def _ensure_started(self) -> None:
        if not self._started:
            raise RuntimeError(f"Redis queue client '{self.client_id}' is not running.")

    def _raise_backend_error(self, operation: str, name: str, error: RedisError) -> NoReturn:
        logger.error(
            f"Redis {operation} failed for TSQ '{name}': {error}",
            exc_info=True,
        )
        if isinstance(error, (RedisConnectionError, RedisTimeoutError)):
            raise_connection_error(
                service=SERVICE,
                operation=operation,
                target=self.redis_url,
                message=f"Redis queue backend unavailable: {error}",
                tsq_name=name,
            )
        raise_external_service_error(
            service=SERVICE,
            operation=operation,
            external_service="redis",
            message=f"Redis queue backend error: {error}",
            tsq_name=name,
        )

    async def browse(self, name: str) -> list[str]:
        self._ensure_started()
        try:
            records = await self.client.lrange(self._key(name), 0, -1)
        except RedisError as e:
            self._raise_backend_error("browse", name, e)
        return list(records)

    async def write(self, name: str, record: str) -> str:
        self._ensure_started()
        try:
            item_number = await self.client.rpush(self._key(name), record)
        except RedisError as e:
            self._raise_backend_error("write", name, e)
        logger.debug(f"RPUSH to TSQ '{name}' produced item {item_number}")
        return outcome_messages.record_written(name, int(item_number))

    async def info(self, name: str) -> int:
        self._ensure_started()
        try:
            length = await self.client.llen(self._key(name))
        except RedisError as e:
            self._raise_backend_error("info", name, e)
        return int(length)

    async def delete(self, name: str) -> str:
        self._ensure_started()
        try:
            deleted_count = await self.client.delete(self._key(name))
        except RedisError as e:
            self._raise_backend_error("delete", name, e)
        if int(deleted_count) == 0:
            return outcome_messages.queue_not_deleted(name)
        return outcome_messages.queue_deleted(name)
