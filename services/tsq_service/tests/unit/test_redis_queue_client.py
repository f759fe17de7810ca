"""
Unit tests for RedisQueueClient.

The redis.asyncio connection is replaced with an AsyncMock; tests verify the
list commands issued per operation and the mapping of Redis failures to
TsqError.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from services.libs.tsq_service_libs.error_handling import ErrorCode, TsqError
from services.tsq_service.implementations.redis_queue_client import RedisQueueClient


@pytest.fixture
def redis_queue_client() -> RedisQueueClient:
    return RedisQueueClient(redis_url="redis://localhost:6379", key_prefix="tsq:")


@pytest.fixture
def mock_redis_connection() -> AsyncMock:
    mock = AsyncMock()
    mock.ping = AsyncMock(return_value=True)
    mock.aclose = AsyncMock()
    return mock


@pytest.fixture
def started_client(
    redis_queue_client: RedisQueueClient, mock_redis_connection: AsyncMock
) -> RedisQueueClient:
    redis_queue_client.client = mock_redis_connection
    redis_queue_client._started = True
    return redis_queue_client


class TestLifecycle:
    def test_invalid_redis_url_raises_configuration_error(self) -> None:
        with pytest.raises(TsqError) as exc_info:
            RedisQueueClient(redis_url="http://localhost:6379")

        assert exc_info.value.error_code == ErrorCode.CONFIGURATION_ERROR.value
        assert exc_info.value.error_detail.details == {"config_key": "REDIS_URL"}

    @pytest.mark.asyncio
    async def test_start_pings_redis(
        self, redis_queue_client: RedisQueueClient, mock_redis_connection: AsyncMock
    ) -> None:
        redis_queue_client.client = mock_redis_connection

        await redis_queue_client.start()

        mock_redis_connection.ping.assert_awaited_once()
        assert redis_queue_client._started is True

    @pytest.mark.asyncio
    async def test_start_failure_raises_connection_error(
        self, redis_queue_client: RedisQueueClient, mock_redis_connection: AsyncMock
    ) -> None:
        mock_redis_connection.ping.side_effect = RedisConnectionError("refused")
        redis_queue_client.client = mock_redis_connection

        with pytest.raises(TsqError) as exc_info:
            await redis_queue_client.start()

        assert exc_info.value.error_code == ErrorCode.CONNECTION_ERROR.value
        assert redis_queue_client._started is False

    @pytest.mark.asyncio
    async def test_stop_closes_connection(
        self, started_client: RedisQueueClient, mock_redis_connection: AsyncMock
    ) -> None:
        await started_client.stop()

        mock_redis_connection.aclose.assert_awaited_once()
        assert started_client._started is False

    @pytest.mark.asyncio
    async def test_operation_before_start_raises(self, redis_queue_client: RedisQueueClient) -> None:
        with pytest.raises(RuntimeError, match="is not running"):
            await redis_queue_client.info("Q")


class TestQueueOperations:
    @pytest.mark.asyncio
    async def test_browse_uses_lrange_on_prefixed_key(
        self, started_client: RedisQueueClient, mock_redis_connection: AsyncMock
    ) -> None:
        mock_redis_connection.lrange.return_value = ["A", "B"]

        assert await started_client.browse("Q") == ["A", "B"]
        mock_redis_connection.lrange.assert_awaited_once_with("tsq:Q", 0, -1)

    @pytest.mark.asyncio
    async def test_write_uses_rpush_and_reports_item_number(
        self, started_client: RedisQueueClient, mock_redis_connection: AsyncMock
    ) -> None:
        mock_redis_connection.rpush.return_value = 3

        result = await started_client.write("Q", "X")

        assert result == "Record written to TSQ Q as item 3"
        mock_redis_connection.rpush.assert_awaited_once_with("tsq:Q", "X")

    @pytest.mark.asyncio
    async def test_info_uses_llen(
        self, started_client: RedisQueueClient, mock_redis_connection: AsyncMock
    ) -> None:
        mock_redis_connection.llen.return_value = 0

        assert await started_client.info("Q") == 0
        mock_redis_connection.llen.assert_awaited_once_with("tsq:Q")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("deleted", "expected"),
        [
            (1, "TSQ Q deleted"),
            (0, "TSQ Q does not exist, nothing deleted"),
        ],
    )
    async def test_delete_outcome(
        self,
        started_client: RedisQueueClient,
        mock_redis_connection: AsyncMock,
        deleted: int,
        expected: str,
    ) -> None:
        mock_redis_connection.delete.return_value = deleted

        assert await started_client.delete("Q") == expected
        mock_redis_connection.delete.assert_awaited_once_with("tsq:Q")


class TestErrorMapping:
    @pytest.mark.asyncio
    async def test_timeout_maps_to_connection_error(
        self, started_client: RedisQueueClient, mock_redis_connection: AsyncMock
    ) -> None:
        mock_redis_connection.lrange.side_effect = RedisTimeoutError("slow")

        with pytest.raises(TsqError) as exc_info:
            await started_client.browse("Q")

        assert exc_info.value.error_code == ErrorCode.CONNECTION_ERROR.value
        assert exc_info.value.error_detail.details["tsq_name"] == "Q"

    @pytest.mark.asyncio
    async def test_response_error_maps_to_external_service_error(
        self, started_client: RedisQueueClient, mock_redis_connection: AsyncMock
    ) -> None:
        mock_redis_connection.rpush.side_effect = ResponseError("WRONGTYPE")

        with pytest.raises(TsqError) as exc_info:
            await started_client.write("Q", "X")

        assert exc_info.value.error_code == ErrorCode.EXTERNAL_SERVICE_ERROR.value
        assert exc_info.value.error_detail.details["external_service"] == "redis"
