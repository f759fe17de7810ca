"""
In-memory implementation of QueueClientProtocol.

Queues are plain lists keyed by name, guarded by an asyncio.Lock. Safe for
concurrent coroutines in one event loop; NOT shared across processes, so each
Hypercorn worker holds its own queues. Used for development and tests.
"""

from __future__ import annotations

import asyncio

from services.libs.tsq_service_libs.logging_utils import create_service_logger
from services.tsq_service.implementations import outcome_messages

logger = create_service_logger("tsq.queue.memory")


class InMemoryQueueClient:
    """Process-local queue backend."""

    def __init__(self, initial_queues: dict[str, list[str]] | None = None) -> None:
        self._queues: dict[str, list[str]] = {
            name: list(records) for name, records in (initial_queues or {}).items()
        }
        self._lock = asyncio.Lock()

    async def browse(self, name: str) -> list[str]:
        async with self._lock:
            return list(self._queues.get(name, []))

    async def write(self, name: str, record: str) -> str:
        async with self._lock:
            queue = self._queues.setdefault(name, [])
            queue.append(record)
            item_number = len(queue)
        logger.debug(f"Wrote item {item_number} to in-memory TSQ '{name}'")
        return outcome_messages.record_written(name, item_number)

    async def info(self, name: str) -> int:
        async with self._lock:
            return len(self._queues.get(name, []))

    async def delete(self, name: str) -> str:
        async with self._lock:
            existed = self._queues.pop(name, None) is not None
        if not existed:
            return outcome_messages.queue_not_deleted(name)
        logger.debug(f"Deleted in-memory TSQ '{name}'")
        return outcome_messages.queue_deleted(name)
