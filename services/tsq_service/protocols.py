"""
TSQ Service behavioral contracts and protocols.

This module defines the protocols (interfaces) that TSQ Service components
must implement, enabling dependency injection and testability. The queue
backend is reached exclusively through ``QueueClientProtocol``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from services.tsq_service.observability_enums import OperationStatus, TsqOperation


@runtime_checkable
class QueueClientProtocol(Protocol):
    """Protocol for the four queue operations offered by the queue backend."""

    async def browse(self, name: str) -> list[str]:
        """
        Read all records of a queue without removing them.

        Args:
            name: Queue name

        Returns:
            Records in queue order; empty if the queue does not exist

        Raises:
            TsqError: If the backend is unreachable or fails
        """
        ...

    async def write(self, name: str, record: str) -> str:
        """
        Append a record to a queue, creating the queue if needed.

        Args:
            name: Queue name
            record: Record payload

        Returns:
            Human-readable outcome message

        Raises:
            TsqError: If the backend fails
        """
        ...

    async def info(self, name: str) -> int:
        """
        Return the number of items in a queue.

        Returns:
            Item count, 0 if the queue does not exist

        Raises:
            TsqError: If the backend fails
        """
        ...

    async def delete(self, name: str) -> str:
        """
        Delete a queue and all its records.

        Returns:
            Human-readable outcome message, also when the queue did not exist

        Raises:
            TsqError: If the backend fails
        """
        ...


@runtime_checkable
class TsqMetricsProtocol(Protocol):
    """Protocol for TSQ operation metrics collection."""

    def record_operation(self, operation: TsqOperation, status: OperationStatus) -> None:
        """
        Record a TSQ operation metric.

        Args:
            operation: Operation type (TsqOperation enum)
            status: Operation status (OperationStatus enum)
        """
        ...
