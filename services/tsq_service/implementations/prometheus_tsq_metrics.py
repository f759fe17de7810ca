"""Prometheus-based TSQ metrics implementation."""

from __future__ import annotations

from prometheus_client import Counter

from services.libs.tsq_service_libs.logging_utils import create_service_logger
from services.tsq_service.observability_enums import OperationStatus, TsqOperation
from services.tsq_service.protocols import TsqMetricsProtocol

logger = create_service_logger("tsq.metrics.prometheus")


class PrometheusTsqMetrics(TsqMetricsProtocol):
    """Prometheus-based implementation of TSQ operation metrics."""

    def __init__(self, tsq_operations_counter: Counter) -> None:
        """
        Initialize Prometheus TSQ metrics.

        Args:
            tsq_operations_counter: Counter labelled by operation and status
        """
        self.tsq_operations = tsq_operations_counter

    def record_operation(self, operation: TsqOperation, status: OperationStatus) -> None:
        try:
            self.tsq_operations.labels(operation=operation.value, status=status.value).inc()
        except Exception as e:
            logger.error(f"Error recording TSQ operation metric: {e}")
