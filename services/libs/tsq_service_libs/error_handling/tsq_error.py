"""
TsqError - the single exception type carrying a structured ErrorDetail.
"""

from __future__ import annotations

from typing import Any

from services.libs.tsq_service_libs.error_handling.error_models import ErrorDetail


class TsqError(Exception):
    """
    Exception wrapping an ErrorDetail.

    Raised through the factory functions in ``factories.py`` and turned into
    a JSON error envelope by the Quart error handlers.
    """

    def __init__(self, error_detail: ErrorDetail) -> None:
        self.error_detail = error_detail
        super().__init__(f"[{error_detail.error_code.value}] {error_detail.message}")

    @property
    def correlation_id(self) -> str:
        return str(self.error_detail.correlation_id)

    @property
    def error_code(self) -> str:
        return self.error_detail.error_code.value

    @property
    def service(self) -> str:
        return self.error_detail.service

    @property
    def operation(self) -> str:
        return self.error_detail.operation

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses (stack traces are never exposed)."""
        return self.error_detail.model_dump(mode="json", exclude={"stack_trace"})
