"""
Standardized, pure error data model.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from services.libs.tsq_service_libs.error_handling.error_enums import ErrorCode


class ErrorDetail(BaseModel):
    """
    The canonical data model for an error raised by the service.
    This model contains only data fields and no behavior.
    """

    error_code: ErrorCode
    message: str
    correlation_id: UUID
    timestamp: datetime
    service: str
    operation: str
    details: dict[str, Any] = Field(default_factory=dict)
    stack_trace: str | None = None

    model_config = ConfigDict(frozen=True)
