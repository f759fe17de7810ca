"""
Factory functions that build an ErrorDetail and raise TsqError.

Every factory takes the same core arguments (service, operation, message,
correlation_id) and stores any extra keyword arguments in ``details``.
"""

from __future__ import annotations

import traceback
from datetime import datetime, timezone
from typing import Any, NoReturn
from uuid import UUID, uuid4

from services.libs.tsq_service_libs.error_handling.error_enums import ErrorCode
from services.libs.tsq_service_libs.error_handling.error_models import ErrorDetail
from services.libs.tsq_service_libs.error_handling.tsq_error import TsqError


def create_error_detail(
    error_code: ErrorCode,
    message: str,
    service: str,
    operation: str,
    correlation_id: UUID | None = None,
    details: dict[str, Any] | None = None,
    capture_stack: bool = True,
) -> ErrorDetail:
    """Build an ErrorDetail, generating a correlation ID when none is given."""
    stack_trace = None
    if capture_stack:
        formatted = traceback.format_exc()
        # format_exc() outside an except block yields "NoneType: None"
        if formatted and not formatted.startswith("NoneType: None"):
            stack_trace = formatted

    return ErrorDetail(
        error_code=error_code,
        message=message,
        correlation_id=correlation_id or uuid4(),
        timestamp=datetime.now(timezone.utc),
        service=service,
        operation=operation,
        details=details or {},
        stack_trace=stack_trace,
    )


def _raise(
    error_code: ErrorCode,
    service: str,
    operation: str,
    message: str,
    correlation_id: UUID | None,
    details: dict[str, Any],
) -> NoReturn:
    raise TsqError(
        create_error_detail(
            error_code=error_code,
            message=message,
            service=service,
            operation=operation,
            correlation_id=correlation_id,
            details=details,
        )
    )


def raise_validation_error(
    service: str,
    operation: str,
    field: str,
    message: str,
    correlation_id: UUID | None = None,
    value: Any = None,
    **additional_context: Any,
) -> NoReturn:
    """Raise a VALIDATION_ERROR for a single offending field."""
    details: dict[str, Any] = {"field": field, **additional_context}
    if value is not None:
        details["value"] = value
    _raise(ErrorCode.VALIDATION_ERROR, service, operation, message, correlation_id, details)


def raise_external_service_error(
    service: str,
    operation: str,
    external_service: str,
    message: str,
    correlation_id: UUID | None = None,
    **additional_context: Any,
) -> NoReturn:
    """Raise an EXTERNAL_SERVICE_ERROR naming the failing dependency."""
    _raise(
        ErrorCode.EXTERNAL_SERVICE_ERROR,
        service,
        operation,
        message,
        correlation_id,
        {"external_service": external_service, **additional_context},
    )


def raise_connection_error(
    service: str,
    operation: str,
    target: str,
    message: str,
    correlation_id: UUID | None = None,
    **additional_context: Any,
) -> NoReturn:
    _raise(
        ErrorCode.CONNECTION_ERROR,
        service,
        operation,
        message,
        correlation_id,
        {"target": target, **additional_context},
    )


def raise_processing_error(
    service: str,
    operation: str,
    message: str,
    correlation_id: UUID | None = None,
    **additional_context: Any,
) -> NoReturn:
    _raise(ErrorCode.PROCESSING_ERROR, service, operation, message, correlation_id, additional_context)


def raise_configuration_error(
    service: str,
    operation: str,
    config_key: str,
    message: str,
    correlation_id: UUID | None = None,
    **additional_context: Any,
) -> NoReturn:
    _raise(
        ErrorCode.CONFIGURATION_ERROR,
        service,
        operation,
        message,
        correlation_id,
        {"config_key": config_key, **additional_context},
    )
