"""Error handling utilities for the TSQ service."""

from services.libs.tsq_service_libs.error_handling.correlation import (
    CorrelationContext,
    extract_correlation_context_from_request,
)
from services.libs.tsq_service_libs.error_handling.error_enums import ErrorCode
from services.libs.tsq_service_libs.error_handling.error_models import ErrorDetail
from services.libs.tsq_service_libs.error_handling.factories import (
    create_error_detail,
    raise_configuration_error,
    raise_connection_error,
    raise_external_service_error,
    raise_processing_error,
    raise_validation_error,
)
from services.libs.tsq_service_libs.error_handling.tsq_error import TsqError

__all__ = [
    "CorrelationContext",
    "ErrorCode",
    "ErrorDetail",
    "TsqError",
    "create_error_detail",
    "extract_correlation_context_from_request",
    "raise_configuration_error",
    "raise_connection_error",
    "raise_external_service_error",
    "raise_processing_error",
    "raise_validation_error",
]
