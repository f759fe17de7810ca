"""
Quart integration for structured error handling.

Registers error handlers that turn TsqError (and stray exceptions) into the
standard JSON error envelope: ``{"error": {...ErrorDetail...}}``.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError
from quart import Quart, Response, g, jsonify
from werkzeug.exceptions import HTTPException

from services.libs.tsq_service_libs.error_handling.correlation import (
    CORRELATION_HEADER,
    CorrelationContext,
)
from services.libs.tsq_service_libs.error_handling.error_enums import ErrorCode
from services.libs.tsq_service_libs.error_handling.factories import create_error_detail
from services.libs.tsq_service_libs.error_handling.tsq_error import TsqError
from services.libs.tsq_service_libs.logging_utils import create_service_logger

logger = create_service_logger("tsq.error_handlers")

ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.RESOURCE_NOT_FOUND: 404,
    ErrorCode.METHOD_NOT_ALLOWED: 405,
    ErrorCode.EXTERNAL_SERVICE_ERROR: 502,
    ErrorCode.CONNECTION_ERROR: 503,
    ErrorCode.CONFIGURATION_ERROR: 500,
    ErrorCode.PROCESSING_ERROR: 500,
    ErrorCode.UNKNOWN_ERROR: 500,
}


def status_code_for(error_code: ErrorCode) -> int:
    return ERROR_CODE_TO_STATUS.get(error_code, 500)


def _error_code_for_http_status(status_code: int) -> ErrorCode:
    if status_code == 404:
        return ErrorCode.RESOURCE_NOT_FOUND
    if status_code == 405:
        return ErrorCode.METHOD_NOT_ALLOWED
    if 400 <= status_code < 500:
        return ErrorCode.VALIDATION_ERROR
    return ErrorCode.UNKNOWN_ERROR


def _error_response(
    payload: dict[str, Any],
    status_code: int,
    headers: list[tuple[str, str]] | None = None,
) -> tuple[Response, int]:
    response = jsonify({"error": payload})
    for name, value in headers or []:
        response.headers[name] = value
    corr = getattr(g, "correlation_context", None)
    if isinstance(corr, CorrelationContext):
        response.headers[CORRELATION_HEADER] = corr.original
    return response, status_code


def register_error_handlers(app: Quart) -> None:
    """Register TsqError, Pydantic and catch-all handlers on the app."""

    @app.errorhandler(TsqError)
    async def handle_tsq_error(error: TsqError) -> tuple[Response, int]:
        status_code = status_code_for(error.error_detail.error_code)
        log = logger.error if status_code >= 500 else logger.warning
        log(
            f"{error.operation} failed: {error.error_detail.message}",
            error_code=error.error_code,
            correlation_id=error.correlation_id,
            status_code=status_code,
        )
        return _error_response(error.to_dict(), status_code)

    @app.errorhandler(ValidationError)
    async def handle_pydantic_validation_error(error: ValidationError) -> tuple[Response, int]:
        corr = getattr(g, "correlation_context", None)
        detail = create_error_detail(
            error_code=ErrorCode.VALIDATION_ERROR,
            message="Request validation failed",
            service="tsq_service",
            operation="request_validation",
            correlation_id=corr.uuid if isinstance(corr, CorrelationContext) else None,
            details={
                "errors": error.errors(
                    include_url=False, include_context=False, include_input=False
                )
            },
            capture_stack=False,
        )
        logger.warning(f"Pydantic validation failed: {error.error_count()} error(s)")
        return _error_response(detail.model_dump(mode="json", exclude={"stack_trace"}), 400)

    @app.errorhandler(Exception)
    async def handle_unexpected_error(error: Exception) -> tuple[Response, int]:
        corr = getattr(g, "correlation_context", None)
        correlation_id = corr.uuid if isinstance(corr, CorrelationContext) else None

        # Routing errors (404/405) and explicit aborts keep their own status
        if isinstance(error, HTTPException):
            status_code = error.code or 500
            detail = create_error_detail(
                error_code=_error_code_for_http_status(status_code),
                message=error.description or error.name,
                service="tsq_service",
                operation="http_routing",
                correlation_id=correlation_id,
                details={"http_status": status_code},
                capture_stack=False,
            )
            # Keep protocol headers such as Allow on 405; the body is JSON
            headers = [
                (name, value)
                for name, value in error.get_headers()
                if name.lower() != "content-type"
            ]
            return _error_response(
                detail.model_dump(mode="json", exclude={"stack_trace"}), status_code, headers
            )

        detail = create_error_detail(
            error_code=ErrorCode.UNKNOWN_ERROR,
            message="An unexpected error occurred",
            service="tsq_service",
            operation="unhandled_exception",
            correlation_id=correlation_id,
            details={"exception_type": type(error).__name__},
        )
        logger.error(f"Unhandled exception: {error}", exc_info=True)
        return _error_response(detail.model_dump(mode="json", exclude={"stack_trace"}), 500)
