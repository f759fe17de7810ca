"""TSQ routes: browse, update, create and delete a queue via /tsq/<tsq_name>.

PUT and POST read the queue length first and then write. The two calls are
not atomic: concurrent creates against the same absent queue can both
observe length 0 and both write. The backend decides the outcome.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Any, TypeVar

from dishka import FromDishka
from pydantic import ValidationError
from quart import Blueprint, Response, jsonify, request
from quart_dishka import inject

from services.libs.tsq_service_libs.error_handling import (
    CorrelationContext,
    TsqError,
    raise_processing_error,
    raise_validation_error,
)
from services.libs.tsq_service_libs.logging_utils import create_service_logger
from services.tsq_service.api_models import (
    TsqBrowseResponse,
    TsqResultResponse,
    TsqWriteRequest,
)
from services.tsq_service.config import Settings
from services.tsq_service.observability_enums import OperationStatus, TsqOperation
from services.tsq_service.protocols import QueueClientProtocol, TsqMetricsProtocol

logger = create_service_logger("tsq.api.tsq")
tsq_bp = Blueprint("tsq_routes", __name__, url_prefix="/tsq")

SERVICE = "tsq_service"

T = TypeVar("T")


def queue_missing_message(tsq_name: str) -> str:
    return (
        f"You are trying to write to an existing queue but TSQ {tsq_name} does not exist. "
        "Try creating a TSQ using a POST method instead."
    )


def queue_exists_message(tsq_name: str) -> str:
    return (
        f"You are trying to create a TSQ but {tsq_name} already exists, "
        "try using a PUT method to write to an existing TSQ"
    )


async def _parse_write_request(
    tsq_name: str,
    operation: TsqOperation,
    corr: CorrelationContext,
    metrics: TsqMetricsProtocol,
) -> TsqWriteRequest:
    """Parse and validate the PUT/POST body against the path queue name."""
    if not request.is_json:
        metrics.record_operation(operation, OperationStatus.FAILED)
        raise_validation_error(
            service=SERVICE,
            operation=operation.value,
            field="content_type",
            message="Request body must be sent with Content-Type: application/json",
            correlation_id=corr.uuid,
            value=request.mimetype or None,
        )

    body: Any = await request.get_json(silent=True)
    if not isinstance(body, dict):
        metrics.record_operation(operation, OperationStatus.FAILED)
        raise_validation_error(
            service=SERVICE,
            operation=operation.value,
            field="request_body",
            message="Request body must be a JSON object with a 'record' field",
            correlation_id=corr.uuid,
        )

    try:
        write_request = TsqWriteRequest.model_validate(body)
    except ValidationError as e:
        metrics.record_operation(operation, OperationStatus.FAILED)
        raise_validation_error(
            service=SERVICE,
            operation=operation.value,
            field="request_body",
            message=f"Invalid request body: {e.error_count()} validation error(s)",
            correlation_id=corr.uuid,
            errors=e.errors(include_url=False, include_context=False, include_input=False),
        )

    if write_request.tsq_name is not None and write_request.tsq_name != tsq_name:
        metrics.record_operation(operation, OperationStatus.FAILED)
        raise_validation_error(
            service=SERVICE,
            operation=operation.value,
            field="tsqName",
            message=f"Body tsqName does not match the queue name in the path ({tsq_name})",
            correlation_id=corr.uuid,
            value=write_request.tsq_name,
        )

    return write_request


async def _call_backend(
    operation: TsqOperation,
    corr: CorrelationContext,
    metrics: TsqMetricsProtocol,
    call: Awaitable[T],
) -> T:
    """Await one backend call, recording an error metric when it fails."""
    try:
        return await call
    except TsqError:
        metrics.record_operation(operation, OperationStatus.ERROR)
        raise
    except Exception as e:
        metrics.record_operation(operation, OperationStatus.ERROR)
        logger.error(
            f"Unexpected queue backend failure during {operation.value}: {e}",
            exc_info=True,
        )
        raise_processing_error(
            service=SERVICE,
            operation=operation.value,
            message=f"Queue backend call failed: {e}",
            correlation_id=corr.uuid,
        )


def _result_response(
    tsq_name: str, result: str, status_code: int = 200
) -> tuple[Response, int]:
    body = TsqResultResponse(tsq_name=tsq_name, result=result)
    return jsonify(body.model_dump(by_alias=True)), status_code


@tsq_bp.route("/<string:tsq_name>", methods=["GET"])
@inject
async def browse_tsq(
    tsq_name: str,
    queue_client: FromDishka[QueueClientProtocol],
    metrics: FromDishka[TsqMetricsProtocol],
    corr: FromDishka[CorrelationContext],
) -> tuple[Response, int]:
    """Return all records of the queue in backend order."""
    records = await _call_backend(
        TsqOperation.BROWSE, corr, metrics, queue_client.browse(tsq_name)
    )

    logger.info(f"Browsed TSQ {tsq_name}: {len(records)} record(s)")
    metrics.record_operation(TsqOperation.BROWSE, OperationStatus.SUCCESS)
    body = TsqBrowseResponse.from_records(tsq_name, records)
    return jsonify(body.model_dump(by_alias=True)), 200


@tsq_bp.route("/<string:tsq_name>", methods=["PUT"])
@inject
async def update_tsq(
    tsq_name: str,
    queue_client: FromDishka[QueueClientProtocol],
    metrics: FromDishka[TsqMetricsProtocol],
    settings: FromDishka[Settings],
    corr: FromDishka[CorrelationContext],
) -> tuple[Response, int]:
    """Append a record to an existing, non-empty queue."""
    write_request = await _parse_write_request(tsq_name, TsqOperation.UPDATE, corr, metrics)

    items = await _call_backend(TsqOperation.UPDATE, corr, metrics, queue_client.info(tsq_name))
    if items <= 0:
        # An existing queue with zero items is treated as absent
        logger.info(f"Update refused, TSQ {tsq_name} does not exist")
        metrics.record_operation(TsqOperation.UPDATE, OperationStatus.REJECTED)
        status_code = 404 if settings.STRICT_STATUS_CODES else 200
        return _result_response(tsq_name, queue_missing_message(tsq_name), status_code)

    result = await _call_backend(
        TsqOperation.UPDATE,
        corr,
        metrics,
        queue_client.write(tsq_name, write_request.record),
    )
    logger.info(f"Updated TSQ {tsq_name} ({items} item(s) before write)")
    metrics.record_operation(TsqOperation.UPDATE, OperationStatus.SUCCESS)
    return _result_response(tsq_name, result)


@tsq_bp.route("/<string:tsq_name>", methods=["POST"])
@inject
async def create_tsq(
    tsq_name: str,
    queue_client: FromDishka[QueueClientProtocol],
    metrics: FromDishka[TsqMetricsProtocol],
    settings: FromDishka[Settings],
    corr: FromDishka[CorrelationContext],
) -> tuple[Response, int]:
    """Write the first record of a new (absent or empty) queue."""
    write_request = await _parse_write_request(tsq_name, TsqOperation.CREATE, corr, metrics)

    items = await _call_backend(TsqOperation.CREATE, corr, metrics, queue_client.info(tsq_name))
    if items > 0:
        logger.info(f"Create refused, TSQ {tsq_name} already holds {items} item(s)")
        metrics.record_operation(TsqOperation.CREATE, OperationStatus.REJECTED)
        status_code = 409 if settings.STRICT_STATUS_CODES else 200
        return _result_response(tsq_name, queue_exists_message(tsq_name), status_code)

    result = await _call_backend(
        TsqOperation.CREATE,
        corr,
        metrics,
        queue_client.write(tsq_name, write_request.record),
    )
    logger.info(f"Created TSQ {tsq_name}")
    metrics.record_operation(TsqOperation.CREATE, OperationStatus.SUCCESS)
    status_code = 201 if settings.STRICT_STATUS_CODES else 200
    return _result_response(tsq_name, result, status_code)


@tsq_bp.route("/<string:tsq_name>", methods=["DELETE"])
@inject
async def delete_tsq(
    tsq_name: str,
    queue_client: FromDishka[QueueClientProtocol],
    metrics: FromDishka[TsqMetricsProtocol],
    corr: FromDishka[CorrelationContext],
) -> tuple[Response, int]:
    """Delete the queue unconditionally and relay the backend outcome."""
    result = await _call_backend(
        TsqOperation.DELETE, corr, metrics, queue_client.delete(tsq_name)
    )
    logger.info(f"Delete requested for TSQ {tsq_name}: {result}")
    metrics.record_operation(TsqOperation.DELETE, OperationStatus.SUCCESS)
    return _result_response(tsq_name, result)
