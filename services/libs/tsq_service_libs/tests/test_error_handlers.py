"""Tests for the Quart error handlers and their JSON error envelope."""

from __future__ import annotations

import pytest
from pydantic import BaseModel
from quart import Quart

from services.libs.tsq_service_libs.correlation_middleware import setup_correlation_middleware
from services.libs.tsq_service_libs.error_handling import (
    ErrorCode,
    raise_connection_error,
    raise_external_service_error,
    raise_validation_error,
)
from services.libs.tsq_service_libs.error_handling.quart import (
    register_error_handlers,
    status_code_for,
)


class _Payload(BaseModel):
    count: int


@pytest.fixture
def app() -> Quart:
    app = Quart(__name__)
    setup_correlation_middleware(app)
    register_error_handlers(app)

    @app.route("/validation")
    async def validation_view():
        raise_validation_error(service="svc", operation="op", field="record", message="bad")

    @app.route("/external")
    async def external_view():
        try:
            raise RuntimeError("socket closed")
        except RuntimeError:
            raise_external_service_error(
                service="svc", operation="op", external_service="redis", message="down"
            )

    @app.route("/connection")
    async def connection_view():
        raise_connection_error(service="svc", operation="op", target="redis", message="refused")

    @app.route("/pydantic")
    async def pydantic_view():
        _Payload.model_validate({"count": "not-a-number"})

    @app.route("/crash")
    async def crash_view():
        raise KeyError("missing")

    return app


@pytest.mark.parametrize(
    ("code", "status"),
    [
        (ErrorCode.VALIDATION_ERROR, 400),
        (ErrorCode.RESOURCE_NOT_FOUND, 404),
        (ErrorCode.METHOD_NOT_ALLOWED, 405),
        (ErrorCode.EXTERNAL_SERVICE_ERROR, 502),
        (ErrorCode.CONNECTION_ERROR, 503),
        (ErrorCode.PROCESSING_ERROR, 500),
        (ErrorCode.UNKNOWN_ERROR, 500),
    ],
)
def test_status_code_mapping(code: ErrorCode, status: int) -> None:
    assert status_code_for(code) == status


class TestErrorHandlers:
    @pytest.mark.asyncio
    async def test_validation_error_is_400(self, app: Quart) -> None:
        response = await app.test_client().get("/validation")

        assert response.status_code == 400
        error = (await response.get_json())["error"]
        assert error["error_code"] == "VALIDATION_ERROR"
        assert error["details"] == {"field": "record"}

    @pytest.mark.asyncio
    async def test_external_error_is_502_without_stack_trace(self, app: Quart) -> None:
        response = await app.test_client().get("/external")

        assert response.status_code == 502
        error = (await response.get_json())["error"]
        assert error["error_code"] == "EXTERNAL_SERVICE_ERROR"
        assert "stack_trace" not in error

    @pytest.mark.asyncio
    async def test_connection_error_is_503(self, app: Quart) -> None:
        response = await app.test_client().get("/connection")

        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_pydantic_error_is_400_with_errors(self, app: Quart) -> None:
        response = await app.test_client().get("/pydantic")

        assert response.status_code == 400
        error = (await response.get_json())["error"]
        assert error["error_code"] == "VALIDATION_ERROR"
        assert error["details"]["errors"][0]["loc"] == ["count"]
        assert "input" not in error["details"]["errors"][0]

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_500(self, app: Quart) -> None:
        response = await app.test_client().get("/crash")

        assert response.status_code == 500
        error = (await response.get_json())["error"]
        assert error["error_code"] == "UNKNOWN_ERROR"
        assert error["details"] == {"exception_type": "KeyError"}
        assert "missing" not in error["message"]

    @pytest.mark.asyncio
    async def test_routing_error_keeps_its_status(self, app: Quart) -> None:
        response = await app.test_client().get("/does-not-exist")

        assert response.status_code == 404
        error = (await response.get_json())["error"]
        assert error["error_code"] == "RESOURCE_NOT_FOUND"
        assert error["details"] == {"http_status": 404}

    @pytest.mark.asyncio
    async def test_method_not_allowed_keeps_allow_header(self, app: Quart) -> None:
        response = await app.test_client().post("/crash")

        assert response.status_code == 405
        assert "GET" in response.headers["Allow"]
        assert response.content_type == "application/json"
        error = (await response.get_json())["error"]
        assert error["error_code"] == "METHOD_NOT_ALLOWED"
        assert error["details"] == {"http_status": 405}

    @pytest.mark.asyncio
    async def test_error_carries_request_correlation_header(self, app: Quart) -> None:
        response = await app.test_client().get(
            "/crash", headers={"X-Correlation-ID": "trace-me"}
        )

        assert response.headers["X-Correlation-ID"] == "trace-me"
