# tests/test_error_handlers.py
import json

import pytest
from starlette.requests import Request

from lucent_shop.core.exceptions import AuthenticationError, InsufficientStock, ProductNotFound
from lucent_shop.main import api_error_handler, unhandled_exception_handler


def _request() -> Request:
    return Request({
        "type": "http",
        "method": "POST",
        "path": "/api/v1/orders",
        "headers": [],
        "query_string": b"",
        "server": ("test", 80),
        "scheme": "http",
        "client": ("127.0.0.1", 5000),
    })


@pytest.mark.asyncio
async def test_api_error_envelope():
    response = await api_error_handler(_request(), InsufficientStock("재고가 부족합니다: 아크릴 스탠드"))

    assert response.status_code == 409
    assert json.loads(response.body) == {
        "status": "error",
        "message": "재고가 부족합니다: 아크릴 스탠드",
        "error_code": "INSUFFICIENT_STOCK",
    }


@pytest.mark.asyncio
async def test_authentication_error_sets_header():
    response = await api_error_handler(_request(), AuthenticationError())

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_unhandled_exception_is_logged(mocker):
    critical = mocker.patch("lucent_shop.main.logger.critical")

    response = await unhandled_exception_handler(_request(), RuntimeError("boom"))

    assert response.status_code == 500
    assert json.loads(response.body)["error_code"] == "INTERNAL_ERROR"
    critical.assert_called_once()


def test_error_subclass_defaults():
    err = ProductNotFound()
    assert err.status_code == 404
    assert err.error_code == "PRODUCT_NOT_FOUND"
    assert err.message == "상품을 찾을 수 없습니다."
