"""
Unit tests for error conversion and the error envelope
"""
import json

import pytest
from bson.errors import InvalidId
from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from shop_api.core.errors import ApiError, convert_error, error_response, not_found, reason_phrase


class TestConvertError:

    def test_api_error_passes_through(self):
        error = ApiError(409, "Order already paid")

        assert convert_error(error) is error

    def test_http_exception(self):
        converted = convert_error(HTTPException(status_code=403, detail="Forbidden here", headers={"X-A": "1"}))

        assert converted.status_code == 403
        assert converted.internal_message == "Forbidden here"
        assert converted.external_message == "Forbidden here"
        assert converted.is_operational
        assert converted.headers == {"X-A": "1"}

    def test_validation_error(self):
        exc = RequestValidationError([
            {"loc": ("body", "email"), "msg": "Field required", "type": "missing"},
            {"loc": ("query", "limit"), "msg": "Input should be a valid integer", "type": "int_parsing"},
        ])

        converted = convert_error(exc)

        assert converted.status_code == 400
        assert converted.internal_message == "email: Field required; query.limit: Input should be a valid integer"

    def test_invalid_object_id(self):
        converted = convert_error(InvalidId("'abc' is not a valid ObjectId"))

        assert converted.status_code == 400
        assert converted.is_operational

    def test_duplicate_key(self):
        converted = convert_error(DuplicateKeyError("E11000 duplicate key error"))

        assert converted.status_code == 400

    def test_database_unavailable(self):
        converted = convert_error(ServerSelectionTimeoutError("no servers"))

        assert converted.status_code == 500
        assert not converted.is_operational
        assert converted.external_message == "Internal Server Error"

    def test_unexpected_error(self):
        converted = convert_error(ValueError("boom"))

        assert converted.status_code == 500
        assert converted.internal_message == "boom"
        assert not converted.is_operational

    def test_unexpected_error_without_message(self):
        converted = convert_error(RuntimeError())

        assert converted.internal_message == "Internal Server Error"


class TestErrorResponse:

    def _body(self, response):
        return json.loads(response.body)

    def test_envelope(self):
        response = error_response(ApiError(422, "Stock too low", "Sản phẩm đã hết hàng"))

        assert response.status_code == 422
        assert self._body(response) == {
            "status": 422,
            "internalMessage": "Stock too low",
            "externalMessage": "Sản phẩm đã hết hàng",
            "success": False,
        }

    def test_not_found(self):
        response = error_response(not_found())

        assert self._body(response)["internalMessage"] == "Route not found"
        assert response.status_code == 404

    def test_stack_in_development(self):
        try:
            raise ValueError("broken")
        except ValueError as exc:
            response = error_response(convert_error(exc), exc)

        body = self._body(response)
        assert "ValueError: broken" in body["stack"]

    def test_operational_messages_kept_in_production(self, production):
        response = error_response(ApiError(400, "Coupon expired"))

        assert self._body(response)["internalMessage"] == "Coupon expired"

    def test_non_operational_hidden_in_production(self, production):
        exc = KeyError("secret internals")

        body = self._body(error_response(convert_error(exc), exc))

        assert body == {
            "status": 500,
            "internalMessage": "Internal Server Error",
            "externalMessage": "Internal Server Error",
            "success": False,
        }

    def test_headers_are_kept(self):
        response = error_response(ApiError(401, "Authentication required", headers={"WWW-Authenticate": "Bearer"}))

        assert response.headers["www-authenticate"] == "Bearer"

    def test_server_errors_are_logged(self, caplog):
        exc = RuntimeError("disk full")

        with caplog.at_level("ERROR", logger="shop_api.core.errors"):
            error_response(convert_error(exc), exc)

        assert "500 disk full" in caplog.text


@pytest.mark.parametrize("code,phrase", [(400, "Bad Request"), (404, "Not Found"), (599, "Error")])
def test_reason_phrase(code, phrase):
    assert reason_phrase(code) == phrase
