"""
Error conversion and handling

Every error leaving the API is rendered with the same envelope:

    {
        "status": 404,
        "internalMessage": "Route not found",
        "externalMessage": "Route not found",
        "success": false
    }

internalMessage is meant for developers and logs, externalMessage can be
shown to the end user. Handlers raise ApiError (or HTTPException); anything
else is converted here.
"""
import logging
import traceback
from http import HTTPStatus
from typing import Dict, Optional

import sentry_sdk
from bson.errors import InvalidId
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError, WriteError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND = "Route not found"


class ApiError(Exception):
    """Error with an HTTP status, safe to render to the client"""

    def __init__(
        self,
        status_code: int,
        internal_message: str,
        external_message: Optional[str] = None,
        is_operational: bool = True,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(internal_message)
        self.status_code = status_code
        self.internal_message = internal_message
        self.external_message = external_message if external_message is not None else internal_message
        self.is_operational = is_operational
        self.headers = headers


def reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def convert_error(exc: Exception) -> ApiError:
    """Turn any exception into an ApiError"""
    if isinstance(exc, ApiError):
        return exc

    if isinstance(exc, StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return ApiError(exc.status_code, message, headers=getattr(exc, "headers", None))

    if isinstance(exc, RequestValidationError):
        return ApiError(status.HTTP_400_BAD_REQUEST, _validation_message(exc))

    # Bad ids and rejected writes are caused by the request, not by us
    if isinstance(exc, (InvalidId, WriteError)):
        return ApiError(status.HTTP_400_BAD_REQUEST, str(exc))

    if isinstance(exc, PyMongoError):
        return ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            f"Database error: {exc}",
            reason_phrase(500),
            is_operational=False,
        )

    message = str(exc) or reason_phrase(500)
    return ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, message, is_operational=False)


def error_body(error: ApiError) -> dict:
    return {
        "status": error.status_code,
        "internalMessage": error.internal_message,
        "externalMessage": error.external_message,
        "success": False,
    }


def error_response(error: ApiError, exc: Optional[Exception] = None) -> JSONResponse:
    """Render an ApiError; hides non-operational details in production"""
    if error.status_code >= 500:
        logger.error(
            f"{error.status_code} {error.internal_message}",
            exc_info=(type(exc), exc, exc.__traceback__) if exc is not None else None,
        )
        if exc is not None:
            sentry_sdk.capture_exception(exc)

    if settings.is_production and not error.is_operational:
        phrase = reason_phrase(error.status_code)
        error = ApiError(error.status_code, phrase, phrase, is_operational=False, headers=error.headers)

    body = error_body(error)

    if not settings.is_production and exc is not None and error.status_code >= 500:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    return JSONResponse(status_code=error.status_code, content=body, headers=error.headers)


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    return error_response(convert_error(exc), exc)


def not_found() -> ApiError:
    return ApiError(status.HTTP_404_NOT_FOUND, ROUTE_NOT_FOUND, ROUTE_NOT_FOUND)


def register_error_handlers(app: FastAPI) -> None:
    """Install the conversion pipeline on the app"""
    for exc_class in (ApiError, StarletteHTTPException, RequestValidationError, InvalidId, PyMongoError, Exception):
        app.add_exception_handler(exc_class, handle_error)
