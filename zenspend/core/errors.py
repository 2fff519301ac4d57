"""Error taxonomy and the JSON error envelope.

Every failure leaves the API as::

    {"success": false, "error": {"code": ..., "message": ..., "details": ...}}

Services raise :class:`ApiError` subclasses; the handlers registered by
:func:`register_exception_handlers` render them. Request validation errors
and framework HTTP errors are folded into the same shape.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"
NOT_FOUND = "NOT_FOUND"
UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ApiError(Exception):
    status_code: int = 500
    code: str = UNKNOWN_ERROR

    def __init__(self, message: str = "An unexpected error occurred", *, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(ApiError):
    status_code = 404
    code = NOT_FOUND


class ValidationFailed(ApiError):
    status_code = 400
    code = VALIDATION_ERROR


def error_body(code: str, message: str, details: Any = None) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = jsonable_encoder(details)
    return {"success": False, "error": error}


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.code, exc.message, exc.details))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Pydantic ctx may carry the raw exception object; keep only serializable parts
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content=error_body(VALIDATION_ERROR, "Invalid request data", details))


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        code = NOT_FOUND
    elif exc.status_code in (400, 422):
        code = VALIDATION_ERROR
    else:
        code = UNKNOWN_ERROR
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body(UNKNOWN_ERROR, "An unexpected error occurred"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)
