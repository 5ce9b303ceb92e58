"""
Error Handling for Menuboard
============================

Services raise ``ApiError`` for expected failures (not found, conflicts,
rule violations). Route handlers let these propagate; the handlers registered
by ``register_exception_handlers`` turn every failure into a JSON body of the
form ``{"message": "..."}``.

Status Mapping:
---------------
- ApiError: its own status code
- HTTPException: its status code (headers such as WWW-Authenticate are kept)
- RequestValidationError: 400 with a per-field ``errors`` list
- IntegrityError: 409 (unique/foreign key violations the services did not pre-check)
- DataError: 400 (value rejected by the database, e.g. too long for its column)
- anything else: 500, logged with traceback
"""

import logging
from typing import Any, Dict, List, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DataError, IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """An error with an HTTP status and a client-facing message."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"ApiError({self.message!r}, {self.status_code})"


def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic error dicts to ``{path, code, message}`` entries."""
    formatted = []
    for err in errors:
        loc = list(err.get("loc", ()))
        # FastAPI prefixes the request part; clients only care about the field path
        if loc and loc[0] in ("body", "query", "path", "form"):
            loc = loc[1:]
        formatted.append({
            "path": ".".join(str(part) for part in loc),
            "code": err.get("type", "invalid"),
            "message": err.get("msg", "Invalid value"),
        })
    return formatted


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = format_validation_errors(exc.errors())
    logger.debug("Validation failed for %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid data", "errors": errors},
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=409,
        content={"message": "Resource conflicts with existing data"},
    )


async def data_error_handler(request: Request, exc: DataError) -> JSONResponse:
    logger.warning("Data error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=400, content={"message": "Invalid data for storage"})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all handlers to the application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(DataError, data_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
