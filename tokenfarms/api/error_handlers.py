# This file defines the API error payloads and exception handlers.
# It exists so client mistakes and infrastructure failures are reported in two distinct, stable shapes.
# Validation failures list every failing body field; server failures return an opaque plain-text body.
# Centralized error handling prevents stack traces and store details from leaking to callers.

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

LOGGER = logging.getLogger("api")

SERVER_ERROR_MESSAGE = "Server error"

IDENTIFIER_LABELS: dict[str, tuple[str, str]] = {
    "farm_name": ("farm_name", "farm_name"),
    "creator": ("creator", "Creator"),
    "original_creator": ("original creator", "Original creator"),
    "staker": ("staker", "Staker"),
}

PAGINATION_MESSAGES: dict[str, str] = {
    "page": "Page must be a positive integer",
    "limit": "Limit must be a positive integer and max 100",
    "sort": "Invalid sort method",
}

_LENGTH_ERROR_TYPES = {"string_too_short", "string_too_long"}


class APIError(Exception):
    """Domain error type with structured API details."""

    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(message)


def _field_message(field_name: str, error: dict[str, Any]) -> str:
    if field_name in PAGINATION_MESSAGES:
        return PAGINATION_MESSAGES[field_name]

    labels = IDENTIFIER_LABELS.get(field_name)
    if labels is None:
        return str(error.get("msg", "Invalid value"))

    label, capitalized_label = labels
    error_type = error.get("type")
    if error_type == "missing":
        return f"{label} is required"
    if error_type in _LENGTH_ERROR_TYPES:
        return f"{capitalized_label} length must be between 1 and 12 characters"
    return f"Invalid {label} format: only a-z, 1-5, and . are allowed"


def field_error(path: str, msg: str, value: Any) -> dict[str, Any]:
    """One field-level entry of a 400 `errors` list."""

    return {"type": "field", "value": value, "msg": msg, "path": path, "location": "body"}


def format_validation_errors(errors: Sequence[Any]) -> list[dict[str, Any]]:
    """Translate pydantic errors into one entry per failing body field."""

    formatted: list[dict[str, Any]] = []
    for error in errors:
        loc = [part for part in error.get("loc", ()) if part != "body"]
        path = ".".join(str(part) for part in loc)
        entry: dict[str, Any] = {
            "type": "field",
            "msg": _field_message(path, error),
            "path": path,
            "location": "body",
        }
        if error.get("type") != "missing":
            entry["value"] = error.get("input")
        formatted.append(entry)
    return formatted


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> PlainTextResponse | JSONResponse:
        if exc.status_code >= 500:
            return PlainTextResponse(SERVER_ERROR_MESSAGE, status_code=exc.status_code)
        errors = exc.details or [{"type": exc.error_code, "msg": exc.message}]
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder({"errors": errors}),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=jsonable_encoder({"errors": format_validation_errors(exc.errors())}),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"errors": [{"type": "http", "msg": str(exc.detail)}]},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
        LOGGER.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return PlainTextResponse(SERVER_ERROR_MESSAGE, status_code=500)
