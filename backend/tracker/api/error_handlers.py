"""Error Handlers — the single boundary where failures become {"message"} responses.

Invariants:
    - TrackerError → its own http_status and to_response() envelope
    - RequestValidationError → InvalidInputError (400 unparsable JSON, 415 non-JSON
      content type, 422 wrong shape)
    - SQLAlchemyError escaping a store call → StoreFailureError (500, store text)
    - OSError → IOFailureError (500, generic message, cause logged only)
    - Routing errors (404, 405) keep their status and use the same envelope
    - Every failure logged exactly once, at error level, with the request id

Design Decisions:
    - Every handler funnels through error_response(): one log line, one envelope
    - Decoder messages kept close to the decoder's wording so clients can fix input
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from tracker.core.errors import (
    InvalidInputError, IOFailureError, StoreFailureError, TrackerError,
)
from tracker.infrastructure.store import store_error_message

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE_MESSAGE = "Expected request with `Content-Type: application/json`"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_tracker_error_handler(app)
    _register_validation_error_handler(app)
    _register_store_error_handler(app)
    _register_io_error_handler(app)
    _register_http_error_handler(app)


def error_response(request: Request, exc: TrackerError) -> JSONResponse:
    """Log the failure once and build its wire response."""
    logger.error(
        f"{exc.log_label} -> {exc.detail}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "request_id": getattr(request.state, "request_id", None),
        },
    )
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(),
    )


def _register_tracker_error_handler(app: FastAPI) -> None:

    @app.exception_handler(TrackerError)
    async def tracker_error_handler(request: Request, exc: TrackerError):
        return error_response(request, exc)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Body failed to decode against the record shape."""
        content_type = request.headers.get("content-type")
        return error_response(
            request, invalid_input_from_validation(exc, content_type),
        )


def _register_store_error_handler(app: FastAPI) -> None:

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        """Store errors raised outside RecordStore (which translates its own)."""
        return error_response(
            request,
            StoreFailureError(store_error_message(exc), "unknown", cause=exc),
        )


def _register_io_error_handler(app: FastAPI) -> None:

    @app.exception_handler(OSError)
    async def io_error_handler(request: Request, exc: OSError):
        return error_response(request, IOFailureError("request", cause=exc))


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Routing errors (404, 405) in the same envelope as everything else."""
        logger.warning(
            f"HTTP {exc.status_code} on {request.method} {request.url.path}",
            extra={"request_id": getattr(request.state, "request_id", None)},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


def invalid_input_from_validation(
    exc: RequestValidationError, content_type: str | None = None,
) -> InvalidInputError:
    """Map FastAPI's decoder errors to one InvalidInputError.

    A body sent with a non-JSON content type is never decoded, so its errors
    are reported as 415 rather than as a shape mismatch.
    """
    errors = exc.errors()
    if content_type and not is_json_content_type(content_type) and any(
        tuple(error["loc"][:1]) == ("body",) for error in errors
    ):
        return InvalidInputError(JSON_CONTENT_TYPE_MESSAGE, 415)
    for error in errors:
        if error["type"] == "json_invalid":
            reason = (error.get("ctx") or {}).get("error", error["msg"])
            loc = error["loc"]
            where = f" at position {loc[1]}" if len(loc) > 1 else ""
            return InvalidInputError(
                f"Failed to parse the request body as JSON: {reason}{where}",
                400,
            )
    details = "; ".join(
        f"{_field_path(error['loc'])}: {error['msg']}" for error in errors
    )
    return InvalidInputError(
        f"Failed to deserialize the JSON body into the target type: {details}",
        422,
    )


def _field_path(loc: tuple) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] == "body":
        parts = parts[1:]
    return ".".join(parts) or "body"


def is_json_content_type(value: str) -> bool:
    """application/json or any application/*+json, parameters ignored."""
    mime = value.split(";", 1)[0].strip().lower()
    maintype, _, subtype = mime.partition("/")
    return maintype == "application" and (subtype == "json" or subtype.endswith("+json"))
