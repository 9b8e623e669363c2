"""
Error taxonomy and FastAPI exception handlers.

Every failure the API reports is an ``HTTPException`` whose ``detail`` is a
``{"error": <category>, "message": <human readable text>}`` dict. Core
functions raise the subclasses below; the handlers registered by
:func:`register_exception_handlers` render them (and Starlette's own
HTTP errors, validation errors and unexpected exceptions) in that shape.

Unexpected exceptions are logged with their traceback and reported with a
generic message. The traceback text is only attached outside production.
"""

import logging
import traceback

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from boxcloud.database.config.config import settings

logger = logging.getLogger(__name__)


class BoxCloudError(HTTPException):
    """Base class of API errors; carries an error category and a message."""

    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str, error: str | None = None, headers: dict | None = None):
        self.message = message
        super().__init__(
            status_code=self.status_code,
            detail={"error": error or self.error, "message": message},
            headers=headers,
        )


class InvalidInput(BoxCloudError):
    status_code = 400
    error = "Invalid input"


class InvalidFileType(InvalidInput):
    error = "Invalid file type"


class Unauthorized(BoxCloudError):
    status_code = 401
    error = "Access denied"


class Forbidden(BoxCloudError):
    status_code = 403
    error = "Access denied"


class NotFound(BoxCloudError):
    status_code = 404
    error = "Not Found"


class Conflict(BoxCloudError):
    status_code = 409
    error = "Conflict"


class PayloadTooLarge(BoxCloudError):
    status_code = 413
    error = "File too large"


class TooManyRequests(BoxCloudError):
    status_code = 429
    error = "Too many requests"


class InternalError(BoxCloudError):
    status_code = 500
    error = "Internal Server Error"


def error_body(status_code: int, detail) -> dict:
    """Normalize an exception detail into the `{error, message}` shape."""
    if isinstance(detail, dict) and "error" in detail:
        return {"error": detail["error"], "message": detail.get("message", "")}
    text = detail if isinstance(detail, str) else "Request failed"
    return {"error": text, "message": text}


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        # Starlette's router miss, not one of ours.
        body = {"error": "Not Found", "message": f"Route {request.url.path} not found"}
    else:
        body = error_body(exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid input", "message": "; ".join(problems) or "Invalid request"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"{type(exc).__name__} on {request.method} {request.url.path} (500): {exc}",
        exc_info=exc,
    )
    body = {"error": "Internal Server Error", "message": "An unexpected error occurred"}
    if not settings.is_production:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to `app`."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
