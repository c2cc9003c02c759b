"""Exception handlers — every error leaves the API as ``{"error": "..."}``."""

from __future__ import annotations

import logging

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from inbox_zero.errors import InboxZeroError

logger = logging.getLogger(__name__)


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg', 'invalid')}" if location else err.get("msg", ""))
    return "; ".join(parts)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _format_validation_errors(exc)
    logger.warning("Invalid request to %s: %s", request.url.path, message)
    return error_response(f"Invalid request: {message}", 400)


async def inbox_zero_exception_handler(request: Request, exc: InboxZeroError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%d): %s", request.method, request.url.path, exc.status_code, exc.message)
    return error_response(exc.message, exc.status_code)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log with traceback, report to Sentry, answer 500."""
    logger.exception("Unhandled exception in %s %s", request.method, request.url.path)
    sentry_sdk.capture_exception(exc)
    return error_response("Internal server error", 500)


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(InboxZeroError, inbox_zero_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
