"""Domain exceptions shared by services and routes, plus the JSON error envelope."""
from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """A required setting (API key, webhook URL...) is not configured."""


class UpstreamServiceError(RuntimeError):
    """A third-party API call failed; the message is the upstream one."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.details = details or message


class UploadTooLargeError(ValueError):
    def __init__(self, size: int, limit: int):
        mb = limit / (1024 * 1024)
        super().__init__(
            f"File is too large ({size} bytes). Max {mb:g}MB, please try a shorter clip."
        )
        self.size = size
        self.limit = limit


class NoSpeechDetectedError(ValueError):
    def __init__(self, message: str = "No speech detected in recording"):
        super().__init__(message)


class MissingCredentialsError(PermissionError):
    pass


class MeetingNotFoundError(KeyError):
    def __init__(self, meeting_id: str):
        super().__init__(f"Meeting {meeting_id} not found")
        self.meeting_id = meeting_id


DOMAIN_ERRORS = (ValueError, MeetingNotFoundError, PermissionError, ConfigurationError, UpstreamServiceError)


class ErrorHTTPException(HTTPException):
    """HTTPException that also carries upstream ``details`` for the response body."""

    def __init__(self, status_code: int, detail: str, details: str | None = None):
        super().__init__(status_code=status_code, detail=detail)
        self.details = details


def to_http_exception(exc: Exception) -> HTTPException:
    if isinstance(exc, UploadTooLargeError):
        return HTTPException(status_code=413, detail=str(exc))
    if isinstance(exc, NoSpeechDetectedError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, MissingCredentialsError):
        return HTTPException(status_code=401, detail=str(exc))
    if isinstance(exc, ConfigurationError):
        return HTTPException(status_code=500, detail=str(exc))
    if isinstance(exc, UpstreamServiceError):
        return ErrorHTTPException(status_code=502, detail=str(exc), details=exc.details)
    if isinstance(exc, MeetingNotFoundError):
        # KeyError wraps its message in quotes
        return HTTPException(status_code=404, detail=exc.args[0])
    if isinstance(exc, ValueError):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc) or "Internal Server Error")


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    content = {"success": False, "error": exc.detail}
    details = getattr(exc, "details", None)
    if details:
        content["details"] = details
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(content, status_code=exc.status_code, headers=exc.headers)


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse({"success": False, "error": "; ".join(messages) or "Invalid request"}, status_code=400)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
