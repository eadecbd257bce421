"""API error types and the handlers that render them as JSON envelopes."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from research_hub.config import get_settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that map onto an `{error, details}` response."""

    status_code = 500

    def __init__(self, error: str, details: str | None = None):
        super().__init__(error)
        self.error = error
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(ApiError):
    status_code = 400


class AuthenticationError(ApiError):
    status_code = 401


class AccountDisabledError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    status_code = 409


class ServiceUnavailableError(ApiError):
    status_code = 503


def database_unavailable() -> ServiceUnavailableError:
    return ServiceUnavailableError("Database not available", "Database connection is not configured")


def _field_name(loc) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "body"


async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    missing = [_field_name(e["loc"]) for e in errors if e.get("type") == "missing"]
    if missing:
        body = {"error": "Missing required fields", "details": f"Required: {', '.join(missing)}"}
    else:
        first = errors[0] if errors else {"loc": (), "msg": "Invalid request"}
        body = {"error": "Invalid request", "details": f"{_field_name(first['loc'])}: {first['msg']}"}
    return JSONResponse(status_code=400, content=body)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        message = "Method not allowed"
    elif exc.status_code == 404:
        message = "Not found"
    else:
        message = str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Unique constraint violation on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"error": "Already exists", "details": "Resource already exists"})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    body = {"error": "Internal server error"}
    if get_settings().debug:
        body["details"] = str(exc)
    return JSONResponse(status_code=500, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def require_fields(**fields) -> None:
    """Reject blank string values the way missing fields are rejected."""
    missing = [name for name, value in fields.items() if value is None or (isinstance(value, str) and not value.strip())]
    if missing:
        raise ValidationError("Missing required fields", f"Required: {', '.join(missing)}")
