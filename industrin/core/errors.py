# industrin/core/errors.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException

log = logging.getLogger("industrin.errors")


# -----------------------------
# Domain errors
# -----------------------------
class DirectoryError(Exception):
    """Base for errors raised by services/CRUD; mapped to an HTTP status."""

    status_code = 500
    error_type = "error"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailed(DirectoryError):
    status_code = 400
    error_type = "validation_error"


class AuthenticationFailed(DirectoryError):
    status_code = 401
    error_type = "authentication_error"


class PermissionDenied(DirectoryError):
    status_code = 403
    error_type = "permission_denied"


class NotFound(DirectoryError):
    status_code = 404
    error_type = "not_found"


class Conflict(DirectoryError):
    status_code = 409
    error_type = "conflict"


# -----------------------------
# Trace / request id helpers
# -----------------------------
def _ensure_trace_id(request: Request) -> str:
    """
    Return a stable trace_id for this request.
    Prefer a value already set on request.state, then common headers,
    and finally generate a new one (and store it on request.state).
    """
    val = getattr(request.state, "trace_id", None)
    if val:
        return str(val)

    for h in ("x-request-id", "x-correlation-id", "x-trace-id"):
        v = request.headers.get(h)
        if v:
            request.state.trace_id = v
            return v

    new_id = uuid.uuid4().hex
    request.state.trace_id = new_id
    return new_id


def _payload(
    *,
    message: str,
    typ: str,
    status: int,
    trace_id: str,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "ok": False,
        "error": {
            "type": typ,
            "message": message,
            "status": status,
            "trace_id": trace_id,
        },
    }
    if details is not None:
        body["error"]["details"] = details
    return body



def _respond(
    request: Request,
    *,
    status: int,
    typ: str,
    message: str,
    reason: str,
    details: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    trace_id = _ensure_trace_id(request)
    out_headers = dict(headers or {})
    out_headers["X-Request-ID"] = trace_id

    level = logging.ERROR if status >= 500 else logging.WARNING
    log.log(
        level,
        "%s %s -> %s | trace_id=%s | %s",
        request.method,
        request.url.path,
        status,
        trace_id,
        reason,
        extra={"trace_id": trace_id},
    )
    return JSONResponse(
        status_code=status,
        headers=out_headers,
        content=_payload(
            message=message,
            typ=typ,
            status=status,
            trace_id=trace_id,
            details=jsonable_encoder(details) if details is not None else None,
        ),
    )


# -----------------------------
# Install / register handlers
# -----------------------------
def register_exception_handlers(app: FastAPI) -> None:
    """Every error leaves as {"ok": false, "error": {...}} with an X-Request-ID header."""

    @app.exception_handler(DirectoryError)
    async def directory_exc_handler(request: Request, exc: DirectoryError):
        return _respond(
            request,
            status=exc.status_code,
            typ=exc.error_type,
            message=exc.message,
            reason=f"{type(exc).__name__}: {exc.message}",
            details=exc.details,
            headers={"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None,
        )

    @app.exception_handler(HTTPException)
    async def http_exc_handler(request: Request, exc: HTTPException):
        # routing 404/405 and any HTTPException raised by dependencies
        return _respond(
            request,
            status=int(exc.status_code),
            typ="http_error",
            message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
            reason=f"HTTPException detail={exc.detail!r}",
            details=exc.detail if isinstance(exc.detail, dict) else None,
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):
        errors = jsonable_encoder(exc.errors())
        return _respond(
            request,
            status=400,
            typ="validation_error",
            message="Invalid request data",
            reason=f"ValidationError errors={errors}",
            details=errors,
        )

    @app.exception_handler(IntegrityError)
    async def integrity_exc_handler(request: Request, exc: IntegrityError):
        # unique keys (slug, email, access token) surfacing from the store
        return _respond(
            request,
            status=409,
            typ="conflict",
            message="Conflicting record already exists.",
            reason=f"IntegrityError {exc.orig}",
        )

    @app.exception_handler(Exception)
    async def unhandled_exc_handler(request: Request, exc: Exception):
        trace_id = _ensure_trace_id(request)
        # traceback stays in the server log
        log.exception(
            "Unhandled exception %s %s -> 500 | trace_id=%s",
            request.method,
            request.url.path,
            trace_id,
        )
        return _respond(
            request,
            status=500,
            typ="internal_error",
            message="Internal server error.",
            reason=type(exc).__name__,
        )
