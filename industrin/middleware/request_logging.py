# industrin/middleware/request_logging.py
from __future__ import annotations

import logging
import time
import uuid
from typing import Iterable, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("industrin.request")


QUIET_PREFIXES: Tuple[str, ...] = (
    "/api/healthz",
    "/api/readyz",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
)


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One access-log line per request: method, path, status, duration, caller
    role and trace id. Every response carries X-Request-ID.

    Credentials (Authorization header, session cookie, request bodies) are
    never logged.
    """

    def __init__(self, app, quiet_prefixes: Iterable[str] = QUIET_PREFIXES):
        super().__init__(app)
        self.quiet_prefixes = tuple(quiet_prefixes)

    def _is_quiet(self, request: Request) -> bool:
        if request.method.upper() == "OPTIONS":
            return True
        return request.url.path.startswith(self.quiet_prefixes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        trace_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.trace_id = trace_id
        quiet = self._is_quiet(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # the exception handlers build the response; just record the crash
            logger.exception(
                "request CRASH %s %s dur_ms=%s",
                request.method,
                request.url.path,
                int((time.perf_counter() - started) * 1000),
                extra={"trace_id": trace_id},
            )
            raise

        response.headers["X-Request-ID"] = trace_id
        if quiet:
            return response

        logger.log(
            _level_for(response.status_code),
            "request %s %s -> %s dur_ms=%s ip=%s role=%s trace_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            int((time.perf_counter() - started) * 1000),
            client_ip(request),
            getattr(request.state, "principal_role", "anonymous"),
            trace_id,
            extra={"trace_id": trace_id},
        )
        return response
