"""
HTTP middleware: request ids and per-request log context.
"""

import time
from typing import Callable, Optional

import structlog
from asgi_correlation_id import CorrelationIdMiddleware, correlation_id
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

# Probes hit this every few seconds
UNLOGGED_PATHS = {"/health"}


def client_ip(request: Request) -> Optional[str]:
    """Caller address, honouring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=correlation_id.get(),
            client_ip=client_ip(request) or "unknown",
        )

        path = request.url.path
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error", method=request.method, path=path)
            raise

        if path not in UNLOGGED_PATHS:
            log = logger.warning if response.status_code >= 500 else logger.info
            log(
                "Request handled",
                method=request.method,
                path=path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        return response


def setup_middleware(app: FastAPI) -> None:
    # Starlette runs the last-added middleware first, so the id exists before context binding
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID", update_request_header=True)
