"""
Request Logging Middleware

- Assigns a unique request_id to every request
- Sets the acting account from the headers of the authentication layer
- Logs request start & end with timing
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from hostpanel.logging_config import (
    generate_request_id,
    request_id_ctx,
    account_id_ctx,
)

logger = logging.getLogger("hostpanel.request")


def _account_context(request: Request) -> str:
    acting = request.headers.get("x-account-id", "-")
    effective = request.headers.get("x-effective-account-id")
    if effective and effective != acting:
        return f"{acting}>{effective}"
    return acting


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        rid = request.headers.get("x-request-id") or generate_request_id()
        request_id_ctx.set(rid)
        account_id_ctx.set(_account_context(request))

        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "-"

        logger.info("→ %s %s from %s", method, path, client_ip)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed = (time.perf_counter() - start) * 1000
            logger.exception("✗ %s %s (%.1fms, unhandled exception)", method, path, elapsed)
            raise

        elapsed = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = rid

        logger.info("← %s %s %d %.1fms", method, path, response.status_code, elapsed)
        return response
