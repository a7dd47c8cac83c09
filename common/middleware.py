"""
common.middleware
~~~~~~~~~~~~~~~~~
Structured JSON request-logging middleware powered by structlog.

Logs: method, path, status_code, duration_ms and the acting user on every
request/response cycle.
"""
import time

import structlog

logger = structlog.get_logger(__name__)


class StructuredLoggingMiddleware:
    """
    WSGI middleware that emits one structured log record per HTTP request.

    Log record fields:
        event       – "http_request"
        method      – HTTP verb (GET, POST, …)
        path        – URL path, without the query string
        status      – HTTP response status code (int)
        duration_ms – Round-trip duration in milliseconds (float, 2 dp)
        user        – username resolved by DRF, or "anonymous"
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        structlog.contextvars.clear_contextvars()
        start = time.monotonic()
        response = self.get_response(request)
        duration_ms = round((time.monotonic() - start) * 1000, 2)

        logger.info(
            "http_request",
            method=request.method,
            path=request.path,
            status=response.status_code,
            duration_ms=duration_ms,
            user=_username(request, response),
        )
        return response


def _username(request, response) -> str:
    # Bearer auth happens inside the DRF view, so the resolved user lives on
    # the DRF request rather than on the WSGI request.
    drf_request = (getattr(response, "renderer_context", None) or {}).get("request")
    user = getattr(drf_request, "user", None) or getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return user.get_username()
    return "anonymous"
