"""
Observability: logging setup and request middleware.

Adds correlation IDs and structured logging context to requests.
"""

import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from trip_planner_backend.app.core.config import settings

logger = logging.getLogger("trip_planner.requests")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging() -> None:
    """Configure the root logger once, at application startup."""
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    logging.getLogger("trip_planner").setLevel(settings.log_level.upper())


def request_context(request: Request) -> dict:
    """
    Trip-domain fields of a served request.

    ``owner_id`` is left on ``request.state`` by the authentication
    dependency; ``trip_id``/``place_id`` come from the matched route.
    """
    path_params = request.scope.get("path_params") or {}
    context = {"owner_id": getattr(request.state, "owner_id", None)}
    for key in ("trip_id", "place_id"):
        if key in path_params:
            context[key] = path_params[key]
    return context


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Correlation ID and timing headers, plus one log line per request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Process-Time"] = f"{duration_ms:.2f}"

        log_data = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
            **request_context(request),
        }

        if response.status_code >= 500:
            logger.error("Request failed", extra=log_data)
        elif response.status_code >= 400:
            logger.warning("Request rejected", extra=log_data)
        else:
            logger.info("Request served", extra=log_data)

        return response
