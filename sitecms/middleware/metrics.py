"""Request metrics middleware for Prometheus monitoring."""

import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from sitecms.core.logging import get_logger
from sitecms.core.metrics import REQUESTS_TOTAL, RESPONSES_TOTAL

logger = get_logger(__name__)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Counts requests by method and path and responses by status code."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        path = str(request.url.path).rstrip("/") or "/"
        REQUESTS_TOTAL.labels(method=request.method, path=path).inc()

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            raise
        duration = time.time() - start_time

        RESPONSES_TOTAL.labels(status_code=str(response.status_code)).inc()
        logger.info(
            "request_processed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration=duration,
        )
        return response
