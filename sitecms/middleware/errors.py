"""Error handling middleware."""

from fastapi import HTTPException, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from starlette.types import ASGIApp

from sitecms.core.exceptions import SiteCMSError
from sitecms.core.logging import get_logger

logger = get_logger(__name__)

# Map exception types to status codes (None means use exception's status_code)
ErrorMapping = dict[type[Exception], int | None]


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turns exceptions escaping a handler into JSON error responses.

    Responses produced by handlers, error statuses included, pass through
    untouched.
    """

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)
        self.error_mapping: ErrorMapping = {
            KeyError: HTTP_404_NOT_FOUND,
            ValueError: HTTP_422_UNPROCESSABLE_ENTITY,
            HTTPException: None,
            SiteCMSError: None,
        }

    def _get_status_code(self, exc: Exception) -> int:
        for exc_type in type(exc).__mro__:
            if exc_type in self.error_mapping:
                mapped = self.error_mapping[exc_type]
                if mapped is not None:
                    return mapped
                break
        return getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR)

    def _get_error_detail(self, exc: Exception) -> str:
        if isinstance(exc, HTTPException):
            return str(exc.detail)
        if isinstance(exc, KeyError):
            return f"'{exc.args[0]}'" if exc.args else str(exc)
        return str(exc.args[0] if exc.args else exc)

    def _create_error_response(
        self,
        error_type: str,
        detail: str,
        status_code: int,
        correlation_id: str | None,
    ) -> JSONResponse:
        """Create JSON error response with optional correlation ID."""
        response = JSONResponse(
            status_code=status_code,
            content={
                "success": False,
                "error": error_type,
                "message": detail,
                "status_code": status_code,
                "correlation_id": correlation_id if correlation_id else "unknown",
            },
        )
        if correlation_id:
            response.headers["X-Request-ID"] = correlation_id
        return response

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            correlation_id = getattr(request.state, "correlation_id", None)
            error_type = exc.__class__.__name__
            detail = self._get_error_detail(exc)
            status_code = self._get_status_code(exc)

            log = logger.error if status_code >= 500 else logger.warning
            log(
                "request_error",
                error_type=error_type,
                error_message=detail,
                status_code=status_code,
                path=request.url.path,
                method=request.method,
                correlation_id=correlation_id,
                exc_info=status_code >= 500,
            )
            return self._create_error_response(
                error_type, detail, status_code, correlation_id
            )
