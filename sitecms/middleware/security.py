"""Security and cache-control headers middleware."""

from fastapi import Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.types import ASGIApp

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds security headers to every response.

    Responses under the ``no_cache_prefixes`` also get headers that stop
    browsers and proxies from caching them, since freshness tokens and
    admin reports must always be read live.
    """

    def __init__(
        self, app: ASGIApp, no_cache_prefixes: tuple[str, ...] = ()
    ) -> None:
        super().__init__(app)
        self.no_cache_prefixes = no_cache_prefixes
        self.security_headers = {
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "DENY",
            "X-XSS-Protection": "1; mode=block",
            "Strict-Transport-Security": "max-age=31536000",
        }

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)

        for header_name, header_value in self.security_headers.items():
            response.headers[header_name] = header_value
        if request.url.path.startswith(self.no_cache_prefixes):
            for header_name, header_value in NO_CACHE_HEADERS.items():
                response.headers[header_name] = header_value

        return response
