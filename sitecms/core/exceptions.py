"""Exception types shared across the service.

Every exception carries the HTTP ``status_code`` the error middleware
should answer with when it escapes a request handler.
"""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)


class SiteCMSError(Exception):
    """Base class for service errors."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR


class ValidationError(SiteCMSError):
    """Malformed request; raised before any work is performed."""

    status_code = HTTP_400_BAD_REQUEST


class UnknownContentTypeError(ValidationError):
    """Content type label has no revalidation rule."""

    def __init__(self, content_type: str) -> None:
        super().__init__(f"Unknown content type: {content_type!r}")
        self.content_type = content_type


class FatalStoreFailure(SiteCMSError):
    """A store could not be reached for a whole enumeration step."""

    def __init__(self, store: str, operation: str, cause: Exception | str) -> None:
        super().__init__(f"{store} unavailable during {operation}: {cause}")
        self.store = store
        self.operation = operation


class StorageError(SiteCMSError):
    """An object store call failed."""

    status_code = HTTP_502_BAD_GATEWAY


class ObjectNotFoundError(StorageError):
    """The requested object does not exist."""


class RenderCacheError(SiteCMSError):
    """The rendering layer rejected an invalidation call."""

    status_code = HTTP_502_BAD_GATEWAY
