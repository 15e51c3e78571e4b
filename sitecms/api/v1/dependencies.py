"""Request-scoped access to the services created at startup."""

from fastapi import Request

from sitecms.core.events import Services
from sitecms.database.client import ContentStoreClient
from sitecms.integrity.reorganizer import StorageReorganizer
from sitecms.integrity.scanner import IntegrityScanner
from sitecms.revalidation.dispatcher import RevalidationDispatcher


def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Application services are not initialized")
    return services


def get_store(request: Request) -> ContentStoreClient:
    return get_services(request).store


def get_dispatcher(request: Request) -> RevalidationDispatcher:
    return get_services(request).dispatcher


def get_scanner(request: Request) -> IntegrityScanner:
    return get_services(request).scanner


def get_reorganizer(request: Request) -> StorageReorganizer:
    return get_services(request).reorganizer
