"""Admin endpoints: content writes, revalidation and media maintenance."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, StrictBool
from pydantic.alias_generators import to_camel
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from sitecms.api.v1.dependencies import (
    get_dispatcher,
    get_reorganizer,
    get_scanner,
    get_store,
)
from sitecms.core.exceptions import ValidationError
from sitecms.core.logging import get_logger
from sitecms.database.client import ContentStoreClient
from sitecms.integrity.reorganizer import StorageReorganizer
from sitecms.integrity.scanner import IntegrityScanner
from sitecms.revalidation.config import ContentType
from sitecms.revalidation.dispatcher import RevalidationDispatcher

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


class CamelRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CleanupRequest(CamelRequest):
    dry_run: StrictBool = True


class ContentWrite(CamelRequest):
    page: str
    section: str
    content_key: str
    content_value: Optional[str] = None


class RevalidateRequest(CamelRequest):
    content_type: str
    page: Optional[str] = None


@router.get("/content")
async def get_content(
    page: str = Query(..., min_length=1),
    section: Optional[str] = Query(None),
    store: ContentStoreClient = Depends(get_store),
) -> list[Dict[str, Any]]:
    """List the content items of a page, optionally narrowed to a section."""
    items = await store.get_page_content(page, section)
    return [item.model_dump(mode="json") for item in items]


@router.post("/content")
async def save_content(
    body: ContentWrite,
    store: ContentStoreClient = Depends(get_store),
    dispatcher: RevalidationDispatcher = Depends(get_dispatcher),
) -> Dict[str, Any]:
    """Upsert one content item, then revalidate the views that show it."""
    if not body.page.strip() or not body.section.strip() or not body.content_key:
        raise ValidationError("page, section and contentKey are required")

    item = await store.set_content(
        body.page, body.section, body.content_key, body.content_value
    )
    revalidation = await dispatcher.trigger(ContentType.CONTENT, body.page)
    logger.info(
        "content_saved",
        page=item.page,
        section=item.section,
        content_key=item.content_key,
        revalidation_errors=len(revalidation.errors),
    )
    return {
        "success": True,
        "message": "Content updated successfully",
        "data": item.model_dump(mode="json"),
        "revalidation": revalidation.to_response(),
    }


@router.post("/revalidate")
async def revalidate(
    body: RevalidateRequest,
    dispatcher: RevalidationDispatcher = Depends(get_dispatcher),
) -> Dict[str, Any]:
    """Manually invalidate the cached views of a content type."""
    result = await dispatcher.trigger(body.content_type, body.page)
    return result.to_response()


@router.post("/cleanup-images")
async def cleanup_images(
    body: Optional[CleanupRequest] = Body(None),
    scanner: IntegrityScanner = Depends(get_scanner),
) -> Any:
    """
    Find media references whose target is gone.

    Dry runs (the default) only report. With ``dryRun: false`` the broken
    references found by this same pass are removed.
    """
    dry_run = body.dry_run if body is not None else True
    report = await scanner.scan(dry_run=dry_run)

    if report.failed_sections:
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": "Failed to cleanup images",
                "message": "Some sections could not be scanned",
                "data": report.to_response(),
            },
        )
    return {
        "success": True,
        "message": "Dry run completed" if dry_run else "Cleanup completed",
        "data": report.to_response(),
    }


@router.post("/reorganize-folders")
async def reorganize_folders(
    reorganizer: StorageReorganizer = Depends(get_reorganizer),
) -> Dict[str, Any]:
    """Move objects from legacy storage folders into the canonical ones."""
    report = await reorganizer.reorganize()
    return {
        "success": True,
        "message": "Media folder reorganization completed successfully",
        "results": report.to_response(),
    }
