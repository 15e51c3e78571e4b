"""Freshness endpoint polled by clients to detect content changes."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from sitecms.api.v1.dependencies import get_store
from sitecms.database.client import ContentStoreClient
from sitecms.sync.freshness import compute_freshness

router = APIRouter(prefix="/sync", tags=["sync"])


class SyncRequest(BaseModel):
    page: Optional[str] = None


@router.post("/content")
async def sync_content(
    body: SyncRequest,
    store: ContentStoreClient = Depends(get_store),
) -> Dict[str, Any]:
    """
    Report when a page's content last changed, without returning it.

    Clients compare ``lastUpdated`` with the value they rendered and
    refetch only when it moved.
    """
    token = await compute_freshness(store, body.page or "")
    return {
        **token.to_response(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
