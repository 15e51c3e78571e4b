"""Freshness tokens that let clients detect page content changes."""

from datetime import datetime, timezone
from typing import Iterable, Optional

from sitecms.core.exceptions import ValidationError
from sitecms.core.logging import get_logger
from sitecms.database.client import ContentStoreClient
from sitecms.models.content import ContentItem
from sitecms.models.reports import FreshnessToken

logger = get_logger(__name__)


def parse_timestamp(value: datetime | str | None) -> Optional[int]:
    """Convert a stored timestamp to epoch milliseconds.

    Accepts ``datetime`` values and ISO-8601 strings, including the
    ``YYYY-MM-DD HH:MM:SS`` form SQL databases emit. Naive values are UTC.

    Returns:
        Epoch milliseconds, or None if the value is missing or unparseable
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def latest_update(items: Iterable[ContentItem]) -> int:
    """Largest parseable ``updated_at`` among ``items``, or 0."""
    latest = 0
    for item in items:
        stamp = parse_timestamp(item.updated_at)
        if stamp is None:
            logger.warning(
                "unparseable_updated_at",
                page=item.page,
                section=item.section,
                content_key=item.content_key,
                updated_at=str(item.updated_at),
            )
            continue
        latest = max(latest, stamp)
    return latest


async def compute_freshness(store: ContentStoreClient, page: str) -> FreshnessToken:
    """Compute the freshness token for one page without returning its content.

    Raises:
        ValidationError: If ``page`` is empty
    """
    if not isinstance(page, str) or not page.strip():
        raise ValidationError("Page required")

    items = await store.get_page_content(page)
    token = FreshnessToken(
        page=page, last_updated=latest_update(items), content_count=len(items)
    )
    logger.info(
        "freshness_computed",
        page=page,
        content_count=token.content_count,
        last_updated=token.last_updated,
    )
    return token
