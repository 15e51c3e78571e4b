"""Fan content mutations out to render cache invalidations."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from sitecms.core.logging import get_logger
from sitecms.core.metrics import REVALIDATION_CALLS
from sitecms.models.reports import RevalidationResult

from .cache import RenderCache
from .config import ContentType, RevalidationConfig

logger = get_logger(__name__)

LAYOUT_ROOT = "/"


@dataclass(frozen=True)
class _Call:
    kind: str  # "path", "page", "layout" or "tag"
    target: str
    run: Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class _Outcome:
    call: _Call
    error: BaseException | None


def page_path(page: str) -> str:
    """Render path for a page label such as ``about`` or ``/about``."""
    return "/" + page.strip().lstrip("/")


class RevalidationDispatcher:
    """Invalidates every cached view affected by a content mutation.

    Each invalidation is attempted independently; failures are collected
    into the result instead of raised, so a cache hiccup never fails the
    editor's save.
    """

    def __init__(self, cache: RenderCache, config: RevalidationConfig) -> None:
        self.cache = cache
        self.config = config

    def _plan(
        self, content_type: ContentType, specific_page: str | None
    ) -> list[_Call]:
        rule = self.config.rule_for(content_type)
        calls = [
            _Call("path", path, lambda p=path: self.cache.revalidate_path(p))
            for path in rule.paths
        ]
        if specific_page:
            path = page_path(specific_page)
            if path not in rule.paths:
                calls.append(
                    _Call("page", path, lambda p=path: self.cache.revalidate_path(p))
                )
        if rule.revalidate_layout:
            calls.append(
                _Call(
                    "layout",
                    LAYOUT_ROOT,
                    lambda: self.cache.revalidate_path(LAYOUT_ROOT, layout=True),
                )
            )
        calls.extend(
            _Call("tag", tag, lambda t=tag: self.cache.revalidate_tag(t))
            for tag in rule.tags
        )
        return calls

    async def _attempt(self, call: _Call) -> _Outcome:
        try:
            await call.run()
        except Exception as e:
            REVALIDATION_CALLS.labels(kind=call.kind, outcome="failed").inc()
            logger.warning(
                "revalidation_failed", kind=call.kind, target=call.target, error=str(e)
            )
            return _Outcome(call, e)
        REVALIDATION_CALLS.labels(kind=call.kind, outcome="ok").inc()
        logger.info("revalidated", kind=call.kind, target=call.target)
        return _Outcome(call, None)

    async def trigger(
        self, content_type: ContentType | str, specific_page: str | None = None
    ) -> RevalidationResult:
        """Invalidate the paths, tags and layout configured for a content type.

        Args:
            content_type: One of the configured content type labels
            specific_page: Optional page label to invalidate in addition

        Returns:
            Which paths and tags succeeded, whether the layout was
            invalidated, and one error string per failed call

        Raises:
            UnknownContentTypeError: If the label is not configured
        """
        resolved = self.config.resolve(content_type)
        calls = self._plan(resolved, specific_page)

        outcomes = await asyncio.gather(*(self._attempt(call) for call in calls))

        result = RevalidationResult(content_type=resolved.value)
        for outcome in outcomes:
            call = outcome.call
            if outcome.error is not None:
                result.errors.append(
                    f"Failed to revalidate {call.kind} {call.target}: {outcome.error}"
                )
            elif call.kind == "tag":
                result.tags.append(call.target)
            elif call.kind == "layout":
                result.layout = True
            else:
                result.paths.append(call.target)

        logger.info(
            "revalidation_completed",
            content_type=resolved.value,
            paths=len(result.paths),
            tags=len(result.tags),
            layout=result.layout,
            errors=len(result.errors),
        )
        return result
