"""Static mapping from content type to the render caches it affects."""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from sitecms.core.exceptions import UnknownContentTypeError


class ContentType(str, Enum):
    """Labels admin mutation handlers pass to the dispatcher."""

    CONTENT = "content"
    PRODUCTS = "products"
    PROJECTS = "projects"
    CATEGORIES = "categories"
    PROJECT_CATEGORIES = "project-categories"
    MEDIA = "media"


class CacheTag(str, Enum):
    CONTENT = "content"
    PRODUCTS = "products"
    PROJECTS = "projects"
    CATEGORIES = "categories"
    PROJECT_CATEGORIES = "project-categories"
    MEDIA = "media"
    BRANDING = "branding"
    NAVIGATION = "navigation"


SITE_PAGES: tuple[str, ...] = (
    "/",
    "/about",
    "/products",
    "/projects",
    "/contact",
    "/clients",
)


@dataclass(frozen=True)
class RevalidationRule:
    """What to invalidate after one kind of mutation."""

    paths: tuple[str, ...]
    tags: tuple[str, ...]
    revalidate_layout: bool = False


class RevalidationConfig:
    """Read-only lookup of revalidation rules by content type."""

    def __init__(self, rules: Mapping[ContentType, RevalidationRule]) -> None:
        self._rules: Mapping[ContentType, RevalidationRule] = MappingProxyType(
            dict(rules)
        )

    def __contains__(self, content_type: object) -> bool:
        try:
            return ContentType(content_type) in self._rules
        except ValueError:
            return False

    def __iter__(self):
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def resolve(self, content_type: ContentType | str) -> ContentType:
        """Normalise a label to a configured ``ContentType``.

        Raises:
            UnknownContentTypeError: If the label has no rule
        """
        try:
            resolved = ContentType(content_type)
        except ValueError:
            raise UnknownContentTypeError(str(content_type)) from None
        if resolved not in self._rules:
            raise UnknownContentTypeError(resolved.value)
        return resolved

    def rule_for(self, content_type: ContentType | str) -> RevalidationRule:
        """Get the rule for a label.

        Raises:
            UnknownContentTypeError: If the label has no rule
        """
        return self._rules[self.resolve(content_type)]


def _tags(*tags: CacheTag) -> tuple[str, ...]:
    return tuple(tag.value for tag in tags)


DEFAULT_REVALIDATION_CONFIG = RevalidationConfig(
    {
        ContentType.CONTENT: RevalidationRule(
            paths=SITE_PAGES,
            tags=_tags(CacheTag.CONTENT, CacheTag.BRANDING, CacheTag.NAVIGATION),
            revalidate_layout=True,
        ),
        ContentType.PRODUCTS: RevalidationRule(
            paths=("/products",),
            tags=_tags(CacheTag.PRODUCTS, CacheTag.CATEGORIES),
        ),
        ContentType.PROJECTS: RevalidationRule(
            paths=("/projects",),
            tags=_tags(CacheTag.PROJECTS, CacheTag.PROJECT_CATEGORIES),
        ),
        ContentType.CATEGORIES: RevalidationRule(
            paths=("/", "/products"),
            tags=_tags(CacheTag.CATEGORIES, CacheTag.PRODUCTS, CacheTag.NAVIGATION),
            revalidate_layout=True,
        ),
        ContentType.PROJECT_CATEGORIES: RevalidationRule(
            paths=("/", "/projects"),
            tags=_tags(
                CacheTag.PROJECT_CATEGORIES, CacheTag.PROJECTS, CacheTag.NAVIGATION
            ),
            revalidate_layout=True,
        ),
        ContentType.MEDIA: RevalidationRule(
            paths=SITE_PAGES,
            tags=_tags(CacheTag.MEDIA, CacheTag.CONTENT),
        ),
    }
)
