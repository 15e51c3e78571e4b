"""Tests for the revalidation dispatcher."""

import pytest

from sitecms.core.exceptions import UnknownContentTypeError, ValidationError
from sitecms.revalidation.config import (
    DEFAULT_REVALIDATION_CONFIG,
    SITE_PAGES,
    ContentType,
)
from sitecms.revalidation.dispatcher import RevalidationDispatcher, page_path


class TestPagePath:
    @pytest.mark.parametrize(
        "page, expected",
        [("about", "/about"), ("/about", "/about"), (" contact ", "/contact")],
    )
    def test_normalises_leading_slash(self, page, expected):
        assert page_path(page) == expected


class TestTrigger:
    @pytest.mark.parametrize("content_type", [c.value for c in ContentType])
    async def test_paths_cover_configured_paths(self, dispatcher, content_type):
        result = await dispatcher.trigger(content_type)

        rule = DEFAULT_REVALIDATION_CONFIG.rule_for(content_type)
        assert set(rule.paths) <= set(result.paths)
        assert result.tags == list(rule.tags)
        assert result.layout is rule.revalidate_layout
        assert result.errors == []
        assert result.success is True

    async def test_content_invalidates_every_page_layout_and_tags(
        self, dispatcher, render_cache
    ):
        result = await dispatcher.trigger("content")

        assert result.paths == list(SITE_PAGES)
        assert result.tags == ["content", "branding", "navigation"]
        assert result.layout is True
        assert render_cache.layouts == ["/"]
        assert render_cache.tags == ["content", "branding", "navigation"]

    async def test_specific_page_is_added_once(self, dispatcher, render_cache):
        result = await dispatcher.trigger(ContentType.PRODUCTS, "home")

        assert result.paths == ["/products", "/home"]
        assert render_cache.paths.count("/home") == 1

    async def test_specific_page_already_configured_is_not_repeated(
        self, dispatcher, render_cache
    ):
        result = await dispatcher.trigger(ContentType.PRODUCTS, "/products")

        assert result.paths == ["/products"]
        assert render_cache.paths == ["/products"]

    async def test_failures_are_collected_not_raised(self, dispatcher, render_cache):
        render_cache.fail_paths.add("/about")
        render_cache.fail_tags.add("branding")

        result = await dispatcher.trigger("content")

        assert result.success is True
        assert "/about" not in result.paths
        assert "/contact" in result.paths
        assert result.tags == ["content", "navigation"]
        assert len(result.errors) == 2
        assert any("path /about" in error for error in result.errors)
        assert any("tag branding" in error for error in result.errors)

    async def test_layout_failure_leaves_layout_false(self, dispatcher, render_cache):
        render_cache.fail_paths.add("/")

        result = await dispatcher.trigger("categories")

        assert result.layout is False
        assert result.paths == ["/products"]
        assert len(result.errors) == 2

    async def test_unknown_content_type_is_rejected(self, dispatcher, render_cache):
        with pytest.raises(UnknownContentTypeError) as exc_info:
            await dispatcher.trigger("testimonials")

        assert isinstance(exc_info.value, ValidationError)
        assert exc_info.value.status_code == 400
        assert render_cache.paths == []
        assert render_cache.tags == []

    async def test_custom_config_is_used(self, render_cache):
        from sitecms.revalidation.config import RevalidationConfig, RevalidationRule

        config = RevalidationConfig(
            {ContentType.MEDIA: RevalidationRule(paths=("/gallery",), tags=())}
        )
        dispatcher = RevalidationDispatcher(render_cache, config)

        result = await dispatcher.trigger("media")
        assert result.paths == ["/gallery"]
        with pytest.raises(UnknownContentTypeError):
            await dispatcher.trigger("content")
