"""Tests for the static revalidation table."""

import pytest

from sitecms.core.exceptions import UnknownContentTypeError
from sitecms.revalidation.config import (
    DEFAULT_REVALIDATION_CONFIG,
    CacheTag,
    ContentType,
    RevalidationConfig,
    RevalidationRule,
)


def test_every_content_type_has_a_rule():
    assert len(DEFAULT_REVALIDATION_CONFIG) == len(ContentType)
    for content_type in ContentType:
        assert content_type in DEFAULT_REVALIDATION_CONFIG
        assert content_type.value in DEFAULT_REVALIDATION_CONFIG


def test_every_cache_tag_is_used_by_a_rule():
    used = {
        tag
        for content_type in DEFAULT_REVALIDATION_CONFIG
        for tag in DEFAULT_REVALIDATION_CONFIG.rule_for(content_type).tags
    }
    assert used == {tag.value for tag in CacheTag}


def test_unknown_label_is_not_contained():
    assert "testimonials" not in DEFAULT_REVALIDATION_CONFIG


def test_rules_are_read_only():
    rule = DEFAULT_REVALIDATION_CONFIG.rule_for("products")
    with pytest.raises(AttributeError):
        rule.paths = ("/elsewhere",)  # type: ignore[misc]
    with pytest.raises(TypeError):
        DEFAULT_REVALIDATION_CONFIG._rules[ContentType.PRODUCTS] = rule  # type: ignore[index]


def test_config_copies_its_input():
    rules = {ContentType.MEDIA: RevalidationRule(paths=("/",), tags=("media",))}
    config = RevalidationConfig(rules)
    rules[ContentType.CONTENT] = RevalidationRule(paths=(), tags=())

    assert ContentType.CONTENT not in config


def test_resolve_rejects_unknown_labels():
    with pytest.raises(UnknownContentTypeError, match="testimonials"):
        DEFAULT_REVALIDATION_CONFIG.resolve("testimonials")


def test_resolve_accepts_enum_and_string():
    assert DEFAULT_REVALIDATION_CONFIG.resolve("project-categories") is (
        ContentType.PROJECT_CATEGORIES
    )
    assert DEFAULT_REVALIDATION_CONFIG.resolve(ContentType.MEDIA) is ContentType.MEDIA
