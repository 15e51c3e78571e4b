"""Tests for application configuration settings."""

import os
from unittest.mock import patch

import pytest

from sitecms.core.config import Settings


class TestTestingOverrides:
    """Settings never point tests at real backing services."""

    def test_should_use_in_memory_database_when_testing(self):
        with patch.dict(os.environ, {"TESTING": "true"}):
            os.environ.pop("TEST_DATABASE_URL", None)
            settings = Settings(DATABASE_URL="postgresql://prod/sitecms")

        assert settings.DATABASE_URL == "sqlite+aiosqlite:///:memory:"

    def test_should_prefer_explicit_test_database(self):
        with patch.dict(
            os.environ,
            {"TESTING": "true", "TEST_DATABASE_URL": "sqlite+aiosqlite:///t.db"},
        ):
            settings = Settings()

        assert settings.DATABASE_URL == "sqlite+aiosqlite:///t.db"

    def test_should_move_redis_to_test_database(self):
        with patch.dict(os.environ, {"TESTING": "true"}):
            os.environ.pop("TEST_REDIS_URL", None)
            settings = Settings(REDIS_URL="redis://cache:6379/")

        assert settings.REDIS_URL == "redis://cache:6379/1"


class TestStorageSettings:
    def test_should_append_slash_to_public_url(self):
        settings = Settings(STORAGE_PUBLIC_URL="https://cdn.test/media")
        assert settings.STORAGE_PUBLIC_URL == "https://cdn.test/media/"

    def test_should_keep_public_url_with_slash(self):
        settings = Settings(STORAGE_PUBLIC_URL="https://cdn.test/media/")
        assert settings.STORAGE_PUBLIC_URL == "https://cdn.test/media/"


class TestIntegritySettings:
    def test_should_have_defaults(self):
        settings = Settings()

        assert settings.PROBE_TIMEOUT == 10.0
        assert settings.PROBE_CONCURRENCY == 8
        assert settings.REWRITE_RETRIES == 3

    def test_should_override_via_environment(self):
        with patch.dict(os.environ, {"PROBE_CONCURRENCY": "2"}):
            settings = Settings()

        assert settings.PROBE_CONCURRENCY == 2

    @pytest.mark.parametrize(
        "name, value",
        [("PROBE_TIMEOUT", "0"), ("PROBE_CONCURRENCY", "0"), ("REWRITE_RETRIES", "-1")],
    )
    def test_should_reject_out_of_range_values(self, name, value):
        with patch.dict(os.environ, {name: value}):
            with pytest.raises(ValueError):
                Settings()


def test_wildcard_cors_origins_are_replaced():
    settings = Settings(cors_origins=["*"])
    assert "*" not in settings.cors_origins
    assert "http://localhost:3000" in settings.cors_origins
