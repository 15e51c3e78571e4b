"""Test configuration."""

import os
from pathlib import Path
from typing import List

import pytest
from pytest import Config

# Settings are read at import time; isolate them before any sitecms import
os.environ["TESTING"] = "true"

from sitecms.core.logging import configure_logging  # noqa: E402

fixture = pytest.fixture


@fixture(scope="session")
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


pytest_plugins: List[str] = [
    "tests.fixtures.integrity",
    "tests.fixtures.db",
    "tests.fixtures.api",
]


def pytest_configure(config: Config) -> None:
    """Configure pytest.

    Args:
        config: Pytest configuration object
    """
    configure_logging(testing=True)
    config.addinivalue_line("markers", "integration: mark test as an integration test")
