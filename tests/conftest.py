"""Pytest configuration and fixtures."""

import os

import pytest

from checkshappy.config import ChecksHappySettings, reset_settings, set_settings

# Import CLI fixtures to make them available globally
from tests.cli_fixtures import clean_runner, cli_invoke  # noqa: F401


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test",
    )
    config.addinivalue_line(
        "markers",
        "unit: mark test as unit test",
    )


@pytest.fixture(autouse=True)
def isolated_test_environment(tmp_path, monkeypatch):
    """Run every test with default settings and no stray config files.

    Prevents CHECKSHAPPY_* variables, a developer's .env file or a
    checkshappy.yaml in the working directory from leaking into tests.
    """
    for var in [k for k in os.environ if k.startswith("CHECKSHAPPY_")]:
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)

    reset_settings()
    set_settings(ChecksHappySettings(_env_file=None))

    yield

    reset_settings()
