"""Pytest configuration — ensures the project root is importable."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

_NHI_ENV_VARS = ("NHI_EXCLUDE_TEST_VALUES", "NHI_MAX_BATCH_SIZE", "NHI_LOG_LEVEL")


@pytest.fixture(autouse=True)
def _clean_nhi_env(monkeypatch):
    """Start every test from default settings regardless of the caller's shell.

    Each variable is set before being deleted so monkeypatch also removes any
    value a test loads from a .env file.
    """
    for name in _NHI_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield
