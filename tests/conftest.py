"""Pytest configuration and fixtures."""

import os

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    # Remove any GPTSCHEMA_ env vars that might interfere
    for key in list(os.environ.keys()):
        if key.startswith("GPTSCHEMA_"):
            monkeypatch.delenv(key, raising=False)
