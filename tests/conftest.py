"""Pytest configuration and fixtures."""

import os

import pytest

from mediatags.library import Library


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Isolate environment variables for each test.

    This prevents test pollution where one test's environment
    changes affect other tests.
    """
    original_env = os.environ.copy()

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def library():
    """Empty library with only the root collection."""
    return Library()
