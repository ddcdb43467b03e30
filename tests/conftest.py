"""Shared fixtures for skypack-proxy tests."""

import pytest

from skypack_proxy.constants import Constants
from skypack_proxy.reporting import Report


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo Constants overrides made by config and CLI tests."""
    saved = {k: v for k, v in vars(Constants).items() if k.isupper()}
    yield
    for key, value in saved.items():
        setattr(Constants, key, value)


@pytest.fixture
def report():
    """Create a fresh report for each test."""
    return Report()
