"""Fixtures for ASGI application tests."""

import pytest
from fastapi.testclient import TestClient

from scoped_i18n.server import create_app


@pytest.fixture
def app(test_settings):
    """Demo application with the bundled catalogs."""
    return create_app(test_settings)


@pytest.fixture
def client(app):
    """Synchronous test client for the demo application."""
    return TestClient(app)
