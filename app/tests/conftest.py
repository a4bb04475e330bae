"""Shared fixtures for the test suite."""

import pytest

from scoped_i18n.configuration import I18nSettings, Settings
from tests.factories.i18n import make_messages, make_request


@pytest.fixture
def messages():
    """Default en/ja catalogs."""
    return make_messages()


@pytest.fixture
def request_factory():
    """Factory fixture building Starlette requests."""
    return make_request


@pytest.fixture
def test_settings():
    """Settings isolated from the process environment."""
    return Settings(
        PREFIX="test",
        LOG_LEVEL="DEBUG",
        i18n=I18nSettings(DEFAULT_LOCALE="en-US", FALLBACK_LOCALE="en"),
    )
