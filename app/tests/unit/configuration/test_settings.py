"""Unit tests for scoped_i18n.configuration module.

Tests cover:
- I18nSettings defaults and environment overrides
- Locale validation
- Settings aggregation
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from scoped_i18n.configuration import I18nSettings, Settings, get_settings, settings


@pytest.mark.unit
class TestI18nSettings:
    """Test suite for I18nSettings."""

    def test_defaults(self, monkeypatch):
        for name in ("DEFAULT_LOCALE", "FALLBACK_LOCALE", "COOKIE_NAME", "MESSAGES_DIR"):
            monkeypatch.delenv(f"I18N_{name}", raising=False)

        i18n = I18nSettings(_env_file=None)

        assert i18n.DEFAULT_LOCALE == "en-US"
        assert i18n.FALLBACK_LOCALE == "en"
        assert i18n.COOKIE_NAME == "i18n_locale"
        assert i18n.QUERY_NAME == "locale"
        assert i18n.HEADER_NAME == "accept-language"
        assert i18n.MESSAGES_DIR is None

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("I18N_COOKIE_NAME", "app_locale")
        monkeypatch.setenv("I18N_DEFAULT_LOCALE", "ja-JP")
        monkeypatch.setenv("I18N_MISSING_WARN", "false")
        monkeypatch.setenv("I18N_MESSAGES_DIR", str(tmp_path))

        i18n = I18nSettings()

        assert i18n.COOKIE_NAME == "app_locale"
        assert i18n.DEFAULT_LOCALE == "ja-JP"
        assert i18n.MISSING_WARN is False
        assert i18n.MESSAGES_DIR == Path(tmp_path)

    def test_locale_is_canonicalized(self):
        assert I18nSettings(DEFAULT_LOCALE="en-us").DEFAULT_LOCALE == "en-US"

    def test_invalid_locale_rejected(self):
        with pytest.raises(ValidationError):
            I18nSettings(FALLBACK_LOCALE="s")


@pytest.mark.unit
class TestSettings:
    """Test suite for the Settings aggregator."""

    def test_creates_i18n_settings(self):
        assert isinstance(Settings().i18n, I18nSettings)

    def test_accepts_i18n_override(self):
        i18n = I18nSettings(COOKIE_NAME="lang")
        assert Settings(i18n=i18n).i18n.COOKIE_NAME == "lang"

    def test_is_production(self):
        assert Settings(PREFIX="").is_production is True
        assert Settings(PREFIX="dev-").is_production is False

    def test_get_settings_returns_singleton(self):
        assert get_settings() is settings
        assert get_settings() is get_settings()
