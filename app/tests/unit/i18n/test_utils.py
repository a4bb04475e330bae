"""Tests for scoped_i18n.utils module."""

import pytest

from scoped_i18n.models import LocaleTag
from scoped_i18n.utils import is_locale, parse_accept_language, validate_language_tag


@pytest.mark.unit
class TestParseAcceptLanguage:
    """Tests for parse_accept_language()."""

    def test_strips_quality_weights(self):
        """Quality factors are dropped and tags keep header order."""
        assert parse_accept_language("ja,en-US;q=0.7,en;q=0.3") == ["ja", "en-US", "en"]

    def test_without_quality_weights(self):
        assert parse_accept_language("ja,en-US") == ["ja", "en-US"]

    def test_single_tag(self):
        assert parse_accept_language("ja") == ["ja"]

    def test_any_language(self):
        """A wildcard-only header yields no tags."""
        assert parse_accept_language("*") == []

    def test_empty(self):
        assert parse_accept_language("") == []

    def test_none(self):
        assert parse_accept_language(None) == []

    def test_weights_do_not_reorder(self):
        """Lower-weighted tags listed first stay first."""
        assert parse_accept_language("en;q=0.1,ja;q=0.9") == ["en", "ja"]

    def test_wildcard_and_empty_entries_removed(self):
        assert parse_accept_language("en-US,,*;q=0.5,fr") == ["en-US", "fr"]

    def test_duplicates_kept(self):
        assert parse_accept_language("en,en;q=0.5") == ["en", "en"]

    def test_whitespace_trimmed(self):
        assert parse_accept_language("en-US, en;q=0.9, ja;q=0.8") == ["en-US", "en", "ja"]


@pytest.mark.unit
class TestIsLocale:
    """Tests for is_locale()."""

    def test_locale_instance(self):
        assert is_locale(LocaleTag("en-US")) is True

    def test_not_locale_instance(self):
        assert is_locale("en-US") is False


@pytest.mark.unit
class TestValidateLanguageTag:
    """Tests for validate_language_tag()."""

    @pytest.mark.parametrize("tag", ["en", "en-US", "zh-Hant-TW", "de-CH-1996", "es-419"])
    def test_valid(self, tag):
        assert validate_language_tag(tag) is True

    @pytest.mark.parametrize("tag", ["j", "", "en_US", "*", "en-", "toolonglanguage"])
    def test_invalid(self, tag):
        assert validate_language_tag(tag) is False
