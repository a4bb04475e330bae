"""i18n settings."""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from scoped_i18n.configuration.base import ComponentSettings
from scoped_i18n.errors import LocaleFormatError
from scoped_i18n.models import LocaleTag


class I18nSettings(ComponentSettings):
    """Locale detection and message catalog configuration.

    Environment Variables:
        I18N_DEFAULT_LOCALE: Locale used when detection yields nothing (default: en-US)
        I18N_FALLBACK_LOCALE: Catalog consulted when a key is missing (default: en)
        I18N_COOKIE_NAME: Cookie holding the user's locale (default: i18n_locale)
        I18N_QUERY_NAME: Query parameter holding the locale (default: locale)
        I18N_HEADER_NAME: Header parsed for language preferences (default: accept-language)
        I18N_MESSAGES_DIR: Directory with YAML/JSON catalogs (default: bundled locales)
        I18N_MISSING_WARN: Log a warning for missing keys (default: True)
        I18N_FALLBACK_WARN: Log when the fallback locale is used (default: True)

    Example:
        ```python
        from scoped_i18n.configuration import settings

        cookie_name = settings.i18n.COOKIE_NAME
        ```
    """

    model_config = SettingsConfigDict(env_prefix="I18N_")

    DEFAULT_LOCALE: str = Field(default="en-US")
    FALLBACK_LOCALE: str = Field(default="en")
    COOKIE_NAME: str = Field(default="i18n_locale")
    QUERY_NAME: str = Field(default="locale")
    HEADER_NAME: str = Field(default="accept-language")
    MESSAGES_DIR: Optional[Path] = Field(default=None)
    MISSING_WARN: bool = Field(default=True)
    FALLBACK_WARN: bool = Field(default=True)

    @field_validator("DEFAULT_LOCALE", "FALLBACK_LOCALE")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        """Reject malformed language tags and store the canonical form."""
        try:
            return str(LocaleTag(v))
        except LocaleFormatError as e:
            raise ValueError(str(e)) from e
