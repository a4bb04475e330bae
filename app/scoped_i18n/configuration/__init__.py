"""Configuration module - public API.

Centralized configuration management using Pydantic BaseSettings.

Exports:
    settings: Singleton Settings instance
    Settings: Main settings class (for testing/overrides)
    I18nSettings: Locale and catalog settings
    get_settings: Cached settings provider for dependency injection
"""

from functools import lru_cache

from scoped_i18n.configuration.i18n import I18nSettings
from scoped_i18n.configuration.settings import Settings, settings


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings instance.

    Returns:
        Settings: The module-level settings singleton.
    """
    return settings


__all__ = ["Settings", "I18nSettings", "settings", "get_settings"]
