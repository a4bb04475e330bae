"""Message catalog loading.

Defines the contract for loading catalogs and provides a YAML/JSON loader
that can populate a translator context eagerly or lazily (for example from
inside an async locale detector).
"""

import asyncio
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

import yaml

from scoped_i18n.errors import CatalogLoadError, LocaleFormatError
from scoped_i18n.logging import get_module_logger
from scoped_i18n.models import LocaleTag
from scoped_i18n.translator import TranslatorContext

logger = get_module_logger()

CATALOG_SUFFIXES = (".yml", ".yaml", ".json")


class CatalogLoader(ABC):
    """Abstract base for catalog loaders."""

    @abstractmethod
    def load(self, locale: str) -> Dict[str, Any]:
        """Load the catalog for a specific locale.

        Raises:
            CatalogLoadError: If no catalog exists or it cannot be parsed.
        """

    @abstractmethod
    def load_all(self) -> Dict[str, Dict[str, Any]]:
        """Load catalogs for every available locale."""

    def load_into(self, context: TranslatorContext, locale: str) -> bool:
        """Add the catalog for ``locale`` to ``context`` if it is absent.

        Returns:
            True if a catalog was added, False if one was already present.
        """
        if locale in context.messages:
            return False
        context.messages[locale] = self.load(locale)
        return True

    async def aload_into(self, context: TranslatorContext, locale: str) -> bool:
        """Async variant of ``load_into``; file reads run in a worker thread."""
        if locale in context.messages:
            return False
        catalog = await asyncio.to_thread(self.load, locale)
        # Another request may have loaded it while this one was suspended
        if locale in context.messages:
            return False
        context.messages[locale] = catalog
        return True


class YAMLCatalogLoader(CatalogLoader):
    """Loader for YAML (and JSON) catalog files.

    Files are named ``<locale>.<ext>`` or ``<namespace>.<locale>.<ext>``.
    Namespaced files are nested under their namespace key, and all files for
    a locale are deep-merged in name order.

    Attributes:
        messages_dir: Directory containing catalog files.
        cache: Loaded catalogs by locale, when caching is enabled.
    """

    def __init__(self, messages_dir: Path, use_cache: bool = True):
        self.messages_dir = Path(messages_dir)
        self.use_cache = use_cache
        self.cache: Dict[str, Dict[str, Any]] = {}

        if not self.messages_dir.is_dir():
            raise CatalogLoadError(f"Messages directory not found: {self.messages_dir}")

        logger.info(
            "initialized_catalog_loader",
            messages_dir=str(self.messages_dir),
            use_cache=use_cache,
        )

    def available_locales(self) -> List[str]:
        """List locales that have at least one catalog file."""
        found = set()
        for path in self.messages_dir.iterdir():
            if path.suffix not in CATALOG_SUFFIXES:
                continue
            locale = path.stem.split(".")[-1]
            try:
                LocaleTag(locale)
            except LocaleFormatError:
                logger.warning("skipped_catalog_file", file=str(path))
                continue
            found.add(locale)
        return sorted(found)

    def load(self, locale: str) -> Dict[str, Any]:
        if self.use_cache and locale in self.cache:
            return self.cache[locale]

        files = sorted(
            path
            for path in self.messages_dir.iterdir()
            if path.suffix in CATALOG_SUFFIXES and path.stem.split(".")[-1] == locale
        )
        if not files:
            raise CatalogLoadError(
                f"No catalog files found for locale {locale} in {self.messages_dir}"
            )

        catalog: Dict[str, Any] = {}
        for path in files:
            data = self._read(path)
            parts = path.stem.split(".")
            if len(parts) > 1:
                data = {parts[0]: data}
            _deep_merge(catalog, data)

        logger.info("loaded_catalog", locale=locale, file_count=len(files))

        if self.use_cache:
            self.cache[locale] = catalog
        return catalog

    def load_all(self) -> Dict[str, Dict[str, Any]]:
        locales = self.available_locales()
        if not locales:
            raise CatalogLoadError(f"No catalog files found in {self.messages_dir}")
        return {locale: self.load(locale) for locale in locales}

    def clear_cache(self) -> None:
        """Clear all cached catalogs."""
        self.cache.clear()

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f) if path.suffix == ".json" else yaml.safe_load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            logger.error("catalog_parse_error", file=str(path), error=str(e))
            raise CatalogLoadError(f"Failed to parse {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise CatalogLoadError(f"Catalog {path} must contain a mapping")
        return data


def _deep_merge(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        else:
            target[key] = value
