"""Feature-level fixtures for i18n tests."""

import json

import pytest
import yaml

from scoped_i18n.loader import YAMLCatalogLoader


@pytest.fixture
def temp_messages_dir(tmp_path):
    """Create a directory with sample catalog files.

    Layout:
    - en.yml
    - ja.yml
    - errors.en.yml
    - fr.json
    """
    with open(tmp_path / "en.yml", "w", encoding="utf-8") as f:
        yaml.dump({"hello": "hello, {name}", "errors": {"generic": "oops"}}, f)

    with open(tmp_path / "ja.yml", "w", encoding="utf-8") as f:
        yaml.dump({"hello": "こんにちは, {name}"}, f, allow_unicode=True)

    with open(tmp_path / "errors.en.yml", "w", encoding="utf-8") as f:
        yaml.dump({"not_found": "{0} not found"}, f)

    with open(tmp_path / "fr.json", "w", encoding="utf-8") as f:
        json.dump({"hello": "bonjour, {name}"}, f)

    return tmp_path


@pytest.fixture
def catalog_loader(temp_messages_dir):
    """YAMLCatalogLoader over the temporary directory, without caching."""
    return YAMLCatalogLoader(temp_messages_dir, use_cache=False)
