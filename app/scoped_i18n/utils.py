"""Helpers for language tags and the Accept-Language header."""

from typing import Any, List, Optional

from scoped_i18n.errors import LocaleFormatError
from scoped_i18n.models import LocaleTag


def parse_accept_language(value: Optional[str]) -> List[str]:
    """Parse an Accept-Language header value into language tags.

    Quality weights are dropped and ignored: the result keeps the order in
    which the tags appear in the header. Wildcard (``*``) and empty entries
    are removed. Duplicates are kept. Whitespace around each entry is
    stripped, so "ja, en" and "ja,en" parse the same; a strict split on ","
    would keep the leading space.

    Args:
        value: Raw header value (e.g., "ja,en-US;q=0.7,en;q=0.3").

    Returns:
        Language tags in header order (e.g., ["ja", "en-US", "en"]).
        Empty list for a missing or empty header, or one that is only ``*``.
    """
    if not value:
        return []
    tags = (entry.split(";", 1)[0].strip() for entry in value.split(","))
    return [tag for tag in tags if tag not in ("*", "")]


def is_locale(value: Any) -> bool:
    """Check if value is a LocaleTag instance."""
    return isinstance(value, LocaleTag)


def validate_language_tag(value: str) -> bool:
    """Check if value is a well-formed BCP 47 language tag."""
    try:
        LocaleTag(value)
    except LocaleFormatError:
        return False
    return True
