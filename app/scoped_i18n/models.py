"""Value types for the i18n system.

Defines the BCP 47 locale tag value object and the per-request
binding record stored on the request state.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple

from scoped_i18n.errors import LocaleFormatError

_ALPHA = "[a-z]"
_ALNUM = "[a-z0-9]"

_LANGUAGE = rf"(?P<language>{_ALPHA}{{2,3}}(?:-{_ALPHA}{{3}}){{0,3}}|{_ALPHA}{{5,8}})"
_SCRIPT = rf"(?:-(?P<script>{_ALPHA}{{4}}))?"
_REGION = rf"(?:-(?P<region>{_ALPHA}{{2}}|[0-9]{{3}}))?"
_VARIANTS = rf"(?P<variants>(?:-(?:{_ALNUM}{{5,8}}|[0-9]{_ALNUM}{{3}}))*)"
_EXTENSIONS = rf"(?P<extensions>(?:-[0-9a-wy-z](?:-{_ALNUM}{{2,8}})+)*)"
_PRIVATE = rf"(?P<private>-x(?:-{_ALNUM}{{1,8}})+)?"

LANGUAGE_TAG_PATTERN = re.compile(
    rf"^{_LANGUAGE}{_SCRIPT}{_REGION}{_VARIANTS}{_EXTENSIONS}{_PRIVATE}$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class LocaleTag:
    """Immutable BCP 47 language tag.

    The tag is validated and canonicalized on construction: language and
    variants are lowercased, the script is title-cased and the region is
    uppercased. Equality and hashing use the canonical form.

    Attributes:
        tag: Canonical language tag (e.g., "en-US", "zh-Hant-TW").

    Raises:
        LocaleFormatError: If the tag is not a well-formed language tag.
    """

    tag: str
    _parts: Tuple[Optional[str], ...] = field(
        init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        raw = self.tag
        if isinstance(raw, LocaleTag):
            raw = raw.tag
        match = LANGUAGE_TAG_PATTERN.match(raw) if isinstance(raw, str) else None
        if match is None:
            raise LocaleFormatError(f"Incorrect locale information provided: {raw!r}")

        language = match.group("language").lower()
        script = match.group("script")
        script = script.title() if script else None
        region = match.group("region")
        region = region.upper() if region else None
        variants = match.group("variants").lower() or ""
        tail = (match.group("extensions") or "") + (match.group("private") or "")

        base_name = "-".join(p for p in (language, script, region) if p) + variants
        object.__setattr__(self, "tag", base_name + tail.lower())
        object.__setattr__(
            self,
            "_parts",
            (language, script, region, variants.lstrip("-") or None, base_name),
        )

    def __str__(self) -> str:
        return self.tag

    @property
    def language(self) -> str:
        """Primary language subtag (e.g., "en" from "en-US")."""
        return self._parts[0].split("-")[0]

    @property
    def script(self) -> Optional[str]:
        """Script subtag (e.g., "Hant" from "zh-Hant-TW"), if any."""
        return self._parts[1]

    @property
    def region(self) -> Optional[str]:
        """Region subtag (e.g., "US" from "en-US"), if any."""
        return self._parts[2]

    @property
    def variants(self) -> Tuple[str, ...]:
        """Variant subtags in tag order."""
        return tuple(self._parts[3].split("-")) if self._parts[3] else ()

    @property
    def base_name(self) -> str:
        """Tag without extension and private-use subtags."""
        return self._parts[4]

    @classmethod
    def from_value(cls, value: "str | LocaleTag") -> "LocaleTag":
        """Return ``value`` unchanged if it is a LocaleTag, else parse it."""
        if isinstance(value, LocaleTag):
            return value
        return cls(value)


@dataclass(frozen=True)
class RequestLocaleBinding:
    """Per-request locale binding stored on ``request.state``.

    Created by ``on_request_start`` and deleted by ``on_request_end``.
    Never shared between requests.

    Attributes:
        detector: Zero-argument callable, curried to one request and the
            shared translator context. May return a locale or an awaitable.
        source: How the detector was configured ("header", "static" or "custom").
    """

    detector: Callable[[], Any]
    source: str = "custom"
