"""Message translation engine.

Holds the shared translator context (message catalogs, current locale,
fallback and plural configuration) and the ``translate`` function that
resolves a key to a formatted message.

Message syntax:
    - ``{name}``: named interpolation
    - ``{0}``: list interpolation
    - ``a | b | c``: plural choices, selected by the plural count
    - ``{count}`` / ``{n}``: implicitly bound to the plural count
"""

import inspect
import re
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    List,
    Mapping,
    Optional,
    Sequence,
    TypeVar,
    Union,
)

from scoped_i18n.logging import get_module_logger
from scoped_i18n.models import LocaleTag

logger = get_module_logger()

MessageT = TypeVar("MessageT", bound=Mapping[str, Any])

PluralRule = Callable[[int, int], int]
FallbackLocale = Union[str, Sequence[str], Mapping[str, Sequence[str]], None]

_PLACEHOLDER_PATTERN = re.compile(r"\{\s*([\w.-]+)\s*\}")
_PLURAL_SEPARATOR = re.compile(r"\s*(?<!\\)\|\s*")


class _NotResolved:
    """Sentinel returned by ``translate`` when no message is found."""

    _instance: Optional["_NotResolved"] = None

    def __new__(cls) -> "_NotResolved":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_RESOLVED"

    def __bool__(self) -> bool:
        return False


NOT_RESOLVED = _NotResolved()


@dataclass
class TranslateOptions:
    """Options for a single translation call.

    Attributes:
        plural: Plural choice number.
        default: Message used when the key is not found.
        locale: Locale overriding the context locale.
        missing_warn: Override the context's missing-key warning flag.
        fallback_warn: Override the context's fallback warning flag.
    """

    plural: Optional[int] = None
    default: Optional[str] = None
    locale: Optional[str] = None
    missing_warn: Optional[bool] = None
    fallback_warn: Optional[bool] = None


@dataclass
class TranslatorContext(Generic[MessageT]):
    """Shared translation context.

    One instance exists per middleware and is shared by every request, so
    ``locale`` is a point of cross-request interference: code on the request
    path passes the resolved locale to ``translate`` explicitly instead of
    reading it.

    Attributes:
        messages: Catalogs by locale; may be extended after construction.
        locale: Current locale, a detector, or None.
        fallback_locale: Locale(s) consulted when a key is missing.
        plural_rules: Custom plural selection by locale.
        missing_warn: Log a warning when a key cannot be resolved.
        fallback_warn: Log when a message comes from a fallback locale.
    """

    messages: Dict[str, MessageT] = field(default_factory=dict)
    locale: Any = None
    fallback_locale: FallbackLocale = None
    plural_rules: Dict[str, PluralRule] = field(default_factory=dict)
    missing_warn: bool = True
    fallback_warn: bool = True


def create_translator_context(
    messages: Optional[Mapping[str, MessageT]] = None,
    locale: Any = None,
    fallback_locale: FallbackLocale = None,
    plural_rules: Optional[Mapping[str, PluralRule]] = None,
    missing_warn: bool = True,
    fallback_warn: bool = True,
) -> TranslatorContext[MessageT]:
    """Create a translator context.

    The messages mapping is copied one level deep, so catalogs added to the
    context later do not leak into the caller's mapping.
    """
    context: TranslatorContext[MessageT] = TranslatorContext(
        messages=dict(messages or {}),
        locale=locale,
        fallback_locale=fallback_locale,
        plural_rules=dict(plural_rules or {}),
        missing_warn=missing_warn,
        fallback_warn=fallback_warn,
    )
    logger.info(
        "translator_context_created",
        locales=sorted(context.messages),
        fallback_locale=fallback_locale,
    )
    return context


def default_plural_rule(choice: int, choices_length: int) -> int:
    """Select a plural form index.

    Two forms are "singular | plural" (zero uses the plural form).
    Three or more are "zero | one | many".
    """
    choice = abs(choice)
    if choices_length == 2:
        if not choice:
            return 1
        return 1 if choice > 1 else 0
    return min(choice, 2) if choice else 0


def resolve_value(message: Any, path: str) -> Any:
    """Look up a dotted path in a nested catalog.

    Returns:
        The value found, or None if any segment is missing.
    """
    current = message
    for segment in path.split("."):
        if isinstance(current, Mapping) and segment in current:
            current = current[segment]
        elif isinstance(current, Sequence) and not isinstance(current, str):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError):
                return None
        else:
            return None
    return current


def get_locale(context: TranslatorContext) -> Optional[str]:
    """Return the context's current locale as a string.

    A callable locale is called with no arguments. Async detectors cannot
    be resolved here; pass the resolved locale through ``options.locale``.

    Raises:
        TypeError: If the context locale is an asynchronous detector.
    """
    locale = context.locale
    if callable(locale):
        locale = locale()
        if inspect.isawaitable(locale):
            if inspect.iscoroutine(locale):
                locale.close()
            raise TypeError(
                "context locale is an asynchronous detector; "
                "pass the resolved locale explicitly"
            )
    if locale is None:
        return None
    return str(locale)


def fallback_chain(context: TranslatorContext, locale: str) -> List[str]:
    """Build the ordered list of locales to consult for ``locale``.

    The requested locale comes first, followed by its base language
    (for region-qualified tags) and then the configured fallback locales.
    A mapping fallback contributes the entries for ``locale`` followed by
    its ``"default"`` entries.
    """
    chain: List[str] = [locale] if locale else []

    def add(candidate: Optional[str]) -> None:
        if candidate and candidate not in chain:
            chain.append(candidate)

    if locale and "-" in locale:
        add(locale.split("-")[0])

    fallback = context.fallback_locale
    if isinstance(fallback, Mapping):
        # Locale-specific entries first, the "default" entries always last
        for candidates in (fallback.get(locale), fallback.get("default")):
            for candidate in _as_locale_list(candidates):
                add(candidate)
    else:
        for candidate in _as_locale_list(fallback):
            add(candidate)
    return chain


def _as_locale_list(value: Union[str, Sequence[str], None]) -> Sequence[str]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return value


def format_message(
    message: str,
    list_args: Optional[Sequence[Any]] = None,
    named: Optional[Mapping[str, Any]] = None,
    plural: Optional[int] = None,
    plural_rule: PluralRule = default_plural_rule,
) -> str:
    """Select the plural form and interpolate placeholders.

    Placeholders without a value render as an empty string.
    """
    values: Dict[str, Any] = {}
    if plural is not None:
        values["count"] = plural
        values["n"] = plural
    if list_args:
        values.update({str(i): v for i, v in enumerate(list_args)})
    if named:
        values.update(named)

    choices = _PLURAL_SEPARATOR.split(message)
    if len(choices) > 1:
        choice = plural if plural is not None else 1
        index = plural_rule(choice, len(choices))
        message = choices[max(0, min(index, len(choices) - 1))]
    message = message.replace("\\|", "|")

    def substitute(match: "re.Match[str]") -> str:
        value = values.get(match.group(1))
        return "" if value is None else str(value)

    return _PLACEHOLDER_PATTERN.sub(substitute, message)


def translate(
    context: TranslatorContext,
    key: str,
    *,
    list_args: Optional[Sequence[Any]] = None,
    named: Optional[Mapping[str, Any]] = None,
    options: Optional[TranslateOptions] = None,
) -> Union[str, _NotResolved]:
    """Translate ``key`` using the catalogs held by ``context``.

    Args:
        context: Shared translator context.
        key: Dotted message key (e.g., "errors.not_found").
        list_args: Values for ``{0}``-style placeholders.
        named: Values for ``{name}``-style placeholders.
        options: Plural count, default message and locale override.

    Returns:
        The formatted message, or NOT_RESOLVED if no catalog in the
        fallback chain has the key and no default message was given.
    """
    options = options or TranslateOptions()
    locale = options.locale if options.locale is not None else get_locale(context)
    missing_warn = (
        context.missing_warn if options.missing_warn is None else options.missing_warn
    )
    fallback_warn = (
        context.fallback_warn
        if options.fallback_warn is None
        else options.fallback_warn
    )

    message: Any = None
    target_locale = locale
    for candidate in fallback_chain(context, locale or ""):
        catalog = context.messages.get(candidate)
        if catalog is None:
            continue
        message = resolve_value(catalog, key)
        if message is None and isinstance(catalog, Mapping):
            message = catalog.get(key)
        if isinstance(message, str):
            target_locale = candidate
            break
        message = None

    if message is not None and target_locale != locale and fallback_warn:
        logger.info(
            "used_fallback_translation",
            key=key,
            requested_locale=locale,
            fallback_locale=target_locale,
        )

    if message is None:
        if options.default is not None:
            message = options.default
        else:
            if missing_warn:
                logger.warning("translation_not_found", key=key, locale=locale)
            return NOT_RESOLVED

    rule = _plural_rule_for(context, target_locale)
    return format_message(message, list_args, named, options.plural, rule)


def _plural_rule_for(context: TranslatorContext, locale: Optional[str]) -> PluralRule:
    if locale and locale in context.plural_rules:
        return context.plural_rules[locale]
    if locale:
        try:
            language = LocaleTag(locale).language
        except ValueError:
            return default_plural_rule
        return context.plural_rules.get(language, default_plural_rule)
    return default_plural_rule
