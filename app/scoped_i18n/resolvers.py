"""Locale resolution from the parts of an HTTP request.

Provides accessors for the Accept-Language header, cookies, query
parameters and the URL path, plus ready-made locale detectors for
``define_i18n_middleware``.

Accessors named ``get_*`` raise LocaleFormatError for malformed tags;
the ``try_get_*`` variants return None instead.
"""

from typing import Any, Callable, List, Optional, Union

from starlette.requests import HTTPConnection
from starlette.responses import Response

from scoped_i18n.errors import LocaleFormatError
from scoped_i18n.logging import get_module_logger
from scoped_i18n.models import LocaleTag
from scoped_i18n.utils import parse_accept_language

logger = get_module_logger()

DEFAULT_LANG_TAG = "en-US"
DEFAULT_COOKIE_NAME = "i18n_locale"
ACCEPT_LANGUAGE_HEADER = "accept-language"
DEFAULT_QUERY_NAME = "locale"

HeaderParser = Callable[[Optional[str]], List[str]]
PathParser = Callable[[str], str]
LocaleValue = Union[str, LocaleTag]


def get_header_languages(
    request: HTTPConnection,
    *,
    name: str = ACCEPT_LANGUAGE_HEADER,
    parser: HeaderParser = parse_accept_language,
) -> List[str]:
    """Get the language tags from a request header, in header order."""
    return parser(request.headers.get(name))


def get_header_language(
    request: HTTPConnection,
    *,
    name: str = ACCEPT_LANGUAGE_HEADER,
    parser: HeaderParser = parse_accept_language,
) -> str:
    """Get the first language tag from a request header, or ""."""
    languages = get_header_languages(request, name=name, parser=parser)
    return languages[0] if languages else ""


def get_header_locales(
    request: HTTPConnection,
    *,
    name: str = ACCEPT_LANGUAGE_HEADER,
    parser: HeaderParser = parse_accept_language,
) -> List[LocaleTag]:
    """Get every language tag from a request header as LocaleTag.

    Raises:
        LocaleFormatError: If any tag is malformed.
    """
    return [LocaleTag(tag) for tag in get_header_languages(request, name=name, parser=parser)]


def get_header_locale(
    request: HTTPConnection,
    *,
    name: str = ACCEPT_LANGUAGE_HEADER,
    default: LocaleValue = DEFAULT_LANG_TAG,
    parser: HeaderParser = parse_accept_language,
) -> LocaleTag:
    """Get the first header language as LocaleTag, or ``default``.

    Raises:
        LocaleFormatError: If the first tag (or the default) is malformed.
    """
    language = get_header_language(request, name=name, parser=parser)
    return LocaleTag.from_value(language or default)


def try_get_header_locale(
    request: HTTPConnection,
    *,
    name: str = ACCEPT_LANGUAGE_HEADER,
    default: LocaleValue = DEFAULT_LANG_TAG,
    parser: HeaderParser = parse_accept_language,
) -> Optional[LocaleTag]:
    """Like ``get_header_locale`` but returns None for malformed tags."""
    try:
        return get_header_locale(request, name=name, default=default, parser=parser)
    except LocaleFormatError:
        return None


def get_cookie_locale(
    request: HTTPConnection,
    *,
    name: str = DEFAULT_COOKIE_NAME,
    default: LocaleValue = DEFAULT_LANG_TAG,
) -> LocaleTag:
    """Get the locale stored in a cookie, or ``default`` if the cookie is absent.

    Raises:
        LocaleFormatError: If the cookie value (or the default) is malformed.
    """
    return LocaleTag.from_value(request.cookies.get(name) or default)


def try_get_cookie_locale(
    request: HTTPConnection,
    *,
    name: str = DEFAULT_COOKIE_NAME,
    default: LocaleValue = DEFAULT_LANG_TAG,
) -> Optional[LocaleTag]:
    """Like ``get_cookie_locale`` but returns None for malformed tags."""
    try:
        return get_cookie_locale(request, name=name, default=default)
    except LocaleFormatError:
        return None


def set_cookie_locale(
    response: Response,
    locale: LocaleValue,
    *,
    name: str = DEFAULT_COOKIE_NAME,
    path: str = "/",
    **cookie_options: Any,
) -> None:
    """Write the locale cookie on ``response``.

    Only ``Path`` is set unless more cookie options are given, so the
    header reads ``<name>=<tag>; Path=/``.

    Raises:
        LocaleFormatError: If ``locale`` is not a valid language tag.
    """
    try:
        tag = LocaleTag.from_value(locale)
    except LocaleFormatError as e:
        raise LocaleFormatError(f"locale is invalid: {locale}") from e

    cookie_options.setdefault("samesite", None)
    response.set_cookie(name, str(tag), path=path, **cookie_options)


def get_query_locale(
    request: HTTPConnection,
    *,
    name: str = DEFAULT_QUERY_NAME,
    default: LocaleValue = DEFAULT_LANG_TAG,
) -> LocaleTag:
    """Get the locale from a query parameter, or ``default`` if absent.

    Raises:
        LocaleFormatError: If the parameter value (or the default) is malformed.
    """
    return LocaleTag.from_value(request.query_params.get(name) or default)


def try_get_query_locale(
    request: HTTPConnection,
    *,
    name: str = DEFAULT_QUERY_NAME,
    default: LocaleValue = DEFAULT_LANG_TAG,
) -> Optional[LocaleTag]:
    """Like ``get_query_locale`` but returns None for malformed tags."""
    try:
        return get_query_locale(request, name=name, default=default)
    except LocaleFormatError:
        return None


def first_path_segment(path: str) -> str:
    """Return the first segment of a URL path ("/ja-JP/items" -> "ja-JP")."""
    return path.lstrip("/").split("/", 1)[0]


def get_path_locale(
    request: HTTPConnection,
    *,
    parser: PathParser = first_path_segment,
    default: LocaleValue = DEFAULT_LANG_TAG,
) -> LocaleTag:
    """Get the locale encoded in the URL path, or ``default`` if empty.

    Raises:
        LocaleFormatError: If the path segment (or the default) is malformed.
    """
    return LocaleTag.from_value(parser(request.url.path) or default)


def try_get_path_locale(
    request: HTTPConnection,
    *,
    parser: PathParser = first_path_segment,
    default: LocaleValue = DEFAULT_LANG_TAG,
) -> Optional[LocaleTag]:
    """Like ``get_path_locale`` but returns None for malformed tags."""
    try:
        return get_path_locale(request, parser=parser, default=default)
    except LocaleFormatError:
        return None


def detect_locale_from_accept_language_header(
    request: HTTPConnection, context: Any = None
) -> str:
    """Locale detector using the first Accept-Language tag.

    This is the detector used when ``define_i18n_middleware`` is given no
    ``locale`` option. An empty header yields "", so pair it with a
    fallback locale on the translator context.

    Returns:
        The first tag in header order (e.g., "en-US" for
        "en-US,en;q=0.9,ja;q=0.8"), or "".
    """
    return get_header_language(request)


def detect_locale_from_query_or_header(
    request: HTTPConnection,
    context: Any = None,
    *,
    default: LocaleValue = DEFAULT_LANG_TAG,
    query_name: str = DEFAULT_QUERY_NAME,
    header_name: str = ACCEPT_LANGUAGE_HEADER,
) -> str:
    """Best-effort locale detector that never raises.

    Tries the ``query_name`` query parameter, then the first tag of the
    ``header_name`` header. A malformed value or any other error while
    reading the request downgrades silently to ``default``.
    """
    try:
        candidate = request.query_params.get(query_name) or get_header_language(
            request, name=header_name
        )
        if candidate:
            return str(LocaleTag(candidate))
    except Exception as e:
        logger.debug("locale_detection_fell_back", error=str(e), default=str(default))
    return str(default)
