"""Request-scoped internationalization for ASGI applications.

Detects each caller's locale, binds a translation function to the current
request and renders parameterized messages.

Main components:
- middleware: define_i18n_middleware, I18nLifecycle and the I18nMiddleware ASGI wrapper
- accessor: use_translation and the TranslationFunction it returns
- resolvers: header/cookie/query/path locale accessors and locale detectors
- translator: TranslatorContext and the translate engine
- loader: YAML/JSON catalog loading
- models: LocaleTag and RequestLocaleBinding
"""

from scoped_i18n.accessor import (
    TranslationFunction,
    parse_translate_args,
    use_translation,
)
from scoped_i18n.errors import (
    CatalogLoadError,
    I18nError,
    LocaleFormatError,
    MiddlewareNotInitializedError,
    TranslateArgumentError,
)
from scoped_i18n.loader import CatalogLoader, YAMLCatalogLoader
from scoped_i18n.middleware import (
    I18nLifecycle,
    I18nMiddleware,
    define_i18n_middleware,
)
from scoped_i18n.models import LocaleTag, RequestLocaleBinding
from scoped_i18n.resolvers import (
    detect_locale_from_accept_language_header,
    detect_locale_from_query_or_header,
    get_cookie_locale,
    get_header_language,
    get_header_languages,
    get_header_locale,
    get_header_locales,
    get_path_locale,
    get_query_locale,
    set_cookie_locale,
    try_get_cookie_locale,
    try_get_header_locale,
    try_get_path_locale,
    try_get_query_locale,
)
from scoped_i18n.translator import (
    NOT_RESOLVED,
    TranslateOptions,
    TranslatorContext,
    create_translator_context,
    translate,
)
from scoped_i18n.utils import is_locale, parse_accept_language, validate_language_tag

__all__ = [
    "CatalogLoadError",
    "CatalogLoader",
    "I18nError",
    "I18nLifecycle",
    "I18nMiddleware",
    "LocaleFormatError",
    "LocaleTag",
    "MiddlewareNotInitializedError",
    "NOT_RESOLVED",
    "RequestLocaleBinding",
    "TranslateArgumentError",
    "TranslateOptions",
    "TranslationFunction",
    "TranslatorContext",
    "YAMLCatalogLoader",
    "create_translator_context",
    "define_i18n_middleware",
    "detect_locale_from_accept_language_header",
    "detect_locale_from_query_or_header",
    "get_cookie_locale",
    "get_header_language",
    "get_header_languages",
    "get_header_locale",
    "get_header_locales",
    "get_path_locale",
    "get_query_locale",
    "is_locale",
    "parse_accept_language",
    "parse_translate_args",
    "set_cookie_locale",
    "translate",
    "try_get_cookie_locale",
    "try_get_header_locale",
    "try_get_path_locale",
    "try_get_query_locale",
    "use_translation",
    "validate_language_tag",
]
