"""Request-scoped i18n binding.

``define_i18n_middleware`` builds one shared TranslatorContext and returns
an ``I18nLifecycle`` with two hooks that the host pipeline runs around
every request:

    on_request_start -> handler (use_translation) -> on_request_end

Per request, the start hook stores a RequestLocaleBinding (the locale
detector curried to that request) on ``request.state`` and attaches the
shared context. The end hook restores the context's original locale and
detaches everything.

Concurrency:
    The TranslatorContext is shared by all in-flight requests, and the start
    hook writes ``context.locale`` for compatibility with direct
    ``translate(context, key)`` calls. Requests interleave at every await
    (async detectors, catalog loads), so that field may hold another
    request's detector at any time. ``use_translation`` never reads it: the
    locale is resolved through the request's own binding and passed to
    ``translate`` explicitly. Code that reads ``context.locale`` directly is
    subject to cross-request interference. If the host aborts a request
    without running ``on_request_end``, the field is not restored until the
    next request overwrites it.

Usage:
    lifecycle = define_i18n_middleware(
        messages={"en": {"hello": "hello, {name}"}, "ja": {"hello": "こんにちは, {name}"}},
        locale=detect_locale_from_accept_language_header,
    )
    app.add_middleware(I18nMiddleware, lifecycle=lifecycle)
"""

import functools
import inspect
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Receive, Scope, Send

from scoped_i18n.configuration import Settings, get_settings
from scoped_i18n.logging import bind_request_context, get_module_logger
from scoped_i18n.models import RequestLocaleBinding
from scoped_i18n.resolvers import detect_locale_from_accept_language_header
from scoped_i18n.translator import (
    FallbackLocale,
    PluralRule,
    TranslatorContext,
    create_translator_context,
)

logger = get_module_logger()

CONTEXT_STATE_KEY = "i18n"
BINDING_STATE_KEY = "_i18n_locale"
RESOLVED_LOCALE_STATE_KEY = "_i18n_resolved_locale"

LocaleDetector = Callable[..., Any]


def bind_detector(
    detector: LocaleDetector, request: HTTPConnection, context: TranslatorContext
) -> Callable[[], Any]:
    """Curry ``detector`` to one request and the shared context.

    Detectors accepting two positional arguments receive
    ``(request, context)``; one-argument detectors receive ``(request,)``.
    """
    try:
        signature = inspect.signature(detector)
    except (TypeError, ValueError):
        return functools.partial(detector, request, context)

    positional = [
        p
        for p in signature.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]
    has_varargs = any(p.kind is p.VAR_POSITIONAL for p in signature.parameters.values())
    if has_varargs or len(positional) >= 2:
        return functools.partial(detector, request, context)
    return functools.partial(detector, request)


@dataclass
class I18nLifecycle:
    """Lifecycle hooks produced by ``define_i18n_middleware``.

    Attributes:
        context: The shared translator context.
        original_locale: The ``locale`` option as configured (None, a
            string, or a detector); restored on every request end.
        detector: The effective detector used for every request.
        source: How the detector was configured ("header", "static", "custom").
    """

    context: TranslatorContext
    original_locale: Any
    detector: LocaleDetector
    source: str

    def on_request_start(self, request: HTTPConnection) -> None:
        """Bind the locale detector and the shared context to ``request``."""
        binding = RequestLocaleBinding(
            detector=bind_detector(self.detector, request, self.context),
            source=self.source,
        )
        setattr(request.state, BINDING_STATE_KEY, binding)
        self.context.locale = binding.detector
        setattr(request.state, CONTEXT_STATE_KEY, self.context)

    def on_request_end(self, request: HTTPConnection) -> None:
        """Restore the original locale and detach the context from ``request``."""
        self.context.locale = self.original_locale
        state = request.scope.get("state")
        if state is None:
            return
        for key in (CONTEXT_STATE_KEY, BINDING_STATE_KEY, RESOLVED_LOCALE_STATE_KEY):
            state.pop(key, None)


def define_i18n_middleware(
    *,
    messages: Optional[Mapping[str, Any]] = None,
    locale: Any = None,
    fallback_locale: FallbackLocale = None,
    plural_rules: Optional[Mapping[str, PluralRule]] = None,
    missing_warn: Optional[bool] = None,
    fallback_warn: Optional[bool] = None,
    settings: Optional[Settings] = None,
) -> I18nLifecycle:
    """Define the i18n lifecycle for an application.

    Args:
        messages: Catalogs by locale (locale -> nested key -> message).
        locale: None to detect from Accept-Language, a locale detector
            ``(request, context) -> str | Awaitable[str]``, or a static
            locale string (discouraged: it disables per-request detection).
        fallback_locale: Locale(s) consulted for missing keys.
            Defaults to ``settings.i18n.FALLBACK_LOCALE``.
        plural_rules: Custom plural selection by locale.
        missing_warn: Log missing keys. Defaults to ``settings.i18n.MISSING_WARN``.
        fallback_warn: Log fallback usage. Defaults to ``settings.i18n.FALLBACK_WARN``.
        settings: Settings providing defaults. Defaults to the process settings.

    Returns:
        I18nLifecycle with ``on_request_start`` and ``on_request_end`` hooks.
    """
    i18n_settings = (settings or get_settings()).i18n
    context = create_translator_context(
        messages=messages,
        locale=locale,
        fallback_locale=(
            i18n_settings.FALLBACK_LOCALE if fallback_locale is None else fallback_locale
        ),
        plural_rules=plural_rules,
        missing_warn=i18n_settings.MISSING_WARN if missing_warn is None else missing_warn,
        fallback_warn=(
            i18n_settings.FALLBACK_WARN if fallback_warn is None else fallback_warn
        ),
    )

    # A detector function always wins over a static locale
    if callable(locale):
        detector, source = locale, "custom"
    elif locale is not None:
        static_locale = str(locale)
        logger.warning(
            "static_locale_configured",
            locale=static_locale,
            hint="dynamic locale detection is recommended",
        )

        def detector(request: HTTPConnection, context: Any = None) -> str:
            return static_locale

        source = "static"
    else:
        detector, source = detect_locale_from_accept_language_header, "header"

    logger.info("i18n_middleware_defined", detector_source=source)
    return I18nLifecycle(
        context=context, original_locale=locale, detector=detector, source=source
    )


class I18nMiddleware:
    """Pure ASGI middleware running an I18nLifecycle around each request.

    ``on_request_end`` runs in a ``finally`` block so the shared context is
    restored on error paths too. Lifespan and other non-request scopes pass
    through untouched.
    """

    def __init__(self, app: ASGIApp, lifecycle: I18nLifecycle) -> None:
        self.app = app
        self.lifecycle = lifecycle

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        scope.setdefault("state", {})
        connection = HTTPConnection(scope, receive)
        with bind_request_context(
            request_path=scope.get("path"),
            request_method=scope.get("method", "WEBSOCKET"),
        ):
            self.lifecycle.on_request_start(connection)
            try:
                await self.app(scope, receive, send)
            finally:
                self.lifecycle.on_request_end(connection)
