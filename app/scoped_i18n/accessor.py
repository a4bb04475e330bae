"""Translation accessor for request handlers.

``use_translation`` returns a translation function bound to the locale
resolved for the current request. It is always awaited: synchronous
detectors simply resolve without suspending.

Example:
    @app.get("/")
    async def index(request: Request):
        t = await use_translation(request)
        return {"message": t("hello", {"name": "h3"})}
"""

import inspect
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Tuple

from starlette.requests import HTTPConnection

from scoped_i18n.errors import MiddlewareNotInitializedError, TranslateArgumentError
from scoped_i18n.middleware import (
    BINDING_STATE_KEY,
    CONTEXT_STATE_KEY,
    RESOLVED_LOCALE_STATE_KEY,
)
from scoped_i18n.models import RequestLocaleBinding
from scoped_i18n.translator import (
    NOT_RESOLVED,
    TranslateOptions,
    TranslatorContext,
    translate,
)

ParsedArgs = Tuple[Optional[Sequence[Any]], Optional[Mapping[str, Any]], TranslateOptions]


def _is_plural(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def parse_translate_args(*args: Any) -> ParsedArgs:
    """Parse the optional arguments of a translation call.

    Accepted shapes (after the key):
        ()
        (plural) / (plural, options)
        (default) / (default, options)
        (list) / (list, plural | default | options)
        (named) / (named, plural | default | options)

    Returns:
        Tuple of (list_args, named, options).

    Raises:
        TranslateArgumentError: For any other shape.
    """
    if len(args) > 2:
        raise TranslateArgumentError(
            f"translation takes at most 2 arguments after the key ({len(args)} given)"
        )

    list_args: Optional[Sequence[Any]] = None
    named: Optional[Mapping[str, Any]] = None
    options = TranslateOptions()
    if not args:
        return list_args, named, options

    first, rest = args[0], args[1:]
    second = rest[0] if rest else None

    if _is_plural(first) or isinstance(first, str):
        if second is not None and not isinstance(second, TranslateOptions):
            raise TranslateArgumentError(
                "a plural count or default message may only be followed by TranslateOptions"
            )
        options = _copy_options(second)
        if _is_plural(first):
            options.plural = first
        else:
            options.default = first
        return list_args, named, options

    if _is_list(first):
        list_args = list(first)
    elif isinstance(first, Mapping):
        named = first
    elif isinstance(first, TranslateOptions) and not rest:
        return list_args, named, _copy_options(first)
    else:
        raise TranslateArgumentError(
            f"unsupported translation argument: {type(first).__name__}"
        )

    if second is None:
        pass
    elif _is_plural(second):
        options.plural = second
    elif isinstance(second, str):
        options.default = second
    elif isinstance(second, TranslateOptions):
        options = _copy_options(second)
    else:
        raise TranslateArgumentError(
            f"unsupported translation argument: {type(second).__name__}"
        )
    return list_args, named, options


def _copy_options(options: Optional[TranslateOptions]) -> TranslateOptions:
    if options is None:
        return TranslateOptions()
    return TranslateOptions(
        plural=options.plural,
        default=options.default,
        locale=options.locale,
        missing_warn=options.missing_warn,
        fallback_warn=options.fallback_warn,
    )


class TranslationFunction:
    """Translation function bound to a context and a resolved locale.

    Calling it returns the formatted message, or the key itself when no
    message is found. It never raises for a missing key.
    """

    def __init__(self, context: TranslatorContext, locale: str):
        self.context = context
        self.locale = locale

    def __call__(self, key: str, *args: Any) -> str:
        list_args, named, options = parse_translate_args(*args)
        # The request's locale overrides any caller-supplied one
        options.locale = self.locale
        result = translate(
            self.context, key, list_args=list_args, named=named, options=options
        )
        return key if result is NOT_RESOLVED else result

    def __repr__(self) -> str:
        return f"TranslationFunction(locale={self.locale!r})"


async def resolve_request_locale(request: HTTPConnection) -> str:
    """Resolve the locale for ``request`` through its own binding.

    The first call runs the bound detector (awaiting it if it returns an
    awaitable) and caches the result in request state; later calls in the
    same request reuse it. Detector errors propagate unchanged.

    Raises:
        MiddlewareNotInitializedError: If the request was never bound.
    """
    state = request.scope.get("state") or {}
    if state.get(CONTEXT_STATE_KEY) is None:
        raise MiddlewareNotInitializedError()

    resolved = state.get(RESOLVED_LOCALE_STATE_KEY)
    if resolved is not None:
        return resolved

    binding: Optional[RequestLocaleBinding] = state.get(BINDING_STATE_KEY)
    if binding is None:
        raise MiddlewareNotInitializedError()

    locale = binding.detector()
    if inspect.isawaitable(locale):
        locale = await locale
    resolved = "" if locale is None else str(locale)
    state[RESOLVED_LOCALE_STATE_KEY] = resolved
    return resolved


async def use_translation(request: HTTPConnection) -> TranslationFunction:
    """Get a translation function for the current request.

    Raises:
        MiddlewareNotInitializedError: If the i18n lifecycle did not run
            ``on_request_start`` for this request.
    """
    locale = await resolve_request_locale(request)
    context: TranslatorContext = request.scope["state"][CONTEXT_STATE_KEY]
    return TranslationFunction(context, locale)
