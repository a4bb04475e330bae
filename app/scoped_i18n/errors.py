"""Custom exceptions for the request-scoped i18n system.

All errors raised by the package inherit from I18nError so application
code can catch them in one place. Each concrete error also subclasses the
built-in exception it most closely resembles, so callers that already
catch ValueError/TypeError/RuntimeError keep working.
"""


class I18nError(Exception):
    """Base exception for all i18n errors.

    Example:
        try:
            t = await use_translation(request)
        except I18nError as e:
            logger.error("i18n_error", error=str(e))
    """

    pass


class MiddlewareNotInitializedError(I18nError, RuntimeError):
    """Raised when a translation is requested on an unbound request.

    The request never went through ``on_request_start`` of a lifecycle
    created by ``define_i18n_middleware``.
    """

    DEFAULT_MESSAGE = (
        "middleware not initialized, please setup `on_request_start` and "
        "`on_request_end` hooks (or add `I18nMiddleware` to the app) with the "
        "lifecycle obtained with `define_i18n_middleware`"
    )

    def __init__(self, message: str = DEFAULT_MESSAGE):
        super().__init__(message)


class LocaleFormatError(I18nError, ValueError):
    """Raised when a string is not a well-formed BCP 47 language tag.

    Example:
        >>> LocaleTag("s")
        Traceback (most recent call last):
        ...
        LocaleFormatError: Incorrect locale information provided: 's'
    """

    pass


class TranslateArgumentError(I18nError, TypeError):
    """Raised when a translation function receives an unsupported argument shape."""

    pass


class CatalogLoadError(I18nError):
    """Raised when message catalogs cannot be found or parsed."""

    pass
