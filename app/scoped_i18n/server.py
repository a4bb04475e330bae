"""Demo FastAPI application wired with request-scoped i18n.

The locale is detected per request from the locale cookie, then the
``locale`` query parameter, then Accept-Language, then the configured
default. Catalogs are loaded lazily from ``MESSAGES_DIR`` the first time
a locale is requested.
"""

from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from starlette.requests import HTTPConnection

from scoped_i18n.configuration import Settings, get_settings
from scoped_i18n.dependencies import TranslationDep
from scoped_i18n.errors import CatalogLoadError, LocaleFormatError
from scoped_i18n.loader import YAMLCatalogLoader
from scoped_i18n.logging import get_module_logger
from scoped_i18n.middleware import I18nMiddleware, define_i18n_middleware
from scoped_i18n.resolvers import (
    detect_locale_from_query_or_header,
    set_cookie_locale,
    try_get_cookie_locale,
)
from scoped_i18n.translator import TranslatorContext

logger = get_module_logger()

BUNDLED_MESSAGES_DIR = Path(__file__).resolve().parent / "locales"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create the demo application.

    Args:
        settings: Settings to use; defaults to the process settings.

    Returns:
        FastAPI app with I18nMiddleware installed.
    """
    settings = settings or get_settings()
    i18n_settings = settings.i18n
    loader = YAMLCatalogLoader(i18n_settings.MESSAGES_DIR or BUNDLED_MESSAGES_DIR)

    async def detect_locale(request: HTTPConnection, context: TranslatorContext) -> str:
        cookie_locale = None
        if i18n_settings.COOKIE_NAME in request.cookies:
            cookie_locale = try_get_cookie_locale(request, name=i18n_settings.COOKIE_NAME)

        if cookie_locale is not None:
            locale = str(cookie_locale)
        else:
            locale = detect_locale_from_query_or_header(
                request,
                default=i18n_settings.DEFAULT_LOCALE,
                query_name=i18n_settings.QUERY_NAME,
                header_name=i18n_settings.HEADER_NAME,
            )
        for candidate in (locale, locale.split("-")[0]):
            try:
                await loader.aload_into(context, candidate)
                break
            except CatalogLoadError:
                continue
        return locale

    fallback = i18n_settings.FALLBACK_LOCALE
    lifecycle = define_i18n_middleware(
        messages={fallback: loader.load(fallback)},
        locale=detect_locale,
        fallback_locale=fallback,
        settings=settings,
    )

    app = FastAPI()
    app.add_middleware(I18nMiddleware, lifecycle=lifecycle)

    @app.get("/")
    async def index(t: TranslationDep, name: str = "h3"):
        return {"message": t("hello", {"name": name})}

    @app.get("/items/{count}")
    async def items(count: int, t: TranslationDep):
        return {"message": t("items.count", count), "locale": t.locale}

    @app.put("/locale/{tag}")
    async def update_locale(tag: str, t: TranslationDep):
        response = JSONResponse({"message": t("locale.updated", [tag])})
        try:
            set_cookie_locale(response, tag, name=i18n_settings.COOKIE_NAME)
        except LocaleFormatError as e:
            logger.info("rejected_locale_cookie", locale=tag)
            raise HTTPException(status_code=400, detail=t("locale.invalid", [tag])) from e
        return response

    return app
