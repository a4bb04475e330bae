"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for the request's translation function.
"""

from typing import Annotated

from fastapi import Depends, Request

from scoped_i18n.accessor import TranslationFunction, use_translation


async def get_translation(request: Request) -> TranslationFunction:
    """
    Get the translation function for the current request.

    Usage:
        @router.get("/hello")
        def hello(t: TranslationDep):
            return {"message": t("hello", {"name": "h3"})}

    Raises:
        MiddlewareNotInitializedError: If I18nMiddleware is not installed.
    """
    return await use_translation(request)


TranslationDep = Annotated[TranslationFunction, Depends(get_translation)]

__all__ = ["get_translation", "TranslationDep"]
