"""Tests for scoped_i18n.middleware module."""

from unittest.mock import patch

import pytest

from scoped_i18n.middleware import (
    BINDING_STATE_KEY,
    CONTEXT_STATE_KEY,
    RESOLVED_LOCALE_STATE_KEY,
    I18nMiddleware,
    bind_detector,
    define_i18n_middleware,
)
from scoped_i18n.models import RequestLocaleBinding
from scoped_i18n.resolvers import detect_locale_from_accept_language_header
from tests.factories.i18n import make_context, make_lifecycle, make_messages, make_request


@pytest.mark.unit
class TestDefineI18nMiddleware:
    """Tests for define_i18n_middleware()."""

    def test_defaults_to_header_detection(self):
        lifecycle = make_lifecycle()

        assert lifecycle.source == "header"
        assert lifecycle.detector is detect_locale_from_accept_language_header
        assert lifecycle.original_locale is None

    def test_custom_detector(self):
        def detector(request, context):
            return "ja"

        lifecycle = make_lifecycle(locale=detector)

        assert lifecycle.source == "custom"
        assert lifecycle.detector is detector
        assert lifecycle.original_locale is detector

    def test_static_locale_warns(self):
        with patch("scoped_i18n.middleware.logger") as mock_logger:
            lifecycle = make_lifecycle(locale="ja")

        assert lifecycle.source == "static"
        assert lifecycle.detector(make_request()) == "ja"
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args[0][0] == "static_locale_configured"
        assert mock_logger.warning.call_args[1]["locale"] == "ja"

    def test_detector_does_not_warn(self):
        with patch("scoped_i18n.middleware.logger") as mock_logger:
            make_lifecycle(locale=lambda request: "ja")

        mock_logger.warning.assert_not_called()

    def test_context_holds_messages(self, messages):
        lifecycle = make_lifecycle()

        assert set(lifecycle.context.messages) == set(messages)
        assert lifecycle.context.fallback_locale == "en"

    def test_settings_provide_defaults(self, test_settings):
        lifecycle = define_i18n_middleware(messages=make_messages(), settings=test_settings)

        assert lifecycle.context.fallback_locale == "en"
        assert lifecycle.context.missing_warn is test_settings.i18n.MISSING_WARN
        assert lifecycle.context.fallback_warn is test_settings.i18n.FALLBACK_WARN

    def test_explicit_options_override_settings(self, test_settings):
        lifecycle = define_i18n_middleware(
            messages=make_messages(),
            fallback_locale=["ja", "en"],
            missing_warn=False,
            settings=test_settings,
        )

        assert lifecycle.context.fallback_locale == ["ja", "en"]
        assert lifecycle.context.missing_warn is False


@pytest.mark.unit
class TestLifecycleHooks:
    """Tests for on_request_start / on_request_end."""

    def test_start_binds_request(self):
        lifecycle = make_lifecycle()
        request = make_request(headers={"Accept-Language": "ja,en"})

        lifecycle.on_request_start(request)

        state = request.scope["state"]
        assert state[CONTEXT_STATE_KEY] is lifecycle.context
        binding = state[BINDING_STATE_KEY]
        assert isinstance(binding, RequestLocaleBinding)
        assert binding.source == "header"
        assert binding.detector() == "ja"
        assert lifecycle.context.locale is binding.detector

    def test_end_restores_original_locale(self):
        lifecycle = make_lifecycle()
        request = make_request(headers={"Accept-Language": "ja"})

        lifecycle.on_request_start(request)
        lifecycle.on_request_end(request)

        assert lifecycle.context.locale is None
        state = request.scope["state"]
        assert CONTEXT_STATE_KEY not in state
        assert BINDING_STATE_KEY not in state
        assert RESOLVED_LOCALE_STATE_KEY not in state

    def test_end_restores_configured_detector(self):
        def detector(request, context):
            return "ja"

        lifecycle = make_lifecycle(locale=detector)
        request = make_request()

        lifecycle.on_request_start(request)
        assert lifecycle.context.locale is not detector
        lifecycle.on_request_end(request)

        assert lifecycle.context.locale is detector

    def test_end_without_state(self):
        lifecycle = make_lifecycle(locale="ja")
        request = make_request()

        lifecycle.on_request_end(request)

        assert lifecycle.context.locale == "ja"

    def test_each_request_gets_its_own_binding(self):
        lifecycle = make_lifecycle()
        first = make_request(headers={"Accept-Language": "ja"})
        second = make_request(headers={"Accept-Language": "en"})

        lifecycle.on_request_start(first)
        lifecycle.on_request_start(second)

        assert first.scope["state"][BINDING_STATE_KEY].detector() == "ja"
        assert second.scope["state"][BINDING_STATE_KEY].detector() == "en"


@pytest.mark.unit
class TestBindDetector:
    """Tests for bind_detector()."""

    def test_two_argument_detector(self):
        context = make_context()
        request = make_request()

        bound = bind_detector(lambda r, c: (r, c), request, context)

        assert bound() == (request, context)

    def test_one_argument_detector(self):
        request = make_request()

        bound = bind_detector(lambda r: r, request, make_context())

        assert bound() is request

    def test_varargs_detector(self):
        context = make_context()
        request = make_request()

        bound = bind_detector(lambda *args: args, request, context)

        assert bound() == (request, context)

    def test_optional_context_parameter(self):
        context = make_context()
        request = make_request()

        bound = bind_detector(lambda r, c=None: c, request, context)

        assert bound() is context

    def test_async_detector_returns_awaitable(self):
        async def detector(request, context):
            return "ja"

        bound = bind_detector(detector, make_request(), make_context())
        coroutine = bound()

        assert hasattr(coroutine, "__await__")
        coroutine.close()


@pytest.mark.unit
class TestI18nMiddleware:
    """Tests for the ASGI middleware wrapper."""

    @pytest.mark.asyncio
    async def test_lifespan_passes_through(self):
        seen = []

        async def app(scope, receive, send):
            seen.append(scope)

        middleware = I18nMiddleware(app, lifecycle=make_lifecycle())
        scope = {"type": "lifespan"}
        await middleware(scope, None, None)

        assert seen == [scope]
        assert "state" not in scope

    @pytest.mark.asyncio
    async def test_binds_during_request(self):
        lifecycle = make_lifecycle()
        seen = {}

        async def app(scope, receive, send):
            seen["context"] = scope["state"].get(CONTEXT_STATE_KEY)
            seen["binding"] = scope["state"].get(BINDING_STATE_KEY)

        middleware = I18nMiddleware(app, lifecycle=lifecycle)
        scope = make_request(headers={"Accept-Language": "ja"}).scope
        await middleware(scope, None, None)

        assert seen["context"] is lifecycle.context
        assert seen["binding"].detector() == "ja"
        assert CONTEXT_STATE_KEY not in scope["state"]
        assert lifecycle.context.locale is None

    @pytest.mark.asyncio
    async def test_end_runs_on_error(self):
        lifecycle = make_lifecycle(locale=lambda request: "ja")

        async def app(scope, receive, send):
            raise RuntimeError("boom")

        middleware = I18nMiddleware(app, lifecycle=lifecycle)
        scope = make_request().scope

        with pytest.raises(RuntimeError, match="boom"):
            await middleware(scope, None, None)

        assert lifecycle.context.locale is lifecycle.original_locale
        assert BINDING_STATE_KEY not in scope["state"]
