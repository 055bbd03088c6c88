"""Fixtures for server module unit tests."""

import gzip

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import (
    HTMLResponse,
    JSONResponse,
    PlainTextResponse,
    RedirectResponse,
    Response,
    StreamingResponse,
)
from fastapi.testclient import TestClient

from infrastructure.i18n import NuggetLocalizer, UrlLocalizer
from infrastructure.services.dependencies import RequestLanguageDep, RequestLanguagesDep
from server.i18n_middleware import LocalizingMiddleware
from tests.factories.i18n import make_i18n_settings, make_text_localizer

PARTIAL_UPDATE_BODY = "20|updatePanel|p1|<b>[[[Welcome]]]</b>|13|hiddenField|h|[[[Welcome]]]|"


def build_app(text_localizer, with_localizers=True, **setting_overrides) -> FastAPI:
    """Create a FastAPI app serving nuggets through LocalizingMiddleware."""
    i18n_settings = make_i18n_settings(**setting_overrides)
    app = FastAPI()
    app.add_middleware(
        LocalizingMiddleware,
        text_localizer=text_localizer,
        settings=i18n_settings,
        nugget_localizer=(
            NuggetLocalizer(text_localizer, i18n_settings) if with_localizers else None
        ),
        url_localizer=UrlLocalizer(text_localizer) if with_localizers else None,
    )

    @app.get("/page")
    def page():
        return HTMLResponse('<a href="/home">[[[Welcome]]]</a>')

    @app.get("/json")
    def json_page():
        return JSONResponse({"title": "[[[Welcome]]]"})

    @app.get("/image")
    def image():
        return Response(b"[[[Welcome]]]", media_type="image/png")

    @app.get("/compressed")
    def compressed():
        return Response(
            gzip.compress(b"[[[Welcome]]]"),
            media_type="text/html",
            headers={"content-encoding": "gzip"},
        )

    @app.get("/i18nSkip/page")
    def skipped():
        return HTMLResponse("[[[Welcome]]]")

    @app.get("/stream")
    def stream():
        def chunks():
            yield "<p>[[[Wel"
            yield "come]]]</p>"
            yield "<p>[[[apples]]]</p>"

        return StreamingResponse(chunks(), media_type="text/html; charset=utf-8")

    @app.get("/latin")
    def latin():
        return Response(
            "café [[[Welcome]]]".encode("latin-1"),
            media_type="text/plain; charset=iso-8859-1",
        )

    @app.get("/delta")
    def delta():
        return PlainTextResponse(PARTIAL_UPDATE_BODY)

    @app.get("/redirect")
    def redirect():
        return RedirectResponse("/account")

    @app.get("/redirect-away")
    def redirect_away():
        return RedirectResponse("https://other.org/account")

    @app.get("/language")
    def language(request: Request, language: RequestLanguageDep, languages: RequestLanguagesDep):
        return PlainTextResponse(
            f"{language}|{','.join(str(item.language_tag) for item in languages)}"
            f"|{request.state.language}"
        )

    return app


@pytest.fixture
def localizing_app():
    return build_app(make_text_localizer())


@pytest.fixture
def client(localizing_app):
    return TestClient(localizing_app)


@pytest.fixture
def app_factory():
    """Build a localizing app over a fresh TextLocalizer."""

    def _build(with_localizers=True, **setting_overrides):
        return build_app(make_text_localizer(), with_localizers, **setting_overrides)

    return _build
