from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.logging import get_module_logger
from infrastructure.services.providers import (
    get_nugget_localizer,
    get_settings,
    get_text_localizer,
    get_url_localizer,
    get_user_language_resolver,
)
from server.i18n_middleware import LocalizingMiddleware

logger = get_module_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Populate the application language set before serving requests."""
    app_languages = get_text_localizer().get_app_languages()
    logger.info("application_startup", app_languages=list(app_languages))
    yield
    logger.info("application_shutdown")


def create_app() -> FastAPI:
    """Build the FastAPI application with response localization installed."""
    settings = get_settings()
    app = FastAPI(lifespan=lifespan)

    allow_origins = (
        ["*"]
        if settings.is_production
        else [
            "http://localhost:8000",
            "http://127.0.0.1:8000",
        ]
    )
    app.add_middleware(
        LocalizingMiddleware,
        text_localizer=get_text_localizer(),
        settings=settings.i18n,
        nugget_localizer=get_nugget_localizer(),
        url_localizer=get_url_localizer(),
        language_resolver=get_user_language_resolver(),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return JSONResponse({"status": "ok"})

    if not settings.is_production:
        # No authentication; development environments only.
        @app.post("/i18n/reset")
        def reset_translations():
            """Discard cached languages and message tables."""
            removed = get_text_localizer().reset()
            return JSONResponse({"removed": removed})

    return app


handler = create_app()
