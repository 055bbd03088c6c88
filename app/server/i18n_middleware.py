import io
import re
from typing import Optional

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.config import I18nSettings
from core.logging import bind_request_context, clear_request_context, get_module_logger
from infrastructure.i18n.models import RequestContext
from infrastructure.i18n.nuggets import NuggetLocalizer
from infrastructure.i18n.resolvers import UserLanguageResolver
from infrastructure.i18n.response_filter import ResponseFilter, resolve_encoding
from infrastructure.i18n.translator import TextLocalizer
from infrastructure.i18n.urls import UrlLocalizer

logger = get_module_logger()

_CHARSET_PATTERN = re.compile(r";\s*charset=([^;]+)", re.IGNORECASE)


class LocalizingMiddleware(BaseHTTPMiddleware):
    """Localizes eligible text responses.

    Attaches the ranked user languages and the principal language to
    request.state, then pipes the body of every response whose content type
    is localizable, which is not content-encoded and whose path is not
    excluded through a ResponseFilter.
    """

    def __init__(
        self,
        app,
        text_localizer: TextLocalizer,
        settings: I18nSettings,
        nugget_localizer: Optional[NuggetLocalizer] = None,
        url_localizer: Optional[UrlLocalizer] = None,
        language_resolver: Optional[UserLanguageResolver] = None,
    ):
        super().__init__(app)
        self.text_localizer = text_localizer
        self.settings = settings
        self.nugget_localizer = nugget_localizer
        self.url_localizer = url_localizer
        self.language_resolver = language_resolver or UserLanguageResolver(
            cookie_name=settings.COOKIE_NAME
        )
        self.content_types_to_localize = re.compile(settings.CONTENT_TYPES_TO_LOCALIZE)
        self.urls_to_exclude = re.compile(settings.URLS_TO_EXCLUDE_FROM_PROCESSING)

    async def dispatch(self, request: Request, call_next):
        user_languages = self.language_resolver.resolve(
            request.headers.get("accept-language"),
            request.cookies.get(self.settings.COOKIE_NAME),
        )
        principal_language = await run_in_threadpool(
            self.text_localizer.get_principal_app_language, user_languages
        )
        request.state.user_languages = user_languages
        request.state.language = principal_language

        bind_request_context(path=request.url.path, language=str(principal_language))
        try:
            return await self._localize_response(request, call_next, principal_language)
        finally:
            clear_request_context()

    async def _localize_response(self, request: Request, call_next, principal_language):
        user_languages = request.state.user_languages
        response = await call_next(request)
        self._localize_location(request, response, principal_language)
        if not self._should_localize(request, response):
            return response

        content_type = response.headers.get("content-type", "")
        charset = _CHARSET_PATTERN.search(content_type)
        context = RequestContext(
            user_languages=user_languages,
            principal_language=principal_language,
            host=request.headers.get("host"),
            encoding=resolve_encoding(charset.group(1) if charset else None),
            is_partial_update=self._is_partial_update(request),
        )

        output = io.BytesIO()
        response_filter = ResponseFilter(
            output,
            context,
            nugget_localizer=self.nugget_localizer,
            url_localizer=self.url_localizer,
            async_postback_types=self.settings.async_postback_types,
        )
        async for chunk in response.body_iterator:
            if isinstance(chunk, str):
                chunk = chunk.encode(context.encoding)
            response_filter.write(chunk)
        await run_in_threadpool(response_filter.flush)

        body = output.getvalue()
        localized = Response(
            content=body,
            status_code=response.status_code,
            background=response.background,
        )
        localized.raw_headers = [
            (name, value)
            for name, value in response.raw_headers
            if name.lower() != b"content-length"
        ] + [(b"content-length", str(len(body)).encode("latin-1"))]

        logger.debug(
            "response_localized",
            filter_state=response_filter.state.value,
            content_length=len(body),
        )
        return localized

    def _localize_location(self, request: Request, response: Response, principal_language) -> None:
        """Add the request language to same-host redirect targets."""
        location = response.headers.get("location")
        if self.url_localizer is None or not location or principal_language is None:
            return
        if self.urls_to_exclude.search(request.url.path):
            return
        localized = self.url_localizer.localize_url(
            location, str(principal_language), request.headers.get("host")
        )
        if localized != location:
            response.headers["location"] = localized

    def _should_localize(self, request: Request, response: Response) -> bool:
        if self.nugget_localizer is None and self.url_localizer is None:
            return False
        content_type = response.headers.get("content-type")
        if not content_type or not self.content_types_to_localize.match(content_type):
            return False
        content_encoding = response.headers.get("content-encoding", "").strip().lower()
        if content_encoding and content_encoding != "identity":
            return False
        if self.urls_to_exclude.search(request.url.path):
            return False
        return True

    def _is_partial_update(self, request: Request) -> bool:
        value = request.headers.get(self.settings.PARTIAL_UPDATE_HEADER)
        if not value:
            return False
        return self.settings.PARTIAL_UPDATE_HEADER_VALUE.lower() in value.lower()
