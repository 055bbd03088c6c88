"""Late URL localization of outgoing responses.

Rewrites same-host URLs in href, src and action attributes so that they
carry the request's language as their first path segment, which saves the
user agent a redirect on the next request.
"""

import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from core.logging import get_module_logger
from infrastructure.i18n.models import LanguageTag, RequestContext
from infrastructure.i18n.translator import TextLocalizer

logger = get_module_logger()

_URL_ATTRIBUTE_PATTERN = re.compile(
    r"(?P<prefix><(?:a|area|form|iframe|img|link|script|source)\b[^>]*?"
    r"\s(?:href|src|action)\s*=\s*)"
    r"(?P<quote>[\"'])(?P<url>.*?)(?P=quote)",
    re.IGNORECASE | re.DOTALL,
)


class UrlLocalizer:
    """Prefixes same-host, not yet localized URLs with a language tag.

    Attributes:
        text_localizer: Source of the application languages, used to tell
            whether a URL already starts with a language segment.
        application_path: Root path of the application ("/" or "/Site").
        urls_to_exclude: URLs matching this pattern are left untouched.
    """

    def __init__(
        self,
        text_localizer: TextLocalizer,
        urls_to_exclude: Optional[str] = None,
        application_path: str = "/",
    ):
        self.text_localizer = text_localizer
        self.application_path = application_path.rstrip("/") or "/"
        self.urls_to_exclude = re.compile(urls_to_exclude) if urls_to_exclude else None

    def process_outgoing(
        self,
        entity: str,
        langtag: str,
        context: Optional[RequestContext] = None,
    ) -> str:
        """Localize the URLs of every matching attribute in entity."""
        if not entity or not langtag:
            return entity
        host = context.host if context else None

        def _rewrite(match: re.Match) -> str:
            url = self.localize_url(match.group("url"), langtag, host)
            quote = match.group("quote")
            return f"{match.group('prefix')}{quote}{url}{quote}"

        return _URL_ATTRIBUTE_PATTERN.sub(_rewrite, entity)

    def localize_url(self, url: str, langtag: str, host: Optional[str] = None) -> str:
        """Insert langtag into url, or return url unchanged if not eligible."""
        if not url or (self.urls_to_exclude and self.urls_to_exclude.search(url)):
            return url

        parts = urlsplit(url)
        if parts.scheme and parts.scheme.lower() not in ("http", "https"):
            return url
        if parts.netloc:
            if not host or parts.netloc.lower() != host.lower():
                return url
        elif not parts.path.startswith("/"):
            return url

        path = parts.path or "/"
        prefix = "" if self.application_path == "/" else self.application_path
        if prefix:
            if path != prefix and not path.startswith(prefix + "/"):
                return url
            path = path[len(prefix) :]

        first_segment = path.lstrip("/").split("/", 1)[0]
        if first_segment and self._is_app_language(first_segment):
            return url

        localized_path = f"{prefix}/{langtag}{path if path != '/' else ''}"
        return urlunsplit(
            (parts.scheme, parts.netloc, localized_path, parts.query, parts.fragment)
        )

    def _is_app_language(self, segment: str) -> bool:
        tag = LanguageTag.get_cached_instance(segment)
        if tag is None:
            return False
        return str(tag) in self.text_localizer.get_app_languages()
