"""Language preference parsing and language matching.

Builds the ranked list of a requester's languages from HTTP request values
and matches it against the languages the application has content for.
"""

from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import structlog
from infrastructure.i18n.models import LanguageItem, LanguageTag, MatchGrade

logger = structlog.get_logger().bind(component="i18n.resolver")

# Answers "does language L have text for key K"; None means no.
TextLookup = Callable[[LanguageTag, Optional[str]], Optional[str]]

# Quality given to a language explicitly selected through the cookie.
COOKIE_LANGUAGE_QUALITY = 2.0


class UserLanguageResolver:
    """Resolves a requester's ranked language preferences.

    Preference order:
    1. Language cookie (if set to a valid tag)
    2. Accept-Language header, by descending quality then header order
    """

    def __init__(self, cookie_name: str = "i18n.langtag"):
        self.cookie_name = cookie_name
        self.log = logger.bind(cookie_name=cookie_name)

    def parse_accept_language(self, accept_language: Optional[str]) -> List[LanguageItem]:
        """Parse an Accept-Language header into ranked LanguageItems.

        Wildcards, invalid tags and q=0 entries are dropped. A malformed
        quality value counts as 1.0.

        Args:
            accept_language: Header value, e.g. "fr-CA,fr;q=0.9,en;q=0.5".

        Returns:
            LanguageItems sorted by quality (descending), then header order.
        """
        if not accept_language:
            return []

        items = []
        for ordinal, part in enumerate(accept_language.split(",")):
            lang_range = part.split(";")[0].strip()
            quality = 1.0

            if ";" in part and "q=" in part:
                try:
                    quality = float(part.split("q=")[1].split(";")[0])
                except ValueError:
                    quality = 1.0

            if not lang_range or lang_range == "*" or quality <= 0:
                continue

            langtag = LanguageTag.get_cached_instance(lang_range)
            if langtag is None:
                self.log.debug("skipped_invalid_language_range", lang_range=lang_range)
                continue

            items.append(
                LanguageItem(
                    language_tag=langtag,
                    quality=min(quality, 1.0),
                    ordinal=ordinal,
                )
            )

        return sorted(items, key=lambda item: (-item.quality, item.ordinal))

    def resolve(
        self,
        accept_language: Optional[str],
        cookie_value: Optional[str] = None,
    ) -> List[LanguageItem]:
        """Resolve the full preference list from header and cookie values."""
        items = self.parse_accept_language(accept_language)

        cookie_tag = LanguageTag.get_cached_instance(cookie_value) if cookie_value else None
        if cookie_tag is not None:
            items.insert(
                0,
                LanguageItem(
                    language_tag=cookie_tag,
                    quality=COOKIE_LANGUAGE_QUALITY,
                    ordinal=-1,
                ),
            )
        elif cookie_value:
            self.log.warning("invalid_language_cookie", cookie_value=cookie_value)

        return items


class LanguageNegotiator:
    """Matches user languages against application languages.

    Runs one pass per match grade, strictest first. Within a pass user
    languages are tried in preference order and, for each, application
    languages in their published order.
    """

    @staticmethod
    def match_lists(
        user_languages: Sequence[LanguageItem],
        app_languages: Iterable[LanguageTag],
        key: Optional[str],
        lookup: Optional[TextLookup],
        max_grade: int = int(MatchGrade.max_match()),
    ) -> Tuple[Optional[LanguageTag], Optional[str]]:
        """Find the best application language for the user's preferences.

        Args:
            user_languages: Ranked user preferences.
            app_languages: Languages the application has content for.
            key: Message key passed to lookup (None to test for any content).
            lookup: Returns the text for (language, key) or None. When omitted
                any grade-compatible application language matches.
            max_grade: Highest MatchGrade pass to attempt; negative means all.

        Returns:
            (matched language, text from lookup), or (None, None).
        """
        if max_grade < 0 or max_grade > int(MatchGrade.max_match()):
            max_grade = int(MatchGrade.max_match())

        app_languages = list(app_languages)
        for grade in range(max_grade + 1):
            match_grade = MatchGrade(grade)
            for item in user_languages:
                user_tag = item.language_tag
                if user_tag is None:
                    continue
                for app_tag in app_languages:
                    if not user_tag.match(app_tag, match_grade):
                        continue
                    text = None
                    if lookup is not None:
                        text = lookup(app_tag, key)
                        if text is None:
                            continue
                    return app_tag, text

        return None, None
