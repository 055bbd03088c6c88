"""Text localizer: resolves message keys to localized text.

Holds the application language set and the per-language message tables in a
TranslationCache. Both are populated lazily on first access under a single
lock with a double-checked read, so each is fetched from the repository at
most once no matter how many request threads race for it. Steady-state reads
never take the lock.
"""

import re
import threading
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple, Union

from core.config import I18nSettings
from core.logging import get_module_logger
from infrastructure.i18n.cache import TranslationCache
from infrastructure.i18n.exceptions import TranslationNotFoundError
from infrastructure.i18n.models import (
    DEFAULT_FALLBACK_PASS,
    LanguageItem,
    LanguageTag,
    MatchGrade,
    key_from_msgid_and_comment,
)
from infrastructure.i18n.repository import TranslationRepository
from infrastructure.i18n.resolvers import LanguageNegotiator

logger = get_module_logger()

APP_LANGUAGES_CACHE_KEY = "i18n.AppLanguages"

_UNICODE_ESCAPE_PATTERN = re.compile(r"\\U(?P<value>[0-9A-F]{4})", re.IGNORECASE)

LangTagLike = Union[LanguageTag, str]


def _decode_unicode_escapes(msgkey: str) -> Optional[str]:
    """Replace \\uXXXX sequences with the characters they encode."""
    try:
        return _UNICODE_ESCAPE_PATTERN.sub(
            lambda m: chr(int(m.group("value"), 16)), msgkey
        )
    except (ValueError, OverflowError):
        return None


class TextLocalizer:
    """Resolves message keys against the user's languages.

    Attributes:
        repository: Source of languages and translation catalogs.
        cache: Backend holding the published language set and message tables.
        environment: Scope prefix of every cache key.
        default_language_tag: Language reported when falling back on the key.
    """

    def __init__(
        self,
        repository: TranslationRepository,
        cache: TranslationCache,
        settings: I18nSettings,
        environment: str = "production",
    ):
        self.repository = repository
        self.cache = cache
        self.environment = environment
        self.message_key_is_value_in_default_language = (
            settings.MESSAGE_KEY_IS_VALUE_IN_DEFAULT_LANGUAGE
        )
        self.message_context_enabled_from_comment = (
            settings.MESSAGE_CONTEXT_ENABLED_FROM_COMMENT
        )
        self.default_language_tag = LanguageTag.get_cached_instance(
            settings.DEFAULT_LANGUAGE
        ) or LanguageTag.get_cached_instance("en")

        self._sync = threading.Lock()
        # (published mapping, hydrated mapping) of the last app language read.
        self._app_languages_memo = None

        logger.info(
            "initialized_text_localizer",
            environment=environment,
            default_language=str(self.default_language_tag),
        )

    @property
    def app_languages_cache_key(self) -> str:
        return f"{self.environment}.{APP_LANGUAGES_CACHE_KEY}"

    def messages_cache_key(self, langtag: LanguageTag) -> str:
        return f"{self.environment}.{langtag.global_key}"

    # Application languages

    def get_app_languages(self) -> Mapping[str, LanguageTag]:
        """Get every language the application has content for.

        Returns:
            Read-only mapping of canonical tag string to LanguageTag.

        Raises:
            Any exception raised by the repository while populating.
        """
        published = self.cache.get(self.app_languages_cache_key)
        if published is not None:
            return self._hydrate(published)

        with self._sync:
            published = self.cache.get(self.app_languages_cache_key)
            if published is not None:
                return self._hydrate(published)

            languages = [
                language.language_short_tag
                for language in self.repository.get_available_languages()
            ]

            if self.message_key_is_value_in_default_language and not any(
                self.default_language_tag.equals(langtag) for langtag in languages
            ):
                languages.append(str(self.default_language_tag))

            app_languages = {}
            for langtag in languages:
                tag = LanguageTag.get_cached_instance(langtag)
                if tag is not None and self.is_language_valid(tag):
                    app_languages[str(tag)] = str(tag)

            self.cache.set(self.app_languages_cache_key, app_languages)
            logger.info(
                "app_languages_populated",
                environment=self.environment,
                languages=list(app_languages),
            )
            return self._hydrate(self.cache.get(self.app_languages_cache_key))

    def _hydrate(self, published: Mapping[str, str]) -> Mapping[str, LanguageTag]:
        memo = self._app_languages_memo
        if memo is not None and memo[0] is published:
            return memo[1]
        hydrated = MappingProxyType(
            {
                key: LanguageTag.get_cached_instance(value)
                for key, value in published.items()
            }
        )
        self._app_languages_memo = (published, hydrated)
        return hydrated

    # Message tables

    def is_language_valid(self, langtag: Optional[LangTagLike]) -> bool:
        """Check whether one or more messages exist for a language.

        The default language is always valid when message keys double as its
        values. A cached table is checked without loading anything; otherwise
        the repository is asked whether a catalog exists.
        """
        tag = LanguageTag.get_cached_instance(langtag)
        if tag is None:
            return False

        if self.message_key_is_value_in_default_language and tag == self.default_language_tag:
            return True

        if self.cache.exists(self.messages_cache_key(tag)):
            return True

        return self.repository.translation_exists(str(tag))

    def ensure_loaded(self, langtag: LangTagLike) -> bool:
        """Make sure the message table of a language is in the cache.

        Returns:
            True if the table is published, False if the repository has no
            catalog for the language.
        """
        tag = LanguageTag.get_cached_instance(langtag)
        if tag is None:
            return False

        key = self.messages_cache_key(tag)
        if self.cache.exists(key):
            return True

        with self._sync:
            # Another thread may have published the table while we waited.
            if self.cache.exists(key):
                return True

            try:
                messages = self.repository.get_translation(str(tag)).to_messages()
            except TranslationNotFoundError:
                logger.debug("no_catalog_for_language", langtag=str(tag))
                if not (
                    self.message_key_is_value_in_default_language
                    and tag == self.default_language_tag
                ):
                    return False
                # Keys are the default language's text; no catalog is needed.
                messages = {}

            self.cache.set(key, messages)
            logger.info(
                "message_table_loaded",
                langtag=str(tag),
                message_count=len(messages),
            )
        return True

    def lookup(self, langtag: LangTagLike, msgkey: str) -> Optional[str]:
        """Look up the text stored for a key in one language.

        Returns:
            The text, or None if the language or key is unknown or the stored
            text is empty.
        """
        tag = LanguageTag.get_cached_instance(langtag)
        if tag is None or msgkey is None:
            return None

        if "\r\n" in msgkey:
            msgkey = msgkey.replace("\r\n", "\n")

        key = self.messages_cache_key(tag)
        messages = self.cache.get(key)
        if messages is None:
            if not self.ensure_loaded(tag):
                return None
            messages = self.cache.get(key)
        if messages is None:
            return None

        return messages.get(msgkey) or None

    def try_get_text_for(self, langtag: LangTagLike, msgkey: Optional[str]) -> Optional[str]:
        """Look for a message in one language.

        Args:
            langtag: Language to search.
            msgkey: Message key, or None to test for any content at all.

        Returns:
            The text; "" when msgkey is None and the language has content;
            msgkey itself for the default language when keys double as
            values; otherwise None.
        """
        if not self.is_language_valid(langtag):
            return None

        if msgkey is None:
            return ""

        text = self.lookup(langtag, msgkey)
        if text is None and _UNICODE_ESCAPE_PATTERN.search(msgkey):
            decoded = _decode_unicode_escapes(msgkey)
            if decoded is not None and decoded != msgkey:
                text = self.lookup(langtag, decoded)

        if text is not None:
            return text

        if (
            self.message_key_is_value_in_default_language
            and self.default_language_tag.equals(langtag)
        ):
            return msgkey

        return None

    # Resolution

    def get_text(
        self,
        msgid: Optional[str],
        msgcomment: Optional[str],
        languages: Sequence[LanguageItem],
        max_passes: Optional[int] = -1,
    ) -> Tuple[Optional[str], Optional[LanguageTag]]:
        """Resolve a message for the user's languages.

        Args:
            msgid: Message identifier.
            msgcomment: Disambiguating comment (part of the key only when
                MESSAGE_CONTEXT_ENABLED_FROM_COMMENT is set).
            languages: Ranked user languages.
            max_passes: Number of match grades to try. MatchGrade.max_match()+1
                or more, -1 and None all mean unbounded and also allow the
                default-language fallback. Any other negative count tries no
                grades and never falls back.

        Returns:
            (text, matched language), or (None, None) if nothing matched and
            the fallback pass was not allowed.
        """
        if max_passes is None or max_passes == -1 or max_passes > DEFAULT_FALLBACK_PASS:
            max_passes = DEFAULT_FALLBACK_PASS
        elif max_passes < 0:
            return None, None
        fallback_on_default = max_passes == DEFAULT_FALLBACK_PASS

        msgkey = key_from_msgid_and_comment(
            msgid, msgcomment, self.message_context_enabled_from_comment
        )

        langtag, text = LanguageNegotiator.match_lists(
            languages,
            self.get_app_languages().values(),
            msgkey,
            self.try_get_text_for,
            min(max_passes, int(MatchGrade.max_match())),
        )

        if text is not None:
            # The key itself came back; never leak a comment-augmented key.
            if text == msgkey:
                return msgid, langtag
            return text, langtag

        if fallback_on_default:
            return msgid, self.default_language_tag

        return None, None

    def get_principal_app_language(self, languages: Sequence[LanguageItem]) -> LanguageTag:
        """Resolve the single application language for a request."""
        langtag, _ = LanguageNegotiator.match_lists(
            languages,
            self.get_app_languages().values(),
            None,
            self.try_get_text_for,
        )
        return langtag or self.default_language_tag

    def reset(self) -> int:
        """Discard the language set and every message table of this environment.

        Returns:
            Number of cache entries removed.
        """
        with self._sync:
            removed = self.cache.delete_scope(f"{self.environment}.")
            self._app_languages_memo = None
        logger.info(
            "translation_cache_reset",
            environment=self.environment,
            removed=removed,
        )
        return removed
