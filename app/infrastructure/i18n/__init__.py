"""i18n system - response localization framework.

Resolves message keys ("nuggets") embedded in served content into localized
text, negotiating the requester's languages against the languages the
application has translations for.

Main components:
- models: LanguageTag, MatchGrade, LanguageItem, RequestContext, Translation
- repository: TranslationRepository and YAMLTranslationRepository
- cache: TranslationCache backends (in-memory, Redis)
- translator: TextLocalizer, the cached message resolver
- resolvers: UserLanguageResolver and LanguageNegotiator
- nuggets: NuggetLocalizer
- urls: UrlLocalizer
- response_filter: ResponseFilter applied to outgoing bodies
"""

from infrastructure.i18n.cache import (
    InMemoryTranslationCache,
    RedisTranslationCache,
    TranslationCache,
)
from infrastructure.i18n.exceptions import (
    I18nError,
    InvalidLanguageTagError,
    TranslationNotFoundError,
)
from infrastructure.i18n.models import (
    Language,
    LanguageItem,
    LanguageTag,
    MatchGrade,
    RequestContext,
    Translation,
    TranslationItem,
)
from infrastructure.i18n.nuggets import NuggetLocalizer
from infrastructure.i18n.repository import TranslationRepository, YAMLTranslationRepository
from infrastructure.i18n.resolvers import LanguageNegotiator, UserLanguageResolver
from infrastructure.i18n.response_filter import FilterState, ResponseFilter
from infrastructure.i18n.translator import TextLocalizer
from infrastructure.i18n.urls import UrlLocalizer

__all__ = [
    "LanguageTag",
    "MatchGrade",
    "LanguageItem",
    "RequestContext",
    "Language",
    "Translation",
    "TranslationItem",
    "I18nError",
    "InvalidLanguageTagError",
    "TranslationNotFoundError",
    "TranslationCache",
    "InMemoryTranslationCache",
    "RedisTranslationCache",
    "TranslationRepository",
    "YAMLTranslationRepository",
    "TextLocalizer",
    "UserLanguageResolver",
    "LanguageNegotiator",
    "NuggetLocalizer",
    "UrlLocalizer",
    "ResponseFilter",
    "FilterState",
]
