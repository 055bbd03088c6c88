"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for the localization services.
"""

from functools import lru_cache
from typing import Optional

from core.config import Settings
from infrastructure.i18n.cache import TranslationCache
from infrastructure.i18n.factory import (
    create_nugget_localizer,
    create_text_localizer,
    create_translation_cache,
    create_translation_repository,
    create_url_localizer,
)
from infrastructure.i18n.nuggets import NuggetLocalizer
from infrastructure.i18n.repository import TranslationRepository
from infrastructure.i18n.resolvers import UserLanguageResolver
from infrastructure.i18n.translator import TextLocalizer
from infrastructure.i18n.urls import UrlLocalizer


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    The @lru_cache decorator ensures only ONE instance is created per process.

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_translation_repository() -> TranslationRepository:
    """Get the application-scoped translation repository."""
    return create_translation_repository(get_settings())


@lru_cache
def get_translation_cache() -> TranslationCache:
    """Get the application-scoped translation cache backend."""
    return create_translation_cache(get_settings().cache)


@lru_cache
def get_text_localizer() -> TextLocalizer:
    """
    Get application-scoped text localizer singleton.

    Every request shares this instance, and with it the published language
    set and message tables.

    Returns:
        TextLocalizer: Cached localizer wired to the repository and cache.
    """
    return create_text_localizer(
        get_settings(),
        repository=get_translation_repository(),
        cache=get_translation_cache(),
    )


@lru_cache
def get_nugget_localizer() -> NuggetLocalizer:
    """Get the application-scoped nugget localizer."""
    return create_nugget_localizer(get_settings(), get_text_localizer())


@lru_cache
def get_url_localizer() -> Optional[UrlLocalizer]:
    """Get the URL localizer, or None when URL localization is disabled."""
    return create_url_localizer(get_settings(), get_text_localizer())


@lru_cache
def get_user_language_resolver() -> UserLanguageResolver:
    """Get the resolver turning request headers into ranked user languages."""
    return UserLanguageResolver(cookie_name=get_settings().i18n.COOKIE_NAME)
