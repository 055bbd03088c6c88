"""Factory functions for creating i18n components.

Provides convenience functions for wiring the text localizer and its
collaborators from application settings.
"""

from pathlib import Path
from typing import Optional

import structlog
from core.config import CacheSettings, Settings
from infrastructure.i18n.cache import (
    InMemoryTranslationCache,
    RedisTranslationCache,
    TranslationCache,
    create_redis_client,
)
from infrastructure.i18n.nuggets import NuggetLocalizer
from infrastructure.i18n.repository import TranslationRepository, YAMLTranslationRepository
from infrastructure.i18n.translator import TextLocalizer
from infrastructure.i18n.urls import UrlLocalizer

logger = structlog.get_logger()


def default_translations_dir() -> Path:
    """Locate app/locales relative to this package."""
    # This file is at .../app/infrastructure/i18n/factory.py
    return Path(__file__).resolve().parents[2] / "locales"


def create_translation_cache(cache_settings: CacheSettings) -> TranslationCache:
    """Create the cache backend selected by CACHE_BACKEND."""
    if cache_settings.CACHE_BACKEND == "redis":
        client = create_redis_client(
            host=cache_settings.REDIS_HOST,
            port=cache_settings.REDIS_PORT,
            db=cache_settings.REDIS_DB,
            socket_timeout=cache_settings.REDIS_SOCKET_TIMEOUT,
        )
        logger.info("translation_cache_created", backend="redis")
        return RedisTranslationCache(client)

    logger.info("translation_cache_created", backend="memory")
    return InMemoryTranslationCache()


def create_translation_repository(
    settings: Settings,
    translations_dir: Optional[Path] = None,
) -> TranslationRepository:
    """Create the YAML repository for the configured translations directory.

    Raises:
        ValueError: If the directory does not exist.
    """
    if translations_dir is None:
        configured = settings.i18n.TRANSLATIONS_DIR
        translations_dir = Path(configured) if configured else default_translations_dir()

    return YAMLTranslationRepository(
        translations_dir=translations_dir,
        use_comment_in_key=settings.i18n.MESSAGE_CONTEXT_ENABLED_FROM_COMMENT,
    )


def create_text_localizer(
    settings: Settings,
    repository: Optional[TranslationRepository] = None,
    cache: Optional[TranslationCache] = None,
) -> TextLocalizer:
    """Create and configure a TextLocalizer.

    Usage:
        # Defaults: YAML catalogs in app/locales, backend from settings
        localizer = create_text_localizer(settings)

        # Custom repository, process-local cache
        localizer = create_text_localizer(
            settings,
            repository=my_repository,
            cache=InMemoryTranslationCache(),
        )
    """
    localizer = TextLocalizer(
        repository=repository or create_translation_repository(settings),
        cache=cache or create_translation_cache(settings.cache),
        settings=settings.i18n,
        environment=settings.ENVIRONMENT,
    )
    logger.info(
        "text_localizer_created",
        environment=settings.ENVIRONMENT,
        cache_backend=type(localizer.cache).__name__,
    )
    return localizer


def create_nugget_localizer(settings: Settings, text_localizer: TextLocalizer) -> NuggetLocalizer:
    return NuggetLocalizer(text_localizer=text_localizer, settings=settings.i18n)


def create_url_localizer(
    settings: Settings, text_localizer: TextLocalizer
) -> Optional[UrlLocalizer]:
    """Create the URL localizer, or None when URL localization is disabled."""
    if not settings.i18n.URL_LOCALIZATION_ENABLED:
        return None
    return UrlLocalizer(
        text_localizer=text_localizer,
        urls_to_exclude=settings.i18n.URLS_TO_EXCLUDE_FROM_PROCESSING,
        application_path=settings.server.APPLICATION_PATH,
    )
