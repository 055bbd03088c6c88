"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    SettingsDep,
    TextLocalizerDep,
    RequestLanguagesDep,
    RequestLanguageDep,
)
from infrastructure.services.providers import (
    get_settings,
    get_text_localizer,
    get_nugget_localizer,
    get_url_localizer,
    get_user_language_resolver,
)

__all__ = [
    "SettingsDep",
    "TextLocalizerDep",
    "RequestLanguagesDep",
    "RequestLanguageDep",
    "get_settings",
    "get_text_localizer",
    "get_nugget_localizer",
    "get_url_localizer",
    "get_user_language_resolver",
]
