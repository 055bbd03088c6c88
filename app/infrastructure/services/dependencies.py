"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for the localization dependencies.
"""

from typing import Annotated, List

from fastapi import Depends, Request

from core.config import Settings
from infrastructure.i18n.models import LanguageItem, LanguageTag
from infrastructure.i18n.translator import TextLocalizer
from infrastructure.services.providers import get_settings, get_text_localizer


def get_request_languages(request: Request) -> List[LanguageItem]:
    """Ranked user languages attached to the request by LocalizingMiddleware."""
    return getattr(request.state, "user_languages", [])


def get_request_language(request: Request) -> LanguageTag:
    """Principal language attached to the request by LocalizingMiddleware."""
    language = getattr(request.state, "language", None)
    if language is None:
        return get_text_localizer().default_language_tag
    return language


# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Shared text localizer dependency
TextLocalizerDep = Annotated[TextLocalizer, Depends(get_text_localizer)]

# Request language dependencies
RequestLanguagesDep = Annotated[List[LanguageItem], Depends(get_request_languages)]
RequestLanguageDep = Annotated[LanguageTag, Depends(get_request_language)]

__all__ = [
    "SettingsDep",
    "TextLocalizerDep",
    "RequestLanguagesDep",
    "RequestLanguageDep",
]
