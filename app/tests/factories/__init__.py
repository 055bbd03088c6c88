"""Test data factories for deterministic test data generation."""

from tests.factories.i18n import (
    FakeTranslationRepository,
    make_catalogs,
    make_i18n_settings,
    make_language_items,
    make_request_context,
    make_text_localizer,
)

__all__ = [
    "FakeTranslationRepository",
    "make_catalogs",
    "make_i18n_settings",
    "make_language_items",
    "make_request_context",
    "make_text_localizer",
]
