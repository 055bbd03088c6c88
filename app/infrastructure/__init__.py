"""Infrastructure modules for the localization service.

Centralized infrastructure components:
- i18n: Message resolution, translation caches and response localization
- services: Dependency injection providers (get_settings, get_text_localizer)
"""
