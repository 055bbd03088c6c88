"""Exceptions raised by the i18n system."""


class I18nError(Exception):
    """Base class for i18n errors."""


class InvalidLanguageTagError(I18nError, ValueError):
    """Raised when a language tag cannot be parsed."""


class TranslationNotFoundError(I18nError, FileNotFoundError):
    """Raised when a repository has no catalog for a requested language."""
