import pytest

from core.config import CacheSettings, I18nSettings, ServerSettings, Settings


def test_i18n_settings_defaults():
    settings = I18nSettings()
    assert settings.DEFAULT_LANGUAGE == "en"
    assert settings.MESSAGE_KEY_IS_VALUE_IN_DEFAULT_LANGUAGE is True
    assert settings.MESSAGE_CONTEXT_ENABLED_FROM_COMMENT is False
    assert settings.async_postback_types == ["updatePanel", "scriptStartupBlock", "pageTitle"]


def test_i18n_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("I18N_DEFAULT_LANGUAGE", "fr-CA")
    monkeypatch.setenv("I18N_MESSAGE_CONTEXT_ENABLED_FROM_COMMENT", "true")
    monkeypatch.setenv("I18N_ASYNC_POSTBACK_TYPES_TO_TRANSLATE", " updatePanel , ,pageTitle")

    settings = I18nSettings()

    assert settings.DEFAULT_LANGUAGE == "fr-CA"
    assert settings.MESSAGE_CONTEXT_ENABLED_FROM_COMMENT is True
    assert settings.async_postback_types == ["updatePanel", "pageTitle"]


def test_i18n_settings_empty_default_language():
    assert I18nSettings(DEFAULT_LANGUAGE="  ").DEFAULT_LANGUAGE == "en"


@pytest.mark.parametrize(
    "backend,expected",
    [("redis", "redis"), (" Redis ", "redis"), ("memcached", "memory"), (None, "memory")],
)
def test_cache_backend_normalized(backend, expected):
    assert CacheSettings(CACHE_BACKEND=backend).CACHE_BACKEND == expected


@pytest.mark.parametrize(
    "path,expected",
    [("/", "/"), ("Site", "/Site"), ("/Site/", "/Site"), ("", "/")],
)
def test_application_path_normalized(path, expected):
    assert ServerSettings(APPLICATION_PATH=path).APPLICATION_PATH == expected


def test_settings_builds_nested_sections():
    settings = Settings(PREFIX="dev-")
    assert isinstance(settings.i18n, I18nSettings)
    assert isinstance(settings.cache, CacheSettings)
    assert isinstance(settings.server, ServerSettings)
    assert settings.is_production is False
