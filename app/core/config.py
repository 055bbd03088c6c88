"""Localization service configuration settings."""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.stdlib.get_logger().bind(component="config")


class I18nSettings(BaseSettings):
    """Message resolution and response localization settings."""

    DEFAULT_LANGUAGE: str = Field(default="en", alias="I18N_DEFAULT_LANGUAGE")
    MESSAGE_KEY_IS_VALUE_IN_DEFAULT_LANGUAGE: bool = Field(
        default=True, alias="I18N_MESSAGE_KEY_IS_VALUE_IN_DEFAULT_LANGUAGE"
    )
    MESSAGE_CONTEXT_ENABLED_FROM_COMMENT: bool = Field(
        default=False, alias="I18N_MESSAGE_CONTEXT_ENABLED_FROM_COMMENT"
    )
    TRANSLATIONS_DIR: Optional[str] = Field(default=None, alias="I18N_TRANSLATIONS_DIR")
    COOKIE_NAME: str = Field(default="i18n.langtag", alias="I18N_COOKIE_NAME")

    ASYNC_POSTBACK_TYPES_TO_TRANSLATE: str = Field(
        default="updatePanel,scriptStartupBlock,pageTitle",
        alias="I18N_ASYNC_POSTBACK_TYPES_TO_TRANSLATE",
    )
    PARTIAL_UPDATE_HEADER: str = Field(
        default="X-MicrosoftAjax", alias="I18N_PARTIAL_UPDATE_HEADER"
    )
    PARTIAL_UPDATE_HEADER_VALUE: str = Field(
        default="Delta=true", alias="I18N_PARTIAL_UPDATE_HEADER_VALUE"
    )

    CONTENT_TYPES_TO_LOCALIZE: str = Field(
        default=(
            r"^(?:(?:(?:text|application)/"
            r"(?:plain|html|xml|javascript|x-javascript|json|x-json))(?:\s*;.*)?)$"
        ),
        alias="I18N_CONTENT_TYPES_TO_LOCALIZE",
    )
    URLS_TO_EXCLUDE_FROM_PROCESSING: str = Field(
        default=r"(?:\.(?:less|css)(?:\?|$))|(?i:i18nSkip|glimpse|trace|elmah)",
        alias="I18N_URLS_TO_EXCLUDE_FROM_PROCESSING",
    )
    URL_LOCALIZATION_ENABLED: bool = Field(
        default=False, alias="I18N_URL_LOCALIZATION_ENABLED"
    )

    NUGGET_BEGIN_TOKEN: str = Field(default="[[[", alias="I18N_NUGGET_BEGIN_TOKEN")
    NUGGET_END_TOKEN: str = Field(default="]]]", alias="I18N_NUGGET_END_TOKEN")
    NUGGET_DELIMITER_TOKEN: str = Field(
        default="|||", alias="I18N_NUGGET_DELIMITER_TOKEN"
    )
    NUGGET_COMMENT_TOKEN: str = Field(default="///", alias="I18N_NUGGET_COMMENT_TOKEN")
    NUGGET_PARAMETER_BEGIN_TOKEN: str = Field(
        default="(((", alias="I18N_NUGGET_PARAMETER_BEGIN_TOKEN"
    )
    NUGGET_PARAMETER_END_TOKEN: str = Field(
        default=")))", alias="I18N_NUGGET_PARAMETER_END_TOKEN"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("DEFAULT_LANGUAGE", mode="before")
    @classmethod
    def _strip_default_language(cls, v: Optional[str]) -> str:
        """Fall back to "en" when the variable is set but empty."""
        if v is None or not str(v).strip():
            return "en"
        return str(v).strip()

    @property
    def async_postback_types(self) -> list[str]:
        """Section types of partial-update fragments eligible for nugget processing."""
        return [
            t.strip()
            for t in self.ASYNC_POSTBACK_TYPES_TO_TRANSLATE.split(",")
            if t.strip()
        ]


class CacheSettings(BaseSettings):
    """Translation cache backend settings."""

    CACHE_BACKEND: str = Field(default="memory", alias="I18N_CACHE_BACKEND")
    REDIS_HOST: str = Field(default="localhost", alias="REDIS_HOST")
    REDIS_PORT: int = Field(default=6379, alias="REDIS_PORT")
    REDIS_DB: int = Field(default=0, alias="REDIS_DB")
    REDIS_SOCKET_TIMEOUT: int = Field(default=5, alias="REDIS_SOCKET_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("CACHE_BACKEND", mode="before")
    @classmethod
    def _normalize_backend(cls, v: Optional[str]) -> str:
        backend = (v or "memory").strip().lower()
        if backend not in ("memory", "redis"):
            logger.warning("unknown_cache_backend", backend=backend)
            return "memory"
        return backend


class ServerSettings(BaseSettings):
    """HTTP server settings."""

    APPLICATION_PATH: str = Field(default="/", alias="APPLICATION_PATH")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("APPLICATION_PATH", mode="before")
    @classmethod
    def _normalize_application_path(cls, v: Optional[str]) -> str:
        """Application path starts with a slash and has no trailing slash."""
        path = (v or "/").strip()
        if not path.startswith("/"):
            path = "/" + path
        if len(path) > 1:
            path = path.rstrip("/")
        return path


class Settings(BaseSettings):
    """Localization service configuration settings."""

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "production"

    i18n: I18nSettings
    cache: CacheSettings
    server: ServerSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production."""
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        settings_map = {
            "i18n": I18nSettings,
            "cache": CacheSettings,
            "server": ServerSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the settings instance
settings = Settings()
