from dotenv import load_dotenv

from core.config import settings
from core.logging import get_module_logger
from server import server

load_dotenv()

server_app = server.handler
logger = get_module_logger()


def list_configs():
    """Log the base settings and the keys of each settings group."""
    base_settings = []
    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            logger.info("configuration_loaded", config_setting=key, keys=list(value))
        else:
            base_settings.append({key: value})
    logger.info("configuration_initialized", base_settings=base_settings)
    logger.info(
        "localization_configured",
        default_language=settings.i18n.DEFAULT_LANGUAGE,
        cache_backend=settings.cache.CACHE_BACKEND,
        url_localization=settings.i18n.URL_LOCALIZATION_ENABLED,
    )


list_configs()
