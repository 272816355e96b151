from contextlib import asynccontextmanager
from typing import AsyncIterator, TYPE_CHECKING

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.logging.setup import configure_logging
from infrastructure.services import get_notification_service, get_settings

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def _get_logger(settings: "Settings") -> BoundLogger:
    return configure_logging(settings=settings)


def _list_configs(settings: "Settings", logger: BoundLogger) -> None:
    config_settings: dict[str, list[object]] = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = _get_logger(settings)

    app.state.settings = settings
    app.state.logger = logger

    logger.info("application_startup")
    _list_configs(settings, logger)

    if not settings.resend.is_configured:
        logger.warning(
            "resend_not_configured",
            message="RESEND_API_KEY is not set; email sends will fail",
        )

    # Build the store and sender up front so configuration errors surface at startup
    notifications = get_notification_service()
    store_health = notifications.store_health()
    logger.info(
        "delivery_store_checked",
        backend=settings.delivery.backend,
        healthy=store_health.is_success,
        error=None if store_health.is_success else store_health.message,
    )

    try:
        yield
    finally:
        logger.info("application_shutdown")
