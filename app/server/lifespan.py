from contextlib import asynccontextmanager
from typing import AsyncIterator, TYPE_CHECKING

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.events import (
    get_registered_events,
    shutdown_event_executor,
    start_event_executor,
)
from infrastructure.events.bootstrap import register_infrastructure_handlers
from infrastructure.logging import configure_logging
from infrastructure.services import get_notification_service, get_settings

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


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


def _activate_notifications(app: FastAPI, logger: BoundLogger) -> None:
    register_infrastructure_handlers()
    start_event_executor()

    try:
        service = get_notification_service()
    except Exception as exc:
        logger.error("notification_providers_activation_failed", error=str(exc))
        raise

    app.state.notification_service = service
    channels = [c.value for c in service.get_available_channels()]
    if not channels:
        logger.warning("no_notification_channels_available")
    logger.info(
        "notification_providers_activated",
        providers=service.list_providers(),
        channels=channels,
        events=get_registered_events(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = configure_logging()

    app.state.settings = settings
    app.state.logger = logger

    logger.info("application_startup", git_sha=settings.GIT_SHA)
    _list_configs(settings, logger)

    _activate_notifications(app, logger)

    yield

    logger.info("application_shutdown")
    shutdown_event_executor(wait=True)
