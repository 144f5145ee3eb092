from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from loguru import logger

from jitsi_bridge.constants import API_PREFIX, PLATFORM_BOT_TOKEN, REDIS_URL, SITE_URL
from jitsi_bridge.routes.main import router
from jitsi_bridge.services.configuration import ConfigurationHolder
from jitsi_bridge.services.container import ServiceContainer
from jitsi_bridge.services.platform.mattermost import MattermostRESTPlatform
from jitsi_bridge.services.platform.redis_backend import RedisBackend


def create_app(services: Optional[ServiceContainer] = None) -> FastAPI:
    """Build the HTTP app. Without ``services`` they are wired from the environment."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if services is not None:
            app.state.services = services
            yield
            return

        holder = ConfigurationHolder()
        config = holder.current()
        if not PLATFORM_BOT_TOKEN:
            logger.warning("PLATFORM_BOT_TOKEN is not set, platform calls will be rejected")
        if not config.integration.command_token:
            logger.warning("SLASH_COMMAND_TOKEN is not set, slash command requests are not verified")
        if not config.integration.action_secret:
            logger.warning("ACTION_SECRET is not set, meeting selections are not verified")

        backend = RedisBackend.from_url(REDIS_URL)
        app.state.services = ServiceContainer.build(
            config=holder,
            platform=MattermostRESTPlatform(SITE_URL, PLATFORM_BOT_TOKEN or ""),
            kv_store=backend,
            publisher=backend,
        )
        logger.info(
            f"Jitsi bridge ready: primary={config.primary.host} "
            f"secondary={config.secondary.host} shortener={config.shortener.enabled}"
        )
        try:
            yield
        finally:
            await backend.close()

    app = FastAPI(title="Jitsi Bridge", lifespan=lifespan)
    app.include_router(router, prefix=API_PREFIX)
    return app
