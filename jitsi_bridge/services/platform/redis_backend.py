import json
from typing import Any, Dict, Optional

import redis.asyncio as redis
from loguru import logger

from jitsi_bridge.services.platform.base import EventPublisher, KVStore

USER_EVENTS_CHANNEL = "user:{user_id}:events"


class RedisBackend(KVStore, EventPublisher):
    """Key/value persistence and per-user event broadcast on Redis."""

    def __init__(self, client: "redis.Redis"):
        self.redis_client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisBackend":
        logger.info(f"Initializing RedisBackend for {url.split('@')[-1]}")
        return cls(redis.from_url(url))

    async def get(self, key: str) -> Optional[bytes]:
        value = await self.redis_client.get(key)
        if isinstance(value, str):
            return value.encode("utf-8")
        return value

    async def set(self, key: str, value: bytes) -> None:
        await self.redis_client.set(key, value)
        logger.debug(f"Stored {len(value)} bytes under {key}")

    async def publish(
        self, event: str, payload: Optional[Dict[str, Any]], user_id: str
    ) -> None:
        channel = USER_EVENTS_CHANNEL.format(user_id=user_id)
        message = json.dumps({"event": event, "data": payload or {}})
        subscribers = await self.redis_client.publish(channel, message)
        logger.debug(f"Published {event} to {channel}, {subscribers} subscribers")

    async def close(self) -> None:
        await self.redis_client.aclose()
