"""
Carries push events from worker processes to the web processes holding the
sockets. Workers publish onto a redis channel; every web process subscribes
and hands each message to its local room router.
"""
import asyncio
import json
import logging
from typing import Any, Optional

import redis
import redis.asyncio as aioredis

from fintrack.core.config import settings
from fintrack.push.rooms import PushChannelRouter

logger = logging.getLogger(__name__)


class RedisPushPublisher:
    """Writes push events onto the redis channel every web process listens to."""

    def __init__(self, redis_client: redis.Redis, channel: str = None):
        self.redis = redis_client
        self.channel = channel or settings.WS_MESSAGE_QUEUE

    def publish(self, room_id: str, event: str, payload: Any) -> int:
        message = json.dumps({"room": room_id, "event": event, "data": payload})
        return self.redis.publish(self.channel, message)

    def close(self):
        self.redis.close()


class PushRelay:
    """Subscribes to the push channel and forwards each event to the local router."""

    def __init__(self, router: PushChannelRouter, redis_client: aioredis.Redis, channel: str = None):
        self.router = router
        self.redis = redis_client
        self.channel = channel or settings.WS_MESSAGE_QUEUE
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(cls, router: PushChannelRouter) -> "PushRelay":
        client = aioredis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            decode_responses=True,
        )
        return cls(router, client)

    async def dispatch(self, raw: str) -> int:
        try:
            message = json.loads(raw)
            room_id = message["room"]
            event = message["event"]
        except (ValueError, KeyError, TypeError):
            logger.warning(f"Ignoring malformed push message: {raw!r}")
            return 0
        return await self.router.publish(room_id, event, message.get("data"))

    async def _listen(self):
        pubsub = self.redis.pubsub()
        await pubsub.subscribe(self.channel)
        logger.info(f"Push relay subscribed to {self.channel}")
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                await self.dispatch(message["data"])
        finally:
            await pubsub.aclose()

    async def _run(self):
        while True:
            try:
                await self._listen()
            except redis.RedisError as e:
                logger.error(f"Push relay lost its subscription, retrying: {e}")
                await asyncio.sleep(1)
            except Exception:
                logger.exception("Push relay failed, restarting")
                await asyncio.sleep(1)

    def start(self):
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self):
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        await self.redis.aclose()
