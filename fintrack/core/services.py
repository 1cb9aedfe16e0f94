"""
Process-wide collaborators, built once by the entry point and handed to
request handlers and job handlers explicitly.
"""
import logging
from typing import Optional

import redis
from starlette.concurrency import run_in_threadpool

from fintrack.core.config import settings
from fintrack.push.relay import PushRelay, RedisPushPublisher
from fintrack.push.rooms import PushChannelRouter
from fintrack.reminders.queue import ReminderJobQueue
from fintrack.services.cache import ResponseCache

logger = logging.getLogger(__name__)


def _redis_client() -> redis.Redis:
    return redis.Redis(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        db=settings.REDIS_DB,
        decode_responses=True,
    )


class AppServices:
    """Collaborators of a web process."""

    def __init__(
        self,
        cache: ResponseCache,
        job_queue: ReminderJobQueue,
        push_router: PushChannelRouter,
        push_relay: Optional[PushRelay] = None,
        push_publisher: Optional[RedisPushPublisher] = None,
    ):
        self.cache = cache
        self.job_queue = job_queue
        self.push_router = push_router
        self.push_relay = push_relay
        # set when several web processes share the push channel
        self.push_publisher = push_publisher

    @classmethod
    def from_settings(cls) -> "AppServices":
        from fintrack.reminders.celery_app import celery_app

        router = PushChannelRouter()
        relay = publisher = None
        if settings.PUSH_RELAY_ENABLED:
            relay = PushRelay.from_settings(router)
            publisher = RedisPushPublisher(_redis_client())
        return cls(
            cache=ResponseCache.from_settings(),
            job_queue=ReminderJobQueue(celery_app),
            push_router=router,
            push_relay=relay,
            push_publisher=publisher,
        )

    async def push(self, room_id: str, event: str, payload) -> int:
        """Publish to a room wherever its sockets live.

        Goes through the redis channel when a relay is configured, so the web
        process holding the sockets delivers it; otherwise straight to the
        local router. Returns the subscriber or socket count.
        """
        if self.push_publisher is not None:
            return await run_in_threadpool(self.push_publisher.publish, room_id, event, payload)
        return await self.push_router.publish(room_id, event, payload)

    async def init(self):
        if self.cache.ping():
            logger.info("Redis connection established")
        else:
            logger.warning("Redis is not reachable; cached reads will fall back to the database")
        if self.push_relay is not None:
            self.push_relay.start()

    async def shutdown(self):
        if self.push_relay is not None:
            await self.push_relay.stop()
        if self.push_publisher is not None:
            self.push_publisher.close()
        self.cache.close()


class WorkerServices:
    """Collaborators of a celery worker process."""

    def __init__(self, cache: ResponseCache, publisher):
        self.cache = cache
        self.publisher = publisher

    @classmethod
    def from_settings(cls) -> "WorkerServices":
        client = _redis_client()
        return cls(cache=ResponseCache(client), publisher=RedisPushPublisher(client))

    def close(self):
        self.cache.close()
