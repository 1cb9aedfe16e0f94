"""
Redis-backed response cache for per-user read paths.

Keys are laid out as ``{resource}:{owner_id}:{part}:...`` so every entry of a
user for a resource can be dropped with one prefix scan. Reads that fail fall
back to the database; invalidation failures raise, so a write never reports
success while knowingly leaving a stale entry behind.
"""

import json
import logging
from typing import Any, Optional

import redis

from fintrack.core.config import settings
from fintrack.core.errors import CacheError

logger = logging.getLogger(__name__)


ALLOCATIONS = "allocations"
TRANSACTIONS = "transactions"
REMINDERS = "reminders"
NOTIFICATIONS = "notifications"
DASHBOARD = "dashboard"

# seconds
CACHE_TTLS = {
    ALLOCATIONS: 60 * 5,
    TRANSACTIONS: 60 * 5,
    REMINDERS: 60 * 5,
    NOTIFICATIONS: 60 * 2,
    DASHBOARD: 60 * 3,
}


def cache_key(resource: str, owner_id: str, *parts: Any) -> str:
    return ":".join([resource, str(owner_id)] + ["" if p is None else str(p) for p in parts])


class ResponseCache:
    """Thin JSON cache over a sync redis client."""

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client

    @classmethod
    def from_settings(cls) -> "ResponseCache":
        return cls(
            redis.Redis(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                db=settings.REDIS_DB,
                decode_responses=True,
            )
        )

    def get_json(self, key: str) -> Optional[Any]:
        try:
            raw = self.redis.get(key)
        except redis.RedisError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding undecodable cache entry {key}")
            return None

    def set_json(self, key: str, value: Any, resource: str) -> None:
        try:
            self.redis.set(key, json.dumps(value), ex=CACHE_TTLS[resource])
        except redis.RedisError as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    def invalidate(self, owner_id: str, *resources: str) -> int:
        """Delete every cached entry of ``owner_id`` under each resource. Returns the number of keys removed."""
        removed = 0
        try:
            for resource in resources:
                pattern = f"{resource}:{owner_id}:*"
                keys = list(self.redis.scan_iter(match=pattern, count=500))
                if keys:
                    removed += self.redis.delete(*keys)
        except redis.RedisError as e:
            logger.error(f"Cache invalidation failed for owner {owner_id} ({', '.join(resources)}): {e}")
            raise CacheError() from e
        return removed

    def cached(self, key: str, resource: str, loader):
        """Return the cached payload for ``key``, or build it with ``loader`` and store it."""
        hit = self.get_json(key)
        if hit is not None:
            return hit
        value = loader()
        self.set_json(key, value, resource)
        return value

    def ping(self) -> bool:
        try:
            return bool(self.redis.ping())
        except redis.RedisError:
            return False

    def close(self) -> None:
        try:
            self.redis.close()
        except redis.RedisError as e:
            logger.warning(f"Error closing cache connection: {e}")
