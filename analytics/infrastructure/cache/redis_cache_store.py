import asyncio
import json
import logging
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from config.settings import CacheSettings
from analytics.application.port.cache_store_port import CacheStorePort
from analytics.domain.analytics_snapshot import AnalyticsSnapshot

logger = logging.getLogger(__name__)

# Anything the backend can throw at us. None of it reaches the caller.
_BACKEND_ERRORS = (RedisError, OSError, asyncio.TimeoutError)


class RedisCacheStore(CacheStorePort):
    def __init__(self, client: redis.Redis | None, settings: CacheSettings | None = None):
        self.client = client
        self.settings = settings or CacheSettings()
        if client is None:
            logger.warning("Redis not configured - caching disabled")

    def is_enabled(self) -> bool:
        return self.client is not None

    async def get(self, key: str) -> Any | None:
        if not self.is_enabled():
            return None
        try:
            data = await self.client.get(key)
        except _BACKEND_ERRORS as exc:
            logger.warning("Cache get failed for %s: %s", key, exc)
            return None
        if data is None:
            logger.debug("Cache MISS: %s", key)
            return None
        try:
            value = json.loads(data)
        except (TypeError, ValueError) as exc:
            logger.warning("Discarding undecodable cache entry %s: %s", key, exc)
            return None
        logger.debug("Cache HIT: %s", key)
        return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        if not self.is_enabled():
            return False
        ttl = ttl or self.settings.default_ttl
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as exc:
            logger.warning("Cannot serialize value for %s: %s", key, exc)
            return False
        try:
            await self.client.setex(key, ttl, serialized)
        except _BACKEND_ERRORS as exc:
            logger.warning("Cache set failed for %s: %s", key, exc)
            return False
        logger.debug("Cached %s (TTL: %ss)", key, ttl)
        return True

    async def delete(self, key: str) -> bool:
        if not self.is_enabled():
            return False
        try:
            await self.client.delete(key)
        except _BACKEND_ERRORS as exc:
            logger.warning("Cache delete failed for %s: %s", key, exc)
            return False
        return True

    async def push_history(self, video_id: str, snapshot: AnalyticsSnapshot) -> bool:
        """
        Prepends the snapshot and trims the list to the newest entries.
        Push and trim are separate commands; concurrent pushes may interleave
        but every trim re-applies the cap.
        """
        if not self.is_enabled():
            return False
        key = self.history_key(video_id)
        try:
            await self.client.lpush(key, json.dumps(snapshot.to_dict()))
            await self.client.ltrim(key, 0, self.settings.history_max_entries - 1)
            await self.client.expire(key, self.settings.history_ttl)
        except _BACKEND_ERRORS as exc:
            logger.warning("History push failed for %s: %s", key, exc)
            return False
        return True

    async def read_history(self, video_id: str, max_days: int = 7) -> list[AnalyticsSnapshot]:
        if not self.is_enabled() or max_days < 1:
            return []
        key = self.history_key(video_id)
        try:
            items = await self.client.lrange(key, 0, max_days - 1)
        except _BACKEND_ERRORS as exc:
            logger.warning("History read failed for %s: %s", key, exc)
            return []

        snapshots: list[AnalyticsSnapshot] = []
        for item in items or []:
            try:
                snapshots.append(AnalyticsSnapshot.from_dict(json.loads(item)))
            except (TypeError, ValueError, AttributeError) as exc:
                logger.warning("Skipping malformed history entry in %s: %s", key, exc)
        return snapshots

    async def increment_rate_limit(self, identifier: str, window_seconds: int | None = None) -> dict:
        """
        Fixed-window counter shared by every process talking to the same Redis.
        Without a working backend every request is allowed.
        """
        unlimited = {"count": 0, "remaining": float("inf"), "allowed": True}
        if not self.is_enabled():
            return unlimited
        key = f"ratelimit:{identifier}"
        try:
            count = await self.client.incr(key)
            if count == 1:
                await self.client.expire(key, window_seconds or self.settings.rate_limit_window_seconds)
        except _BACKEND_ERRORS as exc:
            logger.warning("Rate limit counter failed for %s: %s", key, exc)
            return unlimited
        limit = self.settings.rate_limit_max_requests
        return {"count": count, "remaining": max(0, limit - count), "allowed": count <= limit}

    async def clear_all(self) -> bool:
        if not self.is_enabled():
            return False
        try:
            await self.client.flushdb()
        except _BACKEND_ERRORS as exc:
            logger.warning("Cache flush failed: %s", exc)
            return False
        logger.info("All cache entries cleared")
        return True

    async def stats(self) -> dict:
        if not self.is_enabled():
            return {"enabled": False, "connected": False}
        try:
            connected = bool(await self.client.ping())
        except _BACKEND_ERRORS:
            connected = False
        return {"enabled": True, "connected": connected}

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
