import json
import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from conduit.config import settings

logger = logging.getLogger(__name__)

ARTICLE_LIST_PREFIX = "articles:list:"
ARTICLE_DETAIL_PREFIX = "articles:detail:"
TAGS_KEY = "tags:all"


class CacheManager:
    """
    Redis cache-aside for anonymous read views.

    Only views rendered for anonymous callers are cached: anything with a
    viewer carries per-user ``following``/``favorited`` flags. Every method
    is a no-op (reads return None) while Redis is unavailable.
    """

    def __init__(self) -> None:
        self._redis: redis.Redis | None = None
        self._hits: int = 0
        self._misses: int = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await client.ping()
        except RedisError as exc:
            logger.warning("Redis unavailable, caching disabled: %s", exc)
            await client.aclose()
            return
        self._redis = client
        logger.info("Redis connected: %s", settings.REDIS_URL)

    async def disconnect(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    # ------------------------------------------------------------------
    # Core cache operations
    # ------------------------------------------------------------------

    async def get(self, key: str) -> dict | list | None:
        if not self._redis:
            self._misses += 1
            return None
        try:
            data = await self._redis.get(key)
        except RedisError as exc:
            logger.debug("Cache GET error for key=%r: %s", key, exc)
            self._misses += 1
            return None
        if data is None:
            self._misses += 1
            return None
        self._hits += 1
        return json.loads(data)

    async def set(self, key: str, value: dict | list, ttl: int | None = None) -> None:
        if not self._redis:
            return
        try:
            await self._redis.set(key, json.dumps(value), ex=ttl)
        except RedisError as exc:
            logger.debug("Cache SET error for key=%r: %s", key, exc)

    async def delete_pattern(self, pattern: str) -> None:
        """Delete all keys matching *pattern* using SCAN (avoids blocking KEYS)."""
        if not self._redis:
            return
        try:
            keys = [key async for key in self._redis.scan_iter(match=pattern)]
            if keys:
                await self._redis.delete(*keys)
                logger.debug("Cache invalidated %d key(s) matching %r", len(keys), pattern)
        except RedisError as exc:
            logger.debug("Cache DELETE_PATTERN error for pattern=%r: %s", pattern, exc)

    # ------------------------------------------------------------------
    # Domain-level keys and invalidation
    # ------------------------------------------------------------------

    @staticmethod
    def article_list_key(tag: str | None, author: str | None, favorited: str | None,
                         limit: int, offset: int) -> str:
        return f"{ARTICLE_LIST_PREFIX}{tag or ''}:{author or ''}:{favorited or ''}:{limit}:{offset}"

    @staticmethod
    def article_detail_key(slug: str) -> str:
        return f"{ARTICLE_DETAIL_PREFIX}{slug}"

    async def invalidate_article(self, *slugs: str) -> None:
        """
        Purge every list page and the detail entry of each given slug.

        Tag counts may change with any article write, so the tag list goes
        too.
        """
        await self.delete_pattern(f"{ARTICLE_LIST_PREFIX}*")
        for slug in slugs:
            await self.delete_pattern(self.article_detail_key(slug))
        await self.delete_pattern(TAGS_KEY)

    @property
    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }


# Module-level singleton shared across all request handlers.
cache = CacheManager()
