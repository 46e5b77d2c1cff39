"""Redis cache service for LLM recommendation batches."""

import hashlib
import json
import logging
from typing import Any

import redis.asyncio as redis

from gander.config import settings

logger = logging.getLogger(__name__)

# TTLs in seconds
TTL_RECOMMENDATIONS = 30 * 60     # 30 minutes, LLM recommendation batches


class CacheService:
    """Redis-backed cache with typed TTLs."""

    def __init__(self):
        self._redis: redis.Redis | None = None

    async def _get_redis(self) -> redis.Redis | None:
        if self._redis is None:
            try:
                self._redis = redis.from_url(
                    settings.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._redis.ping()
            except Exception as e:
                logger.warning(f"Redis unavailable, cache disabled: {e}")
                self._redis = None
                return None
        return self._redis

    async def get(self, key: str) -> Any | None:
        """Get a value from cache. Returns None on miss or error."""
        try:
            r = await self._get_redis()
            if r is None:
                return None
            raw = await r.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception:
            return None

    async def set(self, key: str, value: Any, ttl: int = TTL_RECOMMENDATIONS) -> bool:
        """Set a value in cache with TTL. Returns False on error."""
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.set(key, json.dumps(value, default=str), ex=ttl)
            return True
        except Exception:
            return False

    async def delete(self, key: str) -> bool:
        """Delete a key."""
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.delete(key)
            return True
        except Exception:
            return False

    # Typed helpers

    def recommendations_key(self, fingerprint: str) -> str:
        return f"recommendations:{fingerprint}"

    def fleet_fingerprint(self, payload: Any) -> str:
        """Stable short hash of the generator input."""
        raw = json.dumps(payload, sort_keys=True, default=str)
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16]

    async def get_recommendations(self, fingerprint: str) -> list[dict] | None:
        return await self.get(self.recommendations_key(fingerprint))

    async def set_recommendations(self, fingerprint: str, data: list[dict]):
        await self.set(self.recommendations_key(fingerprint), data, TTL_RECOMMENDATIONS)

    async def close(self):
        if self._redis:
            await self._redis.aclose()
            self._redis = None


cache_service = CacheService()
