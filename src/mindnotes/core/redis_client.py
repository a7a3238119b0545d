"""Redis client for short-lived OAuth state."""

import logging
from typing import Optional
from uuid import UUID

import redis.asyncio as redis

from ..config import get_settings

logger = logging.getLogger(__name__)

OAUTH_STATE_PREFIX = "oauth_state:"


class RedisClient:
    """Redis client. Every call degrades to a no-op result when Redis is down."""

    def __init__(self):
        self.settings = get_settings()
        self.redis: Optional[redis.Redis] = None

    async def connect(self) -> None:
        """Connect to Redis."""
        try:
            self.redis = redis.from_url(
                self.settings.redis_url,
                max_connections=self.settings.redis_max_connections,
                decode_responses=True,
            )
            await self.redis.ping()
            logger.info("Connected to Redis successfully")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self.redis = None
            raise

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            logger.info("Disconnected from Redis")

    async def set(self, key: str, value: str, expire: Optional[int] = None) -> bool:
        """Set value with optional expiration (seconds)."""
        if not self.redis:
            return False
        try:
            if expire:
                return bool(await self.redis.setex(key, expire, value))
            return bool(await self.redis.set(key, value))
        except Exception as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    async def pop(self, key: str) -> Optional[str]:
        """Read and delete in one step."""
        if not self.redis:
            return None
        try:
            return await self.redis.getdel(key)
        except Exception as e:
            logger.error(f"Redis GETDEL error for key {key}: {e}")
            return None

    # OAuth state: maps a one-time state token to the user who started the flow

    async def store_oauth_state(self, state: str, user_id: UUID, expire: int) -> bool:
        return await self.set(f"{OAUTH_STATE_PREFIX}{state}", str(user_id), expire)

    async def consume_oauth_state(self, state: str) -> Optional[UUID]:
        value = await self.pop(f"{OAUTH_STATE_PREFIX}{state}")
        if not value:
            return None
        try:
            return UUID(value)
        except ValueError:
            logger.warning(f"Discarding malformed OAuth state entry for {state[:8]}...")
            return None


_redis_client: Optional[RedisClient] = None


def get_redis_client() -> RedisClient:
    """Get Redis client singleton (also used as a FastAPI dependency)."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client
