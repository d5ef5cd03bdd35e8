"""X-API-Key checks against a Redis set and/or a static key."""

from __future__ import annotations

import hmac
from typing import Optional

import redis

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="api_keys")


class ApiKeyChecker:
    """Validates keys; open (every request allowed) when nothing is configured."""

    def __init__(self, static_key: Optional[str] = None, *, redis_client=None, redis_set: str = "api_keys") -> None:
        self.static_key = static_key
        self.redis_client = redis_client
        self.redis_set = redis_set

    @classmethod
    def from_settings(cls, settings) -> "ApiKeyChecker":
        """Build the checker, connecting Redis only when a URL is configured."""
        client = None
        if settings.api_key_redis_url:
            try:
                client = redis.Redis.from_url(settings.api_key_redis_url)
                logger.info("API key checks will use Redis backend")
            except (redis.RedisError, ValueError) as exc:
                logger.warning("Failed to configure Redis for API key checks; falling back to static key",
                               extra={"error": str(exc)})
        return cls(settings.api_key, redis_client=client, redis_set=settings.api_key_redis_set)

    @property
    def enabled(self) -> bool:
        return bool(self.static_key) or self.redis_client is not None

    def is_valid(self, key: str) -> bool:
        """True if `key` is in the Redis set or equals the static key."""
        if self.redis_client is not None:
            try:
                if self.redis_client.sismember(self.redis_set, key):
                    return True
            except redis.RedisError as e:
                logger.warning("Redis API key lookup error; falling back to static key",
                               extra={"error": str(e)})

        return bool(self.static_key) and hmac.compare_digest(str(key), str(self.static_key))
