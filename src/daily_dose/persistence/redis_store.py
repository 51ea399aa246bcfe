"""Redis-backed key-value store. Use when REDIS_URL is set."""

import logging

from daily_dose.persistence.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

KEY_NAMESPACE = "daily_dose:kv"


class RedisKeyValueStore(KeyValueStore):
    """Redis-backed store. Slot keys live under a common namespace."""

    def __init__(self, redis_url: str, namespace: str = KEY_NAMESPACE) -> None:
        self._redis_url = redis_url
        self._namespace = namespace
        self._client = None

    def _get_client(self):
        """Lazy-init Redis client."""
        if self._client is None:
            import redis
            self._client = redis.from_url(
                self._redis_url,
                decode_responses=True,
            )
        return self._client

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> str | None:
        try:
            return self._get_client().get(self._key(key))
        except Exception as e:
            logger.error("Redis get %s failed: %s", key, e)
            raise

    def set(self, key: str, value: str) -> None:
        try:
            self._get_client().set(self._key(key), value)
        except Exception as e:
            logger.error("Redis set %s failed: %s", key, e)
            raise

    def delete(self, key: str) -> None:
        try:
            self._get_client().delete(self._key(key))
        except Exception as e:
            logger.error("Redis delete %s failed: %s", key, e)
            raise
