"""Optional Redis connection; VideoHub keeps serving requests without it."""

import redis
from redis.exceptions import RedisError
from videohub.config import settings
from videohub.logger import redis_logger


class RedisClient:
    """Thin wrapper that degrades to no-ops when Redis is unreachable."""

    def __init__(self, url: str):
        self._url = url
        self._client = None

    def connect(self) -> bool:
        """Open the connection; returns False and logs when Redis is down."""
        try:
            self._client = redis.from_url(
                self._url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30,
            )
            self._client.ping()
            redis_logger.info(f"Redis connected successfully ({settings.environment})")
            return True
        except RedisError as e:
            redis_logger.error(f"Redis connection failed: {e}")
            redis_logger.warning("Leaked assets will only be reported in the logs")
            self._client = None
            return False

    @property
    def client(self):
        return self._client

    def ping(self) -> bool:
        if not self._client:
            return False
        try:
            return bool(self._client.ping())
        except RedisError as e:
            redis_logger.debug(f"Redis PING error: {e}")
            return False

    def rpush(self, key: str, value: str) -> bool:
        """Append ``value`` to the list at ``key``."""
        if not self._client:
            return False

        try:
            self._client.rpush(key, value)
            return True
        except RedisError as e:
            redis_logger.error(f"Redis RPUSH error: {e}")
            return False

    def lrange(self, key: str) -> list[str]:
        if not self._client:
            return []

        try:
            return self._client.lrange(key, 0, -1)
        except RedisError as e:
            redis_logger.debug(f"Redis LRANGE error: {e}")
            return []

    def close(self):
        if self._client:
            self._client.close()
            self._client = None


# Global Redis client instance, connected on application startup
redis_client = RedisClient(settings.redis_url)


def get_redis():
    """Dependency for getting Redis client."""
    return redis_client
