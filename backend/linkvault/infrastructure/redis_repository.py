"""
Redis Repository Base Class

Provides JSON storage helpers and Lua script execution shared by the
Redis-backed repositories.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

logger = logging.getLogger(__name__)


class RedisRepository:
    """Base Redis repository with atomic operations."""

    def __init__(self, redis_client: redis.Redis, key_prefix: str = ""):
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _make_key(self, key: str) -> str:
        """Create a prefixed key for Redis storage."""
        return f"{self.key_prefix}:{key}" if self.key_prefix else key

    def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Get JSON data from Redis.

        Args:
            key: Redis key

        Returns:
            Dictionary if found and valid JSON, None otherwise

        Raises:
            RedisConnectionError, RedisTimeoutError: Redis is unreachable
        """
        data = self.redis.get(self._make_key(key))
        if data is None:
            return None
        try:
            return self.decode_json(data)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON stored under key {key}: {e}")
            return None

    @staticmethod
    def decode_json(data) -> Dict[str, Any]:
        """Decode a JSON payload returned by Redis as bytes or str."""
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return json.loads(data)

    def eval_script(self, script: str, keys: Sequence[str], args: Sequence[Any]) -> Any:
        """
        Run a Lua script atomically against prefixed keys.

        Errors propagate; callers decide how a failed atomic update is reported.

        Args:
            script: Lua source
            keys: Unprefixed key names passed as KEYS
            args: Values passed as ARGV

        Returns:
            Raw script result
        """
        redis_keys = [self._make_key(k) for k in keys]
        return self.redis.eval(script, len(redis_keys), *redis_keys, *args)

    def delete(self, key: str) -> bool:
        """
        Delete a key from Redis.

        Returns:
            True if key was deleted, False otherwise
        """
        return self.redis.delete(self._make_key(key)) > 0

    def exists(self, key: str) -> bool:
        """
        Check if a key exists in Redis.

        Returns:
            True if key exists, False otherwise
        """
        return self.redis.exists(self._make_key(key)) > 0

    def zrange_by_score(self, key: str, max_score: float, limit: int) -> List[str]:
        """
        Members of a sorted set with a score strictly below ``max_score``.

        Args:
            key: Sorted set key
            max_score: Exclusive upper bound
            limit: Maximum number of members

        Returns:
            Decoded members, lowest score first
        """
        members = self.redis.zrangebyscore(
            self._make_key(key), "-inf", f"({max_score}", start=0, num=limit
        )
        return [m.decode("utf-8") if isinstance(m, bytes) else m for m in members]

    def set_members(self, key: str) -> List[str]:
        """Decoded members of a set."""
        members = self.redis.smembers(self._make_key(key))
        return [m.decode("utf-8") if isinstance(m, bytes) else m for m in members]


class RedisConnectionManager:
    """Manages Redis connection with connection pooling."""

    def __init__(self, host: str = 'localhost', port: int = 6379, db: int = 0,
                 password: Optional[str] = None, max_connections: int = 20,
                 socket_timeout: float = 5.0, decode_responses: bool = False):
        self.connection_pool = redis.ConnectionPool(
            host=host,
            port=port,
            db=db,
            password=password,
            max_connections=max_connections,
            decode_responses=decode_responses,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            retry_on_timeout=True,
            socket_keepalive=True,
        )
        self._client = None

    @property
    def client(self) -> redis.Redis:
        """Get Redis client instance with connection pooling."""
        if self._client is None:
            self._client = redis.Redis(connection_pool=self.connection_pool)
        return self._client

    def health_check(self) -> bool:
        """Check if Redis connection is healthy."""
        try:
            return bool(self.client.ping())
        except (RedisConnectionError, RedisTimeoutError):
            return False

    def close(self):
        """Close the connection pool."""
        if self.connection_pool:
            self.connection_pool.disconnect()
