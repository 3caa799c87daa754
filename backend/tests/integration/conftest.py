import os

import pytest
import redis

from linkvault.infrastructure.redis_content_repository import RedisContentRepository
from linkvault.infrastructure.redis_repository import RedisRepository


@pytest.fixture
def redis_client():
    """
    Yields a clean Redis client for integration testing.
    Connects to the redis service defined by REDIS_HOST / REDIS_PORT.
    """
    host = os.getenv("REDIS_HOST", "localhost")
    port = int(os.getenv("REDIS_PORT", 6379))
    db = int(os.getenv("REDIS_TEST_DB", 15))

    client = redis.Redis(host=host, port=port, db=db, decode_responses=False, socket_timeout=2)

    try:
        client.ping()
    except (redis.ConnectionError, redis.TimeoutError):
        pytest.skip("Redis service not available. Skipping integration tests.")

    # Clean before test
    client.flushdb()

    yield client

    # Clean after test
    client.flushdb()
    client.close()


@pytest.fixture
def redis_content_repository(redis_client):
    return RedisContentRepository(RedisRepository(redis_client), grace_seconds=60)
