import uuid

import pytest

from mindnotes.core.redis_client import RedisClient


@pytest.mark.asyncio
async def test_oauth_state_is_single_use(fake_redis):
    user_id = uuid.uuid4()

    assert await fake_redis.store_oauth_state("abc", user_id, 300) is True
    assert fake_redis.redis.ttls["oauth_state:abc"] == 300

    assert await fake_redis.consume_oauth_state("abc") == user_id
    assert await fake_redis.consume_oauth_state("abc") is None


@pytest.mark.asyncio
async def test_malformed_state_entry(fake_redis):
    await fake_redis.set("oauth_state:weird", "not-a-uuid")
    assert await fake_redis.consume_oauth_state("weird") is None


@pytest.mark.asyncio
async def test_disconnected_client_degrades():
    client = RedisClient()

    assert await client.store_oauth_state("abc", uuid.uuid4(), 300) is False
    assert await client.consume_oauth_state("abc") is None


@pytest.mark.asyncio
async def test_errors_are_swallowed_into_defaults(fake_redis):
    async def _fail(*args, **kwargs):
        raise ConnectionError("redis down")

    fake_redis.redis.setex = _fail
    fake_redis.redis.getdel = _fail

    assert await fake_redis.set("k", "v", expire=10) is False
    assert await fake_redis.pop("k") is None


@pytest.mark.asyncio
async def test_disconnect(fake_redis):
    await fake_redis.disconnect()
    assert fake_redis.redis is None
