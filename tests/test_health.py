import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from fanbase import main


@pytest.fixture()
def backends(monkeypatch, engine, fake_redis):
    monkeypatch.setattr(main, "engine", engine)
    monkeypatch.setattr(main, "redis_client", fake_redis)
    return fake_redis


@pytest.mark.asyncio
async def test_health_ok(client, backends):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "redis": "ok", "db": "ok"}


@pytest.mark.asyncio
async def test_health_degraded_when_redis_down(client, backends, monkeypatch):
    async def broken_ping():
        raise RedisConnectionError("connection refused")

    monkeypatch.setattr(backends, "ping", broken_ping)

    resp = await client.get("/health")
    assert resp.status_code == 503
    assert resp.json() == {"status": "degraded", "redis": "unavailable", "db": "ok"}
