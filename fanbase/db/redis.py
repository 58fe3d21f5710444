# fanbase/db/redis.py

from redis import asyncio as aioredis

from fanbase.core.config import settings

# Connections are opened lazily on first command.
redis_client = aioredis.from_url(
    settings.REDIS_URL,
    encoding="utf-8",
    decode_responses=True,
)
