import json
from typing import Any, List, Optional

import redis.asyncio as redis

from grantgate.config import settings
from grantgate.storage.base import KeyValueStore


class RedisClient:
    """
    Async Redis client wrapper.
    """

    _client: Optional[redis.Redis] = None

    @classmethod
    def get_client(cls) -> redis.Redis:
        if cls._client is None:
            cls._client = redis.Redis(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                db=settings.REDIS_DB,
                password=settings.REDIS_PASSWORD,
                decode_responses=True,  # store strings, not bytes
                socket_timeout=5,
                socket_connect_timeout=5,
            )
        return cls._client

    # ─────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────

    @staticmethod
    def serialize(value: Any) -> str:
        return json.dumps(value)

    @staticmethod
    def deserialize(value: str) -> Any:
        return json.loads(value)


class RedisStore(KeyValueStore):
    """
    Key-value store on Redis. Keys live under `grantgate:<namespace>:`.
    No TTL: usage counters reset themselves lazily.
    """

    def __init__(self, namespace: str, client: Optional[redis.Redis] = None):
        super().__init__(namespace)
        self.client = client if client is not None else RedisClient.get_client()
        self.prefix = f"grantgate:{namespace}:"

    async def _get(self, key: str) -> Optional[Any]:
        value = await self.client.get(self.prefix + key)
        if value is None:
            return None
        return RedisClient.deserialize(value)

    async def _set(self, key: str, value: Any) -> None:
        await self.client.set(self.prefix + key, RedisClient.serialize(value))

    async def _delete(self, key: str) -> None:
        await self.client.delete(self.prefix + key)

    async def _keys(self) -> List[str]:
        return [
            full_key[len(self.prefix):]
            async for full_key in self.client.scan_iter(match=self.prefix + "*")
        ]
