from typing import Dict

from grantgate.config import settings
from grantgate.storage.base import KeyValueStore
from grantgate.storage.file import JsonFileStore
from grantgate.storage.memory import InMemoryStore


# Shared so every caller in the process sees the same in-memory data
_memory_stores: Dict[str, InMemoryStore] = {}


def build_store(namespace: str, backend: str | None = None) -> KeyValueStore:
    """
    Build the store for a namespace using the configured backend.
    """
    backend = (backend or settings.STORAGE_BACKEND).lower()

    if backend == "memory":
        if namespace not in _memory_stores:
            _memory_stores[namespace] = InMemoryStore(namespace)
        return _memory_stores[namespace]

    if backend == "file":
        return JsonFileStore(namespace, settings.STORAGE_DIR)

    if backend == "redis":
        from grantgate.storage.redis import RedisStore
        return RedisStore(namespace)

    if backend == "database":
        from grantgate.persistence.db import AsyncSessionLocal
        from grantgate.storage.database import SqlStore
        return SqlStore(namespace, AsyncSessionLocal)

    raise ValueError(
        f"Unknown STORAGE_BACKEND '{backend}' "
        "(expected memory, file, redis or database)"
    )


def reset_memory_stores() -> None:
    _memory_stores.clear()
