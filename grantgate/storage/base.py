import logging
from typing import Any, List, Optional

from grantgate.domain.monetization.errors import StorageUnavailableError

logger = logging.getLogger(__name__)


class KeyValueStore:
    """
    Base key-value store abstraction.

    Values are JSON-compatible. Each store is scoped to a namespace
    (e.g. "featureUsage") so one backend can hold several documents.

    Backends implement the underscored methods; any error they raise
    surfaces as StorageUnavailableError.
    """

    def __init__(self, namespace: str):
        self.namespace = namespace

    # ─────────────────────────────────────────────
    # Core operations
    # ─────────────────────────────────────────────

    async def get(self, key: str) -> Optional[Any]:
        """
        Get value from store.
        Returns None if key does not exist.
        """
        try:
            return await self._get(key)
        except StorageUnavailableError:
            raise
        except Exception as e:
            raise self._unavailable("read", key, e) from e

    async def set(self, key: str, value: Any) -> None:
        try:
            await self._set(key, value)
        except StorageUnavailableError:
            raise
        except Exception as e:
            raise self._unavailable("write", key, e) from e

    async def delete(self, key: str) -> None:
        try:
            await self._delete(key)
        except StorageUnavailableError:
            raise
        except Exception as e:
            raise self._unavailable("delete", key, e) from e

    async def keys(self) -> List[str]:
        """
        List all keys in this namespace.
        """
        try:
            return await self._keys()
        except StorageUnavailableError:
            raise
        except Exception as e:
            raise self._unavailable("list", "*", e) from e

    # ─────────────────────────────────────────────
    # Backend hooks
    # ─────────────────────────────────────────────

    async def _get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    async def _set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    async def _delete(self, key: str) -> None:
        raise NotImplementedError

    async def _keys(self) -> List[str]:
        raise NotImplementedError

    def _unavailable(
        self,
        operation: str,
        key: str,
        error: Exception,
    ) -> StorageUnavailableError:
        logger.error(
            f"Storage {operation} failed for {self.namespace}:{key}: {error}"
        )
        return StorageUnavailableError(
            f"Could not {operation} '{key}' in '{self.namespace}'"
        )
