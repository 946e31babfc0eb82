import copy
from typing import Any, Dict, List, Optional

from grantgate.storage.base import KeyValueStore


class InMemoryStore(KeyValueStore):
    """
    Process-local store backed by a dict.

    Values are deep-copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self, namespace: str, data: Optional[Dict[str, Any]] = None):
        super().__init__(namespace)
        self.data: Dict[str, Any] = data if data is not None else {}

    async def _get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self.data.get(key))

    async def _set(self, key: str, value: Any) -> None:
        self.data[key] = copy.deepcopy(value)

    async def _delete(self, key: str) -> None:
        self.data.pop(key, None)

    async def _keys(self) -> List[str]:
        return list(self.data)
