from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from grantgate.storage.base import KeyValueStore


class FakeClock:
    """
    Settable clock for window arithmetic.
    """

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class BrokenStore(KeyValueStore):
    """
    Store whose backend always fails.
    """

    def __init__(self, namespace: str = "broken"):
        super().__init__(namespace)

    async def _get(self, key: str) -> Optional[Any]:
        raise ConnectionError("backend down")

    async def _set(self, key: str, value: Any) -> None:
        raise ConnectionError("backend down")

    async def _delete(self, key: str) -> None:
        raise ConnectionError("backend down")

    async def _keys(self):
        raise ConnectionError("backend down")
