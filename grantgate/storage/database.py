from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from grantgate.persistence.repositories.kv_repo import KeyValueRepository
from grantgate.storage.base import KeyValueStore


class SqlStore(KeyValueStore):
    """
    Key-value store on the `kv_entries` table.

    Every operation runs in its own session and commits immediately.
    """

    def __init__(
        self,
        namespace: str,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        super().__init__(namespace)
        self.session_factory = session_factory

    async def _get(self, key: str) -> Optional[Any]:
        async with self.session_factory() as session:
            return await KeyValueRepository(session).get_value(self.namespace, key)

    async def _set(self, key: str, value: Any) -> None:
        async with self.session_factory() as session:
            await KeyValueRepository(session).put_value(self.namespace, key, value)
            await session.commit()

    async def _delete(self, key: str) -> None:
        async with self.session_factory() as session:
            await KeyValueRepository(session).delete_value(self.namespace, key)
            await session.commit()

    async def _keys(self) -> List[str]:
        async with self.session_factory() as session:
            return await KeyValueRepository(session).list_keys(self.namespace)
