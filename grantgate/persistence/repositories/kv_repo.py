from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from grantgate.persistence.repositories.base import BaseRepository
from grantgate.persistence.models.kv_entry import KeyValueEntry


class KeyValueRepository(BaseRepository[KeyValueEntry]):
    """
    Repository for namespaced JSON values.
    """

    model = KeyValueEntry

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def get_value(self, namespace: str, key: str) -> Any | None:
        stmt = select(KeyValueEntry.value).where(
            KeyValueEntry.namespace == namespace,
            KeyValueEntry.key == key,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def put_value(self, namespace: str, key: str, value: Any) -> None:
        entry = await self.session.get(KeyValueEntry, (namespace, key))
        if entry is None:
            await self.add(
                KeyValueEntry(namespace=namespace, key=key, value=value)
            )
        else:
            entry.value = value
            await self.session.flush()

    async def delete_value(self, namespace: str, key: str) -> None:
        await self.session.execute(
            delete(KeyValueEntry).where(
                KeyValueEntry.namespace == namespace,
                KeyValueEntry.key == key,
            )
        )

    async def list_keys(self, namespace: str) -> list[str]:
        stmt = (
            select(KeyValueEntry.key)
            .where(KeyValueEntry.namespace == namespace)
            .order_by(KeyValueEntry.key)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
