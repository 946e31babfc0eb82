from typing import Generic, TypeVar, Type, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from grantgate.persistence.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic async repository for CRUD operations.

    Concrete repositories should extend this class
    and provide the model via the `model` attribute.
    """

    model: Type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    # ─────────────────────────────────────────────
    # Create
    # ─────────────────────────────────────────────

    async def add(self, instance: ModelType) -> ModelType:
        self.session.add(instance)
        await self.session.flush()
        return instance

    # ─────────────────────────────────────────────
    # Read
    # ─────────────────────────────────────────────

    async def get_by_id(self, id) -> Optional[ModelType]:
        stmt = select(self.model).where(self.model.id == id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
