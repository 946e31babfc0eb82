from sqlalchemy.ext.asyncio import AsyncSession

from grantgate.persistence.repositories.base import BaseRepository
from grantgate.persistence.models.user import User


class UserRepository(BaseRepository[User]):
    """
    Repository for User model.
    """

    model = User

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def set_subscription_status(
        self,
        user_id: int,
        is_subscribed: bool
    ) -> User | None:
        """
        Flip the subscription flag read by the subscription gate.
        """
        user = await self.get_by_id(user_id)
        if user:
            user.is_subscribed = is_subscribed
            await self.session.flush()
        return user
