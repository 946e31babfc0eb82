import logging
from datetime import datetime
from typing import Callable, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from grantgate.domain.monetization.errors import StorageUnavailableError
from grantgate.domain.monetization.schemas import Subscription
from grantgate.domain.monetization.validators import validate_user_id
from grantgate.domain.monetization.windows import add_one_month, utcnow
from grantgate.persistence.repositories.user_repo import UserRepository
from grantgate.storage.base import KeyValueStore
from grantgate.storage.keys import StoreKeys

logger = logging.getLogger(__name__)


class SubscriptionService:
    """
    Free / Pro plan lifecycle.

    The subscription record lives in the key-value store; the user's
    `is_subscribed` flag (read by the subscription gate) is kept in sync
    through the users table.

    The flag is committed before the record is written, and put back if
    the write fails, so the two never disagree after an error.
    """

    FREE = "Free"
    PRO = "Pro"

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.clock = clock

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    async def get_subscription(self, user_id: int) -> Subscription:
        """
        Fetch a user's subscription, creating a Free one on first access.
        """
        validate_user_id(user_id)
        existing = await self._load(user_id)
        if existing is not None:
            return existing

        subscription = self._new(user_id, self.FREE)
        await self._save(subscription)
        return subscription

    async def create_pro_subscription(
        self,
        *,
        session: AsyncSession,
        user_id: int,
    ) -> Subscription:
        validate_user_id(user_id)

        subscription = self._new(user_id, self.PRO)
        await self._apply(session, subscription, is_subscribed=True)

        logger.info(f"User {user_id} upgraded to Pro")
        return subscription

    async def cancel_subscription(
        self,
        *,
        session: AsyncSession,
        user_id: int,
    ) -> Optional[Subscription]:
        """
        Cancel a Pro subscription. Returns None when there is nothing
        to cancel.
        """
        validate_user_id(user_id)

        subscription = await self._load(user_id)
        if subscription is None or subscription.plan != self.PRO:
            return None

        subscription.status = "canceled"
        await self._apply(session, subscription, is_subscribed=False)

        logger.info(f"User {user_id} canceled Pro")
        return subscription

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    async def _apply(
        self,
        session: AsyncSession,
        subscription: Subscription,
        is_subscribed: bool,
    ) -> None:
        user_id = subscription.user_id
        await self._set_flag(session, user_id, is_subscribed)

        try:
            await self._save(subscription)
        except StorageUnavailableError:
            logger.error(
                f"Reverting subscription flag for user {user_id} "
                "after the record could not be saved"
            )
            await self._set_flag(session, user_id, not is_subscribed)
            raise

    async def _set_flag(
        self,
        session: AsyncSession,
        user_id: int,
        is_subscribed: bool,
    ) -> None:
        try:
            repo = UserRepository(session)
            await repo.set_subscription_status(user_id, is_subscribed)
            await session.commit()
        except (SQLAlchemyError, OSError) as e:
            await session.rollback()
            logger.error(
                f"Could not update subscription flag for user {user_id}: {e}"
            )
            raise StorageUnavailableError(
                f"Could not update subscription for user {user_id}"
            ) from e

    def _new(self, user_id: int, plan: str) -> Subscription:
        return Subscription(
            user_id=user_id,
            plan=plan,
            status="active",
            current_period_end=add_one_month(self.clock()),
        )

    async def _load(self, user_id: int) -> Optional[Subscription]:
        record = await self.store.get(StoreKeys.user(user_id))
        if record is None:
            return None
        try:
            return Subscription.from_record(record)
        except (
            KeyError,
            TypeError,
            ValueError,
            OverflowError,
            OSError,
            ValidationError,
        ) as e:
            raise StorageUnavailableError(
                f"Subscription for user {user_id} is unreadable"
            ) from e

    async def _save(self, subscription: Subscription) -> None:
        await self.store.set(
            StoreKeys.user(subscription.user_id),
            subscription.to_record(),
        )
