from datetime import datetime
from typing import Callable, List

from grantgate.domain.monetization.errors import StorageUnavailableError
from grantgate.domain.monetization.schemas import FeaturePurchase
from grantgate.domain.monetization.validators import (
    validate_feature_name,
    validate_user_id,
)
from grantgate.domain.monetization.windows import (
    from_epoch_ms,
    to_epoch_ms,
    utcnow,
)
from grantgate.storage.base import KeyValueStore
from grantgate.storage.keys import StoreKeys


class PurchaseService:
    """
    One-time feature unlocks for the pay-per-feature model.

    Storage layout:
        "<user_id>" -> {"<feature>": purchased_at_epoch_ms}
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.clock = clock

    async def purchase_feature(
        self,
        user_id: int,
        feature_name: str,
    ) -> FeaturePurchase:
        """
        Unlock a feature. Buying it again keeps the first purchase date.
        """
        validate_user_id(user_id)
        validate_feature_name(feature_name)

        key = StoreKeys.user(user_id)
        purchases = await self._load(key)

        if feature_name not in purchases:
            purchases[feature_name] = to_epoch_ms(self.clock())
            await self.store.set(key, purchases)

        return self._purchase(user_id, feature_name, purchases[feature_name])

    async def has_purchased(self, user_id: int, feature_name: str) -> bool:
        purchases = await self._load(StoreKeys.user(user_id))
        return feature_name in purchases

    async def list_purchases(self, user_id: int) -> List[FeaturePurchase]:
        validate_user_id(user_id)
        purchases = await self._load(StoreKeys.user(user_id))
        return [
            self._purchase(user_id, feature_name, purchased_at)
            for feature_name, purchased_at in sorted(purchases.items())
        ]

    def _purchase(
        self,
        user_id: int,
        feature_name: str,
        purchased_at,
    ) -> FeaturePurchase:
        try:
            return FeaturePurchase(
                user_id=user_id,
                feature_name=feature_name,
                purchased_at=from_epoch_ms(purchased_at),
            )
        except (TypeError, ValueError, OverflowError, OSError) as e:
            raise StorageUnavailableError(
                f"Purchase of '{feature_name}' for user {user_id} is unreadable"
            ) from e

    async def _load(self, key: str) -> dict:
        purchases = await self.store.get(key)
        if purchases is None:
            return {}
        if not isinstance(purchases, dict):
            raise StorageUnavailableError(f"Purchases for user {key} are unreadable")
        return purchases
