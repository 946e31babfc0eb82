import logging
from typing import Optional

from grantgate.domain.monetization.schemas import (
    AccessDecision,
    BlockReason,
    MonetizationConfig,
    MonetizationModel,
    UserEntitlement,
)
from grantgate.domain.monetization.validators import validate_feature_name

logger = logging.getLogger(__name__)


class AccessPolicy:
    """
    Decides whether a user may use a premium feature under the active
    monetization model.

    This policy:
    - Is read-only (it never records usage)
    - Takes the config as an argument instead of loading it
    - Asks the usage ledger for live quota under the usage-based model
    """

    def __init__(self, ledger, purchases: Optional[object] = None):
        self.ledger = ledger
        # Anything with `async has_purchased(user_id, feature_name)`.
        # Without it, pay-per-feature always denies.
        self.purchases = purchases

    async def evaluate_access(
        self,
        config: MonetizationConfig,
        user: UserEntitlement,
        feature_name: str,
    ) -> AccessDecision:
        validate_feature_name(feature_name)

        if user.is_admin:
            return AccessDecision.allow(feature_name)

        model = config.known_model

        if model == MonetizationModel.FREE:
            return AccessDecision.allow(feature_name)

        if model == MonetizationModel.USAGE_BASED:
            usage = await self.ledger.get_usage(user.id, feature_name)
            if usage.remaining > 0:
                return AccessDecision.allow(feature_name)
            return AccessDecision.block(feature_name, BlockReason.QUOTA_EXHAUSTED)

        if model == MonetizationModel.SUBSCRIPTION:
            if user.is_subscribed:
                return AccessDecision.allow(feature_name)
            return AccessDecision.block(
                feature_name, BlockReason.SUBSCRIPTION_REQUIRED
            )

        if model == MonetizationModel.PAY_PER_FEATURE:
            if self.purchases is not None and await self.purchases.has_purchased(
                user.id, feature_name
            ):
                return AccessDecision.allow(feature_name)
            return AccessDecision.block(feature_name, BlockReason.PURCHASE_REQUIRED)

        logger.warning(
            "Unknown monetization model %r; allowing '%s' for user %s",
            config.model,
            feature_name,
            user.id,
        )
        return AccessDecision.allow(feature_name)
