import logging
from typing import Optional

from grantgate.domain.monetization.errors import FeatureBlockedError
from grantgate.domain.monetization.policy import AccessPolicy
from grantgate.domain.monetization.schemas import (
    AccessDecision,
    MonetizationModel,
    UsageSnapshot,
    UserEntitlement,
)
from grantgate.services.config_service import ConfigService
from grantgate.services.purchase_service import PurchaseService
from grantgate.services.usage_service import UsageLedger

logger = logging.getLogger(__name__)


class BillingService:
    """
    Handles access checks and usage recording around metered actions.

    Callers check first and record only right before the action runs,
    so opening a gated panel and cancelling costs no quota.
    """

    def __init__(
        self,
        config_service: ConfigService,
        ledger: UsageLedger,
        purchases: Optional[PurchaseService] = None,
    ):
        self.config_service = config_service
        self.ledger = ledger
        self.policy = AccessPolicy(ledger, purchases=purchases)

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    async def check_access(
        self,
        user: UserEntitlement,
        feature_name: str,
    ) -> AccessDecision:
        config = await self.config_service.get_config()
        return await self.policy.evaluate_access(config, user, feature_name)

    async def assert_access(
        self,
        user: UserEntitlement,
        feature_name: str,
    ) -> AccessDecision:
        decision = await self.check_access(user, feature_name)
        self._raise_if_blocked(user, decision)
        return decision

    async def consume(
        self,
        user: UserEntitlement,
        feature_name: str,
    ) -> Optional[UsageSnapshot]:
        """
        Gate a metered action that is about to run.

        Usage is recorded only under the usage-based model; the updated
        snapshot is returned then, None otherwise.
        """
        config = await self.config_service.get_config()
        decision = await self.policy.evaluate_access(config, user, feature_name)
        self._raise_if_blocked(user, decision)

        if config.known_model == MonetizationModel.USAGE_BASED:
            return await self.ledger.record_usage(user.id, feature_name)

        return None

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    def _raise_if_blocked(
        self,
        user: UserEntitlement,
        decision: AccessDecision,
    ) -> None:
        if decision.allowed:
            return

        logger.info(
            f"Blocked '{decision.feature_name}' for user {user.id} "
            f"({decision.reason.value})"
        )
        raise FeatureBlockedError(decision)
