from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from grantgate.domain.monetization.schemas import UserEntitlement
from grantgate.persistence.db import get_db_session
from grantgate.persistence.repositories.user_repo import UserRepository
from grantgate.services.billing_service import BillingService
from grantgate.services.config_service import ConfigService
from grantgate.services.purchase_service import PurchaseService
from grantgate.services.subscription_service import SubscriptionService
from grantgate.services.usage_service import UsageLedger
from grantgate.storage.factory import build_store
from grantgate.storage.keys import StoreKeys


# ─────────────────────────────────────────────
# Users
# ─────────────────────────────────────────────

async def get_current_user(
    x_user_id: int | None = Header(None, alias="X-User-Id"),
    session: AsyncSession = Depends(get_db_session),
) -> UserEntitlement:
    """
    Resolve the calling user.

    NOTE:
    Sessions are owned by the main application; it forwards the
    authenticated user id in the X-User-Id header.
    """
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    repo = UserRepository(session)
    user = await repo.get_by_id(x_user_id)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    return user.to_entitlement()


async def require_admin(
    user: UserEntitlement = Depends(get_current_user),
) -> UserEntitlement:
    """
    Ensure the current user is an admin.
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )

    return user


# ─────────────────────────────────────────────
# Services (one per process so ledger locks are shared)
# ─────────────────────────────────────────────

@lru_cache
def get_usage_ledger() -> UsageLedger:
    return UsageLedger(build_store(StoreKeys.FEATURE_USAGE))


@lru_cache
def get_config_service() -> ConfigService:
    return ConfigService(build_store(StoreKeys.APP_CONFIG))


@lru_cache
def get_purchase_service() -> PurchaseService:
    return PurchaseService(build_store(StoreKeys.FEATURE_PURCHASES))


@lru_cache
def get_subscription_service() -> SubscriptionService:
    return SubscriptionService(build_store(StoreKeys.SUBSCRIPTIONS))


def get_billing_service(
    config_service: ConfigService = Depends(get_config_service),
    ledger: UsageLedger = Depends(get_usage_ledger),
    purchases: PurchaseService = Depends(get_purchase_service),
) -> BillingService:
    return BillingService(config_service, ledger, purchases=purchases)
