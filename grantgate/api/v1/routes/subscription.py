from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from grantgate.api.dependencies import get_current_user, get_subscription_service
from grantgate.domain.monetization.schemas import Subscription, UserEntitlement
from grantgate.persistence.db import get_db_session
from grantgate.services.subscription_service import SubscriptionService


router = APIRouter()


@router.get("", response_model=Subscription, summary="Current subscription")
async def get_subscription(
    user: UserEntitlement = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return await service.get_subscription(user.id)


@router.post("/pro", response_model=Subscription, summary="Upgrade to Pro")
async def upgrade_to_pro(
    user: UserEntitlement = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return await service.create_pro_subscription(session=session, user_id=user.id)


@router.post("/cancel", response_model=Subscription, summary="Cancel Pro")
async def cancel_subscription(
    user: UserEntitlement = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    service: SubscriptionService = Depends(get_subscription_service),
):
    subscription = await service.cancel_subscription(session=session, user_id=user.id)

    if subscription is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No Pro subscription to cancel",
        )

    return subscription
