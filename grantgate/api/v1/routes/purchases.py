from typing import List

from fastapi import APIRouter, Depends

from grantgate.api.dependencies import get_current_user, get_purchase_service
from grantgate.domain.monetization.schemas import FeaturePurchase, UserEntitlement
from grantgate.services.purchase_service import PurchaseService


router = APIRouter()


@router.get("", response_model=List[FeaturePurchase], summary="Unlocked features")
async def list_purchases(
    user: UserEntitlement = Depends(get_current_user),
    service: PurchaseService = Depends(get_purchase_service),
):
    return await service.list_purchases(user.id)


@router.post(
    "/{feature_name}",
    response_model=FeaturePurchase,
    summary="Unlock a feature for a one-time fee",
)
async def purchase_feature(
    feature_name: str,
    user: UserEntitlement = Depends(get_current_user),
    service: PurchaseService = Depends(get_purchase_service),
):
    """
    Payment capture happens upstream; this records the unlock.
    """
    return await service.purchase_feature(user.id, feature_name)
