from fastapi import APIRouter, Depends

from grantgate.api.dependencies import get_current_user, get_usage_ledger
from grantgate.domain.monetization.schemas import UsageSnapshot, UserEntitlement
from grantgate.services.usage_service import UsageLedger


router = APIRouter()


@router.get(
    "/{feature_name}",
    response_model=UsageSnapshot,
    summary="Get this month's usage of a feature",
)
async def get_usage(
    feature_name: str,
    user: UserEntitlement = Depends(get_current_user),
    ledger: UsageLedger = Depends(get_usage_ledger),
):
    return await ledger.get_usage(user.id, feature_name)


@router.post(
    "/{feature_name}/record",
    response_model=UsageSnapshot,
    summary="Record one use of a feature",
)
async def record_usage(
    feature_name: str,
    user: UserEntitlement = Depends(get_current_user),
    ledger: UsageLedger = Depends(get_usage_ledger),
):
    """
    Unconditional: callers check access before recording.
    """
    return await ledger.record_usage(user.id, feature_name)
