from fastapi import APIRouter, Depends

from grantgate.api.admin.schemas import FeatureUsageEntry, UserUsageResponse
from grantgate.api.dependencies import get_usage_ledger
from grantgate.services.usage_service import UsageLedger


router = APIRouter()


@router.get(
    "/user/{user_id}",
    response_model=UserUsageResponse,
    summary="Get usage summary for a user",
)
async def get_user_usage(
    user_id: int,
    ledger: UsageLedger = Depends(get_usage_ledger),
):
    """
    Inspect a user's counters for the current windows.
    """
    counters = await ledger.list_user_usage(user_id)

    return UserUsageResponse(
        user_id=user_id,
        total_events=sum(c.count for c in counters.values()),
        by_feature={
            name: FeatureUsageEntry(
                **ledger.snapshot(c).model_dump(),
                window_end=c.window_end,
            )
            for name, c in counters.items()
        },
    )
