from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from grantgate.api.admin.schemas import ConfigResponse
from grantgate.api.dependencies import (
    get_billing_service,
    get_config_service,
    get_current_user,
)
from grantgate.domain.monetization.schemas import (
    AccessDecision,
    UsageSnapshot,
    UserEntitlement,
)
from grantgate.services.billing_service import BillingService
from grantgate.services.config_service import ConfigService


router = APIRouter()


# ─────────────────────────────────────────────
# Response Schema
# ─────────────────────────────────────────────

class ConsumeResponse(BaseModel):
    feature_name: str
    allowed: bool = True
    usage: Optional[UsageSnapshot] = None


# ─────────────────────────────────────────────
# Routes
# ─────────────────────────────────────────────

@router.get(
    "/access/{feature_name}",
    response_model=AccessDecision,
    summary="Can the current user use this feature?",
)
async def check_access(
    feature_name: str,
    user: UserEntitlement = Depends(get_current_user),
    billing: BillingService = Depends(get_billing_service),
):
    """
    Read-only; never charges quota.
    """
    return await billing.check_access(user, feature_name)


@router.post(
    "/features/{feature_name}/consume",
    response_model=ConsumeResponse,
    summary="Gate and meter a feature that is about to run",
)
async def consume_feature(
    feature_name: str,
    user: UserEntitlement = Depends(get_current_user),
    billing: BillingService = Depends(get_billing_service),
):
    """
    Call right before running the metered action. Responds 402 with the
    decision when blocked.
    """
    usage = await billing.consume(user, feature_name)
    return ConsumeResponse(feature_name=feature_name, usage=usage)


@router.get(
    "/config",
    response_model=ConfigResponse,
    summary="Active monetization model",
)
async def get_config(
    user: UserEntitlement = Depends(get_current_user),
    service: ConfigService = Depends(get_config_service),
):
    """
    Lets the UI decide whether to show usage counters.
    """
    config = await service.get_config()
    return ConfigResponse(monetizationModel=config.model)
