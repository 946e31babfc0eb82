from pydantic import BaseModel, Field
from typing import Dict
from datetime import datetime


class ConfigUpdateRequest(BaseModel):
    monetizationModel: str = Field(
        ...,
        examples=["UsageBased"],
        description="Free, Subscription, PayPerFeature or UsageBased",
    )


class ConfigResponse(BaseModel):
    monetizationModel: str


class FeatureUsageEntry(BaseModel):
    count: int
    limit: int
    remaining: int
    window_end: datetime


class UserUsageResponse(BaseModel):
    user_id: int
    total_events: int
    by_feature: Dict[str, FeatureUsageEntry]
