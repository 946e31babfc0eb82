from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from grantgate.domain.monetization.windows import from_epoch_ms, to_epoch_ms


# ─────────────────────────────────────────────
# Enumerations
# ─────────────────────────────────────────────

class MonetizationModel(str, Enum):
    FREE = "Free"
    SUBSCRIPTION = "Subscription"
    PAY_PER_FEATURE = "PayPerFeature"
    USAGE_BASED = "UsageBased"

    @classmethod
    def parse(cls, value: Any) -> Optional["MonetizationModel"]:
        """
        Return the matching model, or None for unrecognized values.
        """
        try:
            return cls(value)
        except ValueError:
            return None


class Role(str, Enum):
    ADMIN = "Admin"
    USER = "User"


class BlockReason(str, Enum):
    QUOTA_EXHAUSTED = "QuotaExhausted"
    SUBSCRIPTION_REQUIRED = "SubscriptionRequired"
    PURCHASE_REQUIRED = "PurchaseRequired"


# reason -> (upsell action, user-facing message)
UPSELL = {
    BlockReason.QUOTA_EXHAUSTED: (
        "upgrade to Pro for unlimited access",
        "You've used all your free credits for this feature this month. "
        "Come back next month or upgrade.",
    ),
    BlockReason.SUBSCRIPTION_REQUIRED: (
        "upgrade to Pro",
        "This is a Pro feature. Upgrade to Pro to unlock it.",
    ),
    BlockReason.PURCHASE_REQUIRED: (
        "unlock for a one-time fee",
        "Buy this feature to get one-time access.",
    ),
}


# ─────────────────────────────────────────────
# Users & Config
# ─────────────────────────────────────────────

class UserEntitlement(BaseModel):
    """
    The slice of a user that gating decisions need.
    """
    id: int
    role: Role = Role.USER
    is_subscribed: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class MonetizationConfig(BaseModel):
    """
    Deployment-wide monetization setting.

    `model` keeps unrecognized values as-is so the policy can apply
    its fallback branch to them.
    """
    model: str = MonetizationModel.FREE.value

    @field_validator("model", mode="before")
    @classmethod
    def _unwrap_enum(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value

    @property
    def known_model(self) -> Optional[MonetizationModel]:
        return MonetizationModel.parse(self.model)

    def to_record(self) -> Dict[str, Any]:
        return {"monetizationModel": self.model}


# ─────────────────────────────────────────────
# Usage
# ─────────────────────────────────────────────

class UsageCounter(BaseModel):
    """
    One feature's consumption by one user within the current window.
    """
    user_id: int
    feature_name: str
    count: int = Field(0, ge=0)
    window_end: datetime

    def is_stale(self, now: datetime) -> bool:
        return now >= self.window_end

    def to_record(self) -> Dict[str, int]:
        return {
            "count": self.count,
            "resetDate": to_epoch_ms(self.window_end),
        }

    @classmethod
    def from_record(
        cls,
        user_id: int,
        feature_name: str,
        record: Dict[str, Any],
    ) -> "UsageCounter":
        return cls(
            user_id=user_id,
            feature_name=feature_name,
            count=record["count"],
            window_end=from_epoch_ms(record["resetDate"]),
        )


class UsageSnapshot(BaseModel):
    count: int
    limit: int
    remaining: int


# ─────────────────────────────────────────────
# Decisions
# ─────────────────────────────────────────────

class AccessDecision(BaseModel):
    """
    Outcome of a gating check, shaped for the UI.
    """
    feature_name: str
    allowed: bool
    reason: Optional[BlockReason] = None
    upsell_action: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def allow(cls, feature_name: str) -> "AccessDecision":
        return cls(feature_name=feature_name, allowed=True)

    @classmethod
    def block(cls, feature_name: str, reason: BlockReason) -> "AccessDecision":
        action, message = UPSELL[reason]
        return cls(
            feature_name=feature_name,
            allowed=False,
            reason=reason,
            upsell_action=action,
            message=message,
        )


# ─────────────────────────────────────────────
# Subscriptions & Purchases
# ─────────────────────────────────────────────

class Subscription(BaseModel):
    user_id: int
    plan: str = Field("Free", description="Free or Pro")
    status: str = Field("active", description="active or canceled")
    current_period_end: datetime

    def to_record(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "plan": self.plan,
            "status": self.status,
            "currentPeriodEnd": to_epoch_ms(self.current_period_end),
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Subscription":
        return cls(
            user_id=record["userId"],
            plan=record["plan"],
            status=record["status"],
            current_period_end=from_epoch_ms(record["currentPeriodEnd"]),
        )


class FeaturePurchase(BaseModel):
    user_id: int
    feature_name: str
    purchased_at: datetime
