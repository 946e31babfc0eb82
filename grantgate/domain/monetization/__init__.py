"""
Monetization domain

Feature gating and usage metering for premium capabilities.
"""

from grantgate.domain.monetization.errors import (
    FeatureBlockedError,
    InvalidFeatureNameError,
    InvalidMonetizationModelError,
    InvalidUserIdError,
    MonetizationError,
    StorageUnavailableError,
)
from grantgate.domain.monetization.policy import AccessPolicy
from grantgate.domain.monetization.schemas import (
    AccessDecision,
    BlockReason,
    FeaturePurchase,
    MonetizationConfig,
    MonetizationModel,
    Role,
    Subscription,
    UsageCounter,
    UsageSnapshot,
    UserEntitlement,
)

__all__ = [
    "AccessDecision",
    "AccessPolicy",
    "BlockReason",
    "FeatureBlockedError",
    "FeaturePurchase",
    "InvalidFeatureNameError",
    "InvalidMonetizationModelError",
    "InvalidUserIdError",
    "MonetizationConfig",
    "MonetizationError",
    "MonetizationModel",
    "Role",
    "StorageUnavailableError",
    "Subscription",
    "UsageCounter",
    "UsageSnapshot",
    "UserEntitlement",
]
