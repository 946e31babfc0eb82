from fastapi import APIRouter

from grantgate.api.v1.routes.health import router as health_router
from grantgate.api.v1.routes.usage import router as usage_router
from grantgate.api.v1.routes.access import router as access_router
from grantgate.api.v1.routes.subscription import router as subscription_router
from grantgate.api.v1.routes.purchases import router as purchases_router

from grantgate.api.admin.router import router as admin_router
api_router = APIRouter()

# ─────────────────────────────────────────────
# Public Routes
# ─────────────────────────────────────────────

api_router.include_router(
    health_router,
    tags=["Health"],
)

api_router.include_router(
    access_router,
    tags=["Access"],
)

api_router.include_router(usage_router, prefix="/usage", tags=["Usage"])
api_router.include_router(subscription_router, prefix="/subscription", tags=["Subscription"])
api_router.include_router(purchases_router, prefix="/purchases", tags=["Purchases"])

# ─────────────────────────────────────────────
# Admin Routes
# ─────────────────────────────────────────────

api_router.include_router(
    admin_router,
    prefix="/admin",
    tags=["Admin"],
)
