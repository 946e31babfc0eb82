from fastapi import APIRouter, Depends

from grantgate.api.dependencies import require_admin
from grantgate.api.admin.config import router as config_router
from grantgate.api.admin.usage import router as usage_router


router = APIRouter(
    dependencies=[Depends(require_admin)]
)

router.include_router(
    config_router,
    prefix="/config",
    tags=["Admin – Config"],
)

router.include_router(
    usage_router,
    prefix="/usage",
    tags=["Admin – Usage"],
)
