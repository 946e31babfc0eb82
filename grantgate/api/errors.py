import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from grantgate.domain.monetization.errors import (
    FeatureBlockedError,
    InvalidFeatureNameError,
    InvalidMonetizationModelError,
    InvalidUserIdError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)


async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Temporarily unavailable, please retry"},
    )


async def invalid_input_handler(request: Request, exc: Exception):
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc)},
    )


async def feature_blocked_handler(request: Request, exc: FeatureBlockedError):
    return JSONResponse(
        status_code=status.HTTP_402_PAYMENT_REQUIRED,
        content={
            "detail": exc.decision.message,
            "decision": exc.decision.model_dump(mode="json"),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorageUnavailableError, storage_unavailable_handler)
    app.add_exception_handler(InvalidUserIdError, invalid_input_handler)
    app.add_exception_handler(InvalidFeatureNameError, invalid_input_handler)
    app.add_exception_handler(InvalidMonetizationModelError, invalid_input_handler)
    app.add_exception_handler(FeatureBlockedError, feature_blocked_handler)
