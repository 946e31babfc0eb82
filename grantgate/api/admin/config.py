from fastapi import APIRouter, Depends

from grantgate.api.admin.schemas import ConfigResponse, ConfigUpdateRequest
from grantgate.api.dependencies import get_config_service
from grantgate.services.config_service import ConfigService


router = APIRouter()


@router.get(
    "",
    response_model=ConfigResponse,
    summary="Get the active monetization model",
)
async def get_config(
    service: ConfigService = Depends(get_config_service),
):
    config = await service.get_config()
    return ConfigResponse(monetizationModel=config.model)


@router.put(
    "",
    response_model=ConfigResponse,
    summary="Change the monetization model",
)
async def set_monetization_model(
    payload: ConfigUpdateRequest,
    service: ConfigService = Depends(get_config_service),
):
    config = await service.set_monetization_model(payload.monetizationModel)
    return ConfigResponse(monetizationModel=config.model)
