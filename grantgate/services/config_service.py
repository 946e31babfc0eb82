import logging

from grantgate.config import settings
from grantgate.domain.monetization.errors import (
    InvalidMonetizationModelError,
    StorageUnavailableError,
)
from grantgate.domain.monetization.schemas import (
    MonetizationConfig,
    MonetizationModel,
)
from grantgate.storage.base import KeyValueStore
from grantgate.storage.keys import StoreKeys

logger = logging.getLogger(__name__)


class ConfigService:
    """
    Reads and changes the deployment-wide monetization model.

    Used by:
    - BillingService (every gating decision)
    - Admin config API
    """

    def __init__(self, store: KeyValueStore, default_model: str | None = None):
        self.store = store
        self.default_model = default_model or settings.DEFAULT_MONETIZATION_MODEL

    async def get_config(self) -> MonetizationConfig:
        record = await self.store.get(StoreKeys.CONFIG)

        if record is None:
            return MonetizationConfig(model=self.default_model)

        if not isinstance(record, dict) or "monetizationModel" not in record:
            raise StorageUnavailableError("Stored app config is unreadable")

        config = MonetizationConfig(model=str(record["monetizationModel"]))
        if config.known_model is None:
            logger.warning(
                f"Stored monetization model '{config.model}' is not recognized; "
                "features will not be gated"
            )
        return config

    async def set_monetization_model(self, model: str) -> MonetizationConfig:
        """
        Activate a monetization model. Last writer wins.
        """
        parsed = MonetizationModel.parse(model)
        if parsed is None:
            allowed = ", ".join(m.value for m in MonetizationModel)
            raise InvalidMonetizationModelError(
                f"Unknown monetization model '{model}' (expected one of: {allowed})"
            )

        record = await self.store.get(StoreKeys.CONFIG)
        if not isinstance(record, dict):
            record = {}

        config = MonetizationConfig(model=parsed)
        record.update(config.to_record())
        await self.store.set(StoreKeys.CONFIG, record)

        logger.info(f"Monetization model set to {parsed.value}")
        return config
