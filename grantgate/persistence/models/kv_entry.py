from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from grantgate.persistence.base import Base


class KeyValueEntry(Base):
    """
    One JSON value of a namespaced key-value document.

    Backs SqlStore (usage counters, config, subscriptions, purchases).
    """

    __tablename__ = "kv_entries"

    namespace: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
        doc="featureUsage, appConfig, subscriptions, featurePurchases"
    )

    key: Mapped[str] = mapped_column(
        String(255),
        primary_key=True
    )

    value: Mapped[Any] = mapped_column(
        JSON,
        nullable=False
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )
