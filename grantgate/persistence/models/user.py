import logging
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from grantgate.domain.monetization.schemas import Role, UserEntitlement
from grantgate.persistence.base import Base

logger = logging.getLogger(__name__)


class User(Base):
    """
    Represents an account as far as gating is concerned.

    Profiles, teams and grant data are owned elsewhere.
    """

    __tablename__ = "users"

    # ─────────────────────────────────────────────
    # Primary Key
    # ─────────────────────────────────────────────

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )

    # ─────────────────────────────────────────────
    # Identity
    # ─────────────────────────────────────────────

    username: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True
    )

    # ─────────────────────────────────────────────
    # Role & Entitlement
    # ─────────────────────────────────────────────

    role: Mapped[str] = mapped_column(
        String(20),
        default=Role.USER.value,
        nullable=False,
        doc="Admin or User"
    )

    is_subscribed: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False
    )

    # ─────────────────────────────────────────────
    # Timestamps
    # ─────────────────────────────────────────────

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def to_entitlement(self) -> UserEntitlement:
        """
        Unrecognized roles get regular user rights.
        """
        try:
            role = Role(self.role)
        except ValueError:
            logger.warning(
                f"User {self.id} has unknown role {self.role!r}; treating as User"
            )
            role = Role.USER

        return UserEntitlement(
            id=self.id,
            role=role,
            is_subscribed=self.is_subscribed,
        )
