"""Tenant ORM model. Root entity for multi-tenant hierarchy (no tenant_id)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import TenantStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
    enum_check,
)


class Tenant(CuidMixin, TimestampMixin, Base):
    """An accounting firm. Table: tenant. Users log in with the firm's code."""

    __tablename__ = "tenant"

    code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=TenantStatus.ACTIVE.value, index=True
    )

    __table_args__ = (
        enum_check("status", TenantStatus.values(), "tenant_status_check"),
    )
