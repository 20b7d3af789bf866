"""Client ORM model. CRM entity referenced by tasks; no behaviour of its own."""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import MultiTenantModel


class Client(MultiTenantModel, Base):
    __tablename__ = "client"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    entity_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    tax_id_last4: Mapped[str | None] = mapped_column(String(4), nullable=True)

    __table_args__ = (Index("ix_client_tenant_name", "tenant_id", "name"),)
