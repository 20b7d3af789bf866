"""DTOs for tenants (no dependency on ORM)."""

from dataclasses import dataclass

from app.domain.enums import TenantStatus


@dataclass(frozen=True)
class TenantResult:
    """Tenant read-model (result of get_by_id, get_by_code, create_tenant)."""

    id: str
    code: str
    name: str
    status: TenantStatus

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE
