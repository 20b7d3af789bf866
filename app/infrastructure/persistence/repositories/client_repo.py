"""Client repository (existence checks for task references)."""

from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.models.client import Client
from app.infrastructure.persistence.repositories.base import BaseRepository


class ClientRepository(BaseRepository[Client]):
    resource_name = "client"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Client)

    async def exists(self, tenant_id: str, client_id: str) -> bool:
        return await self.get_for_tenant(tenant_id, client_id) is not None
