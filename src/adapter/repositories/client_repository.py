"""SQLAlchemy Client Repository Implementation"""

from typing import Dict, Optional, Sequence
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.client_repository import ClientRepository
from src.domain.client import Client


class SqlAlchemyClientRepository(ClientRepository):
    """SQLAlchemy implementation of ClientRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, client_id: str) -> Optional[Client]:
        statement = select(Client).where(Client.id == client_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_ids(self, client_ids: Sequence[str]) -> Dict[str, Client]:
        ids = [client_id for client_id in client_ids if client_id]
        if not ids:
            return {}

        statement = select(Client).where(Client.id.in_(ids))
        result = await self.session.execute(statement)
        return {client.id: client for client in result.scalars().all()}
