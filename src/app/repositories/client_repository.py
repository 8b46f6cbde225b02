"""Client Repository Interface"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence
from src.domain.client import Client


class ClientRepository(ABC):
    """Repository interface for Client lookups"""

    @abstractmethod
    async def get_by_id(self, client_id: str) -> Optional[Client]:
        """
        Retrieve client by ID

        Args:
            client_id: Client ID

        Returns:
            Client if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_ids(self, client_ids: Sequence[str]) -> Dict[str, Client]:
        """Retrieve several clients keyed by ID"""
        pass
