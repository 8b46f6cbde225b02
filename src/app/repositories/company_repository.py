"""Company Repository Interface"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence
from src.domain.company import Company


class CompanyRepository(ABC):
    """Repository interface for Company lookups"""

    @abstractmethod
    async def get_by_id(self, company_id: int) -> Optional[Company]:
        """
        Retrieve company by ID

        Args:
            company_id: Company ID

        Returns:
            Company if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_ids(self, company_ids: Sequence[int]) -> Dict[int, Company]:
        """Retrieve several companies keyed by ID"""
        pass
